"""Mongo 도큐먼트 <-> 도메인 모델 변환에 쓰는 공통 타입."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional, TypeVar

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field
from pydantic.functional_validators import BeforeValidator
from typing_extensions import Annotated


DocumentT = TypeVar("DocumentT", bound="BaseDocument")


def ensure_utc_datetime(value: datetime) -> datetime:
    """naive datetime 은 UTC 로 간주하고, aware datetime 은 UTC 로 변환한다."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_object_id(value: Any) -> Optional[ObjectId]:
    """외부 입력(path parameter 등)을 ObjectId 로 변환한다.

    24자리 hex 문자열만 받는다. 형식이 잘못된 값은 예외 대신 None 을 반환해,
    호출 측에서 "존재하지 않음"으로 취급한다.
    """

    if isinstance(value, ObjectId):
        return value
    if not isinstance(value, str) or len(value) != 24 or not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


def _coerce_object_id(value: Any) -> ObjectId:
    oid = parse_object_id(value)
    if oid is None:
        raise ValueError(f"invalid ObjectId: {value!r}")
    return oid


def from_object_id(value: Optional[ObjectId]) -> Optional[str]:
    if value is None:
        return None
    return str(value)


PyObjectId = Annotated[ObjectId, BeforeValidator(_coerce_object_id)]
MongoDateTime = Annotated[datetime, BeforeValidator(ensure_utc_datetime)]


class BaseDocument(BaseModel):
    """MongoDB 도큐먼트용 공통 베이스 모델.

    - 도메인 모델의 문자열 id 를 `_id`(ObjectId) 로 옮겨 담는다.
    - 모든 시각은 UTC aware datetime 으로 저장/조회한다.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    id: Optional[PyObjectId] = Field(default=None, alias="_id")
    created_at: MongoDateTime
    updated_at: MongoDateTime

    @classmethod
    def from_domain_model(cls: type[DocumentT], model: BaseModel) -> DocumentT:
        """도메인 모델을 도큐먼트로 변환한다. updated_at 이 없는 모델은 created_at 을 쓴다."""

        data = model.model_dump(exclude={"id"})
        domain_id = getattr(model, "id", None)
        if domain_id:
            data["_id"] = domain_id
        data.setdefault("updated_at", data.get("created_at"))
        return cls.model_validate(data)

    def domain_fields(self) -> dict[str, Any]:
        """도메인 모델 생성자에 넘길 필드. `_id` 는 문자열 id 로 바뀐다."""

        data = self.model_dump(exclude={"id"})
        data["id"] = from_object_id(self.id)
        return data

    def to_mongo_record(self) -> dict[str, Any]:
        """MongoDB 저장용 dict. `_id` 가 비어 있으면 빠지므로 Mongo 가 새로 생성한다."""

        return self.model_dump(by_alias=True, exclude_none=True)
