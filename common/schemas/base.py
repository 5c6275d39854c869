from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated

from pydantic import BaseModel, ConfigDict
from pydantic.functional_serializers import PlainSerializer


def to_camel(value: str) -> str:
    """snake_case 필드명을 camelCase JSON 키로 변환한다. (view_count -> viewCount)"""

    parts = value.split("_")
    return parts[0] + "".join(p.title() for p in parts[1:])


def serialize_datetime_to_utc_iso8601(value: datetime) -> str:
    """모든 datetime을 UTC 기준 ISO8601(+타임존) 문자열로 직렬화한다."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    else:
        value = value.astimezone(timezone.utc)
    return value.isoformat()


UtcDateTime = Annotated[
    datetime,
    PlainSerializer(
        serialize_datetime_to_utc_iso8601,
        return_type=str,
        when_used="json",
    ),
]


class CamelSchema(BaseModel):
    """API 요청/응답 스키마 공통 베이스.

    - JSON 은 camelCase, 파이썬 코드는 snake_case 로 다룬다.
    - populate_by_name=True 이므로 내부에서는 snake_case 이름으로 생성할 수 있다.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        str_strip_whitespace=True,
    )
