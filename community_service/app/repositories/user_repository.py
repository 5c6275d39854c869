from __future__ import annotations

from datetime import datetime, timezone

from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from common.mongo.types import parse_object_id

from ..exceptions import DuplicateNickname
from ..models.user import ProfileUpdate, User
from .documents.user_document import UserDocument
from .interfaces import UserRepositoryInterface


def _is_nickname_conflict(exc: DuplicateKeyError) -> bool:
    details = exc.details or {}
    key_pattern = details.get("keyPattern") or {}
    if "nickname" in key_pattern:
        return True
    return "uniq_nickname" in str(exc)


class UserRepository(UserRepositoryInterface):
    """users 컬렉션에 대한 MongoDB 접근 레이어."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["users"]

    @staticmethod
    def _from_document(doc: dict) -> User:
        return UserDocument.model_validate(doc).to_domain()

    def find_by_id(self, user_id: str) -> User | None:
        oid = parse_object_id(user_id)
        if oid is None:
            return None
        doc = self._col.find_one({"_id": oid})
        if not doc:
            return None
        return self._from_document(doc)

    def find_by_sns(self, sns_type: str, sns_id: str) -> User | None:
        doc = self._col.find_one({"sns_type": sns_type, "sns_id": sns_id})
        if not doc:
            return None
        return self._from_document(doc)

    def insert_if_absent(self, user: User) -> tuple[User, bool]:
        now = datetime.now(timezone.utc)
        user.created_at = now
        user.updated_at = now

        sns_filter = {"sns_type": user.sns_type, "sns_id": user.sns_id}
        payload = UserDocument.from_domain(user).to_mongo_record()

        created = False
        try:
            # 조회 후 insert 하는 두 단계 대신 upsert 한 번으로 처리한다.
            # (sns_type, sns_id) 유니크 인덱스가 동시 가입 요청의 중복 생성을 막는다.
            result = self._col.update_one(
                sns_filter,
                {"$setOnInsert": payload},
                upsert=True,
            )
            created = result.upserted_id is not None
        except DuplicateKeyError as exc:
            if _is_nickname_conflict(exc):
                raise DuplicateNickname() from exc
            # 같은 SNS 계정의 동시 요청이 먼저 생성한 경우: 기존 유저를 그대로 사용한다.
            created = False

        found = self._col.find_one(sns_filter)
        assert found is not None
        return self._from_document(found), created

    def update_profile(self, user_id: str, update: ProfileUpdate) -> User | None:
        oid = parse_object_id(user_id)
        if oid is None:
            return None

        set_doc = update.model_dump()
        set_doc["updated_at"] = datetime.now(timezone.utc)
        try:
            result = self._col.find_one_and_update(
                {"_id": oid},
                {"$set": set_doc},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as exc:
            raise DuplicateNickname() from exc
        if not result:
            return None
        return self._from_document(result)

    def exists_nickname(self, nickname: str) -> bool:
        found = self._col.find_one({"nickname": nickname}, {"_id": 1})
        return found is not None
