from __future__ import annotations

from datetime import datetime, timezone

from pymongo import DESCENDING
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from ..exceptions import AlreadyBookmarked
from ..models.bookmark import Bookmark
from .documents.bookmark_document import BookmarkDocument
from .interfaces import BookmarkRepositoryInterface


class BookmarkRepository(BookmarkRepositoryInterface):
    """bookmarks 컬렉션에 대한 MongoDB 접근 레이어."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["bookmarks"]

    def create(self, user_id: str, post_id: str) -> Bookmark:
        now = datetime.now(timezone.utc)
        doc = BookmarkDocument.from_domain(
            Bookmark(user_id=user_id, post_id=post_id, created_at=now)
        )
        payload = doc.to_mongo_record()
        try:
            # 존재 여부를 먼저 확인하지 않고 (user_id, post_id) 유니크 인덱스에 맡긴다.
            result = self._col.insert_one(payload)
        except DuplicateKeyError as exc:
            raise AlreadyBookmarked() from exc

        payload["_id"] = result.inserted_id
        return BookmarkDocument.model_validate(payload).to_domain()

    def delete(self, user_id: str, post_id: str) -> bool:
        result = self._col.delete_one({"user_id": user_id, "post_id": post_id})
        return result.deleted_count > 0

    def list_post_ids_by_user(self, user_id: str) -> list[str]:
        cursor = self._col.find(
            {"user_id": user_id},
            {"post_id": 1},
            sort=[("created_at", DESCENDING), ("_id", DESCENDING)],
        )
        ids: list[str] = []
        for raw in cursor:
            value = raw.get("post_id")
            if value is not None:
                ids.append(str(value))
        return ids

    def delete_all_by_post_id(self, post_id: str) -> int:
        result = self._col.delete_many({"post_id": post_id})
        return result.deleted_count
