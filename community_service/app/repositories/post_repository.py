from __future__ import annotations

from datetime import datetime, timezone

from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database

from common.mongo.types import parse_object_id

from ..models.pagination import ListPostsFilter
from ..models.post import Post, PostFields
from .documents.post_document import PostDocument
from .interfaces import PostRepositoryInterface


# 목록 정렬 기준: 최신순, 동일 시각이면 _id 역순 (페이지 경계가 흔들리지 않도록)
LIST_SORT = [("created_at", DESCENDING), ("_id", DESCENDING)]


class PostRepository(PostRepositoryInterface):
    """posts 컬렉션에 대한 MongoDB 접근 레이어."""

    def __init__(self, database: Database) -> None:
        self._db = database
        self._col = database["posts"]

    @staticmethod
    def _from_document(doc: dict) -> Post:
        return PostDocument.model_validate(doc).to_domain()

    def insert(self, post: Post) -> Post:
        now = datetime.now(timezone.utc)
        post.created_at = now
        post.updated_at = now

        payload = PostDocument.from_domain(post).to_mongo_record()
        result = self._col.insert_one(payload)
        payload["_id"] = result.inserted_id
        return self._from_document(payload)

    def find_by_id(self, post_id: str) -> Post | None:
        oid = parse_object_id(post_id)
        if oid is None:
            return None
        doc = self._col.find_one({"_id": oid})
        if not doc:
            return None
        return self._from_document(doc)

    def list(self, flt: ListPostsFilter) -> list[Post]:
        """카테고리/ID 집합 필터와 skip/limit 기준으로 게시글 목록을 반환한다."""

        if flt.pagination.is_past_max_skip:
            return []

        filter_doc: dict = {"category": flt.category}

        if flt.post_ids is not None:
            oids = [oid for oid in map(parse_object_id, flt.post_ids) if oid]
            if not oids:
                return []
            filter_doc["_id"] = {"$in": oids}

        cursor = self._col.find(
            filter_doc,
            sort=LIST_SORT,
            skip=flt.pagination.skip,
            limit=flt.pagination.limit,
        )
        return [self._from_document(doc) for doc in cursor]

    def increment_view_count(self, post_id: str) -> Post | None:
        oid = parse_object_id(post_id)
        if oid is None:
            return None
        # 읽고-쓰기 대신 $inc 단일 연산으로 처리해 동시 조회 시에도 증가분이 유실되지 않는다.
        doc = self._col.find_one_and_update(
            {"_id": oid},
            {"$inc": {"view_count": 1}},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            return None
        return self._from_document(doc)

    def replace_fields(self, post_id: str, author_id: str, fields: PostFields) -> bool:
        oid = parse_object_id(post_id)
        if oid is None:
            return False
        set_doc = fields.model_dump()
        set_doc["updated_at"] = datetime.now(timezone.utc)
        result = self._col.update_one(
            {"_id": oid, "author_id": author_id},
            {"$set": set_doc},
        )
        return result.matched_count > 0

    def delete(self, post_id: str, author_id: str) -> bool:
        oid = parse_object_id(post_id)
        if oid is None:
            return False
        result = self._col.delete_one({"_id": oid, "author_id": author_id})
        return result.deleted_count > 0

    def increment_bookmark_count(self, post_id: str, delta: int) -> int | None:
        oid = parse_object_id(post_id)
        if oid is None:
            return None
        doc = self._col.find_one_and_update(
            {"_id": oid},
            {"$inc": {"bookmark_count": delta}},
            projection={"bookmark_count": 1},
            return_document=ReturnDocument.AFTER,
        )
        if not doc:
            return None
        return int(doc.get("bookmark_count", 0))
