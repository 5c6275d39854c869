from __future__ import annotations

import logging
import threading
from typing import Optional, cast

from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.database import Database

from .config import (
    get_mongo_db_name,
    get_mongo_uri,
    get_server_selection_timeout_ms,
)


logger = logging.getLogger(__name__)


_client: Optional[MongoClient] = None
_db: Optional[Database] = None
_lock = threading.Lock()


def get_client() -> MongoClient:
    """전역 MongoClient 싱글톤을 반환한다.

    - MONGO_URI 에서 URI 를 읽어온다.
    - ping 으로 연결을 검증한다.
    - URI 에 기본 데이터베이스가 포함되어 있지 않으면 에러를 발생시킨다.
    - posts / users / bookmarks 컬렉션에 필요한 인덱스를 한 번만 생성한다.
    """

    global _client, _db

    if _client is not None:
        return _client

    with _lock:
        if _client is not None:
            return _client

        uri = get_mongo_uri()
        client: MongoClient = MongoClient(
            uri,
            serverSelectionTimeoutMS=get_server_selection_timeout_ms(),
            tz_aware=True,
        )

        try:
            client.admin.command("ping")
        except Exception as exc:  # noqa: BLE001
            client.close()
            raise RuntimeError(f"failed to connect to MongoDB: {exc}") from exc

        # 사용할 DB 이름 결정: MONGO_DB_NAME 우선, 없으면 URI의 기본 DB 사용
        db_name = get_mongo_db_name()
        try:
            if db_name:
                db = client[db_name]
            else:
                db = client.get_default_database()
        except Exception as exc:  # noqa: BLE001
            client.close()
            raise RuntimeError(
                "MongoDB database name must be specified via MONGO_DB_NAME or in MONGO_URI (mongodb://.../db_name)",
            ) from exc

        try:
            ensure_indexes(db)
        except Exception as exc:  # noqa: BLE001
            # 유니크 인덱스가 없으면 중복 북마크/중복 계정을 막을 수 없으므로 치명적 오류로 본다.
            client.close()
            logger.error("failed to ensure MongoDB indexes: %s", exc)
            raise

        _client = client
        _db = db

        safe_db = cast(Database, _db)
        logger.info("MongoDB connected and indexes ensured (db=%s)", safe_db.name)
        return _client


def get_database() -> Database:
    """전역 기본 Database 객체를 반환한다. FastAPI 의존성으로도 사용된다."""

    global _db

    if _db is None:
        get_client()
    assert (
        _db is not None
    )  # get_client 에서 _db 를 초기화하지 못했다면 예외가 이미 발생했어야 한다.
    return _db


def close_client() -> None:
    """애플리케이션 종료 시 싱글톤 클라이언트를 닫는다."""

    global _client, _db

    with _lock:
        if _client is not None:
            _client.close()
            logger.info("MongoDB client closed")
        _client = None
        _db = None


def ensure_indexes(db: Database) -> None:
    """필수 인덱스를 생성한다.

    중복 생성해도 MongoDB 가 처리하므로 idempotent 하다.
    유니크 인덱스는 check-then-insert 경쟁 상태를 저장소 레벨에서 막는 역할을 한다.
    """

    posts = db["posts"]

    # 카테고리 목록 조회: category + created_at desc + _id desc
    posts.create_index(
        [("category", ASCENDING), ("created_at", DESCENDING), ("_id", DESCENDING)],
        name="idx_category_created_at_id_desc",
    )

    posts.create_index(
        [("author_id", ASCENDING)],
        name="idx_author_id",
    )

    users = db["users"]

    users.create_index(
        [("sns_type", ASCENDING), ("sns_id", ASCENDING)],
        name="uniq_sns_type_sns_id",
        unique=True,
    )

    users.create_index(
        [("nickname", ASCENDING)],
        name="uniq_nickname",
        unique=True,
    )

    bookmarks = db["bookmarks"]

    bookmarks.create_index(
        [("user_id", ASCENDING), ("post_id", ASCENDING)],
        name="uniq_user_id_post_id",
        unique=True,
    )

    bookmarks.create_index(
        [("post_id", ASCENDING)],
        name="idx_post_id",
    )
