from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from bson import ObjectId

from community_service.app.config import (
    GOOGLE_DEFAULTS,
    KAKAO_DEFAULTS,
    AppConfig,
    OAuthProviderConfig,
    SessionConfig,
)
from community_service.app.exceptions import AlreadyBookmarked, DuplicateNickname
from community_service.app.models.bookmark import Bookmark
from community_service.app.models.pagination import ListPostsFilter
from community_service.app.models.post import Post, PostFields, PostSubmission, RegionInput
from community_service.app.models.user import ProfileUpdate, User
from community_service.app.services.bookmarks_service import BookmarksService
from community_service.app.services.posts_service import PostsService
from community_service.app.services.session_service import SessionIssuer
from community_service.app.services.users_service import UsersService


DEFAULT_PROFILE_URL = "https://static.test/default.png"


class FakePostRepository:
    """메모리 기반 PostRepository. 카운터 증가는 lock 안에서 처리해 $inc 와 같은 원자성을 흉내낸다."""

    def __init__(self) -> None:
        self.posts: dict[str, Post] = {}
        self._lock = threading.Lock()
        self._seq = 0

    def insert(self, post: Post) -> Post:
        with self._lock:
            self._seq += 1
            stored = post.model_copy(deep=True)
            stored.id = str(ObjectId())
            # 같은 시각에 여러 건이 생겨도 생성 순서가 유지되도록 한다.
            stored.created_at = datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(
                seconds=self._seq
            )
            stored.updated_at = stored.created_at
            self.posts[stored.id] = stored
            return stored.model_copy(deep=True)

    def find_by_id(self, post_id: str) -> Post | None:
        post = self.posts.get(post_id)
        return post.model_copy(deep=True) if post else None

    def list(self, flt: ListPostsFilter) -> list[Post]:
        items = [p for p in self.posts.values() if p.category == flt.category]
        if flt.post_ids is not None:
            wanted = set(flt.post_ids)
            items = [p for p in items if p.id in wanted]
        items.sort(key=lambda p: (p.created_at, p.id), reverse=True)
        window = items[flt.pagination.skip : flt.pagination.skip + flt.pagination.limit]
        return [p.model_copy(deep=True) for p in window]

    def increment_view_count(self, post_id: str) -> Post | None:
        with self._lock:
            post = self.posts.get(post_id)
            if post is None:
                return None
            post.view_count += 1
            return post.model_copy(deep=True)

    def replace_fields(self, post_id: str, author_id: str, fields: PostFields) -> bool:
        with self._lock:
            post = self.posts.get(post_id)
            if post is None or post.author_id != author_id:
                return False
            changes = {name: getattr(fields, name) for name in PostFields.model_fields}
            self.posts[post_id] = post.model_copy(update=changes)
            return True

    def delete(self, post_id: str, author_id: str) -> bool:
        with self._lock:
            post = self.posts.get(post_id)
            if post is None or post.author_id != author_id:
                return False
            del self.posts[post_id]
            return True

    def increment_bookmark_count(self, post_id: str, delta: int) -> int | None:
        with self._lock:
            post = self.posts.get(post_id)
            if post is None:
                return None
            post.bookmark_count += delta
            return post.bookmark_count


class FakeUserRepository:
    """(sns_type, sns_id) 와 nickname 유니크 제약을 흉내내는 메모리 저장소."""

    def __init__(self) -> None:
        self.users: dict[str, User] = {}
        self._lock = threading.Lock()

    def find_by_id(self, user_id: str) -> User | None:
        user = self.users.get(user_id)
        return user.model_copy(deep=True) if user else None

    def find_by_sns(self, sns_type: str, sns_id: str) -> User | None:
        for user in self.users.values():
            if user.sns_type == sns_type and user.sns_id == sns_id:
                return user.model_copy(deep=True)
        return None

    def insert_if_absent(self, user: User) -> tuple[User, bool]:
        with self._lock:
            existing = self.find_by_sns(user.sns_type, user.sns_id)
            if existing is not None:
                return existing, False
            if any(u.nickname == user.nickname for u in self.users.values()):
                raise DuplicateNickname()
            stored = user.model_copy(deep=True)
            stored.id = str(ObjectId())
            self.users[stored.id] = stored
            return stored.model_copy(deep=True), True

    def update_profile(self, user_id: str, update: ProfileUpdate) -> User | None:
        with self._lock:
            user = self.users.get(user_id)
            if user is None:
                return None
            if any(
                u.nickname == update.nickname and uid != user_id
                for uid, u in self.users.items()
            ):
                raise DuplicateNickname()
            updated = user.model_copy(update=update.model_dump())
            self.users[user_id] = updated
            return updated.model_copy(deep=True)

    def exists_nickname(self, nickname: str) -> bool:
        return any(u.nickname == nickname for u in self.users.values())


class FakeBookmarkRepository:
    def __init__(self) -> None:
        self.bookmarks: list[Bookmark] = []
        self._lock = threading.Lock()

    def create(self, user_id: str, post_id: str) -> Bookmark:
        with self._lock:
            if any(b.user_id == user_id and b.post_id == post_id for b in self.bookmarks):
                raise AlreadyBookmarked()
            bookmark = Bookmark(
                id=str(ObjectId()),
                user_id=user_id,
                post_id=post_id,
                created_at=datetime.now(timezone.utc),
            )
            self.bookmarks.append(bookmark)
            return bookmark

    def delete(self, user_id: str, post_id: str) -> bool:
        with self._lock:
            for i, b in enumerate(self.bookmarks):
                if b.user_id == user_id and b.post_id == post_id:
                    del self.bookmarks[i]
                    return True
            return False

    def list_post_ids_by_user(self, user_id: str) -> list[str]:
        return [b.post_id for b in reversed(self.bookmarks) if b.user_id == user_id]

    def delete_all_by_post_id(self, post_id: str) -> int:
        with self._lock:
            before = len(self.bookmarks)
            self.bookmarks = [b for b in self.bookmarks if b.post_id != post_id]
            return before - len(self.bookmarks)


class SequenceNicknameGenerator:
    """미리 정한 닉네임을 순서대로 돌려준다. 다 쓰면 마지막 값을 반복한다."""

    def __init__(self, names: list[str]) -> None:
        self._names = list(names)
        self.calls = 0

    def generate(self) -> str:
        self.calls += 1
        if len(self._names) > 1:
            return self._names.pop(0)
        return self._names[0]


@dataclass
class Services:
    posts: PostsService
    bookmarks: BookmarksService
    users: UsersService
    post_repo: FakePostRepository
    user_repo: FakeUserRepository
    bookmark_repo: FakeBookmarkRepository
    nicknames: SequenceNicknameGenerator


@pytest.fixture
def app_config() -> AppConfig:
    def provider(defaults: dict[str, str], name: str) -> OAuthProviderConfig:
        return OAuthProviderConfig(
            client_id=f"{name}-client-id",
            client_secret=f"{name}-client-secret",
            redirect_uri=f"http://api.test/api/v1/auth/{name}/callback",
            authorize_url=defaults["authorize_url"],
            token_url=defaults["token_url"],
            profile_url=defaults["profile_url"],
            scope=defaults.get("scope", ""),
        )

    return AppConfig(
        session=SessionConfig(secret="test-secret", ttl_seconds=3600),
        kakao=provider(KAKAO_DEFAULTS, "kakao"),
        google=provider(GOOGLE_DEFAULTS, "google"),
        client_url="http://client.test",
        profile_url=DEFAULT_PROFILE_URL,
        http_timeout_seconds=1.0,
    )


@pytest.fixture
def issuer(app_config: AppConfig) -> SessionIssuer:
    return SessionIssuer(app_config.session)


@pytest.fixture
def services(app_config: AppConfig, issuer: SessionIssuer) -> Services:
    post_repo = FakePostRepository()
    user_repo = FakeUserRepository()
    bookmark_repo = FakeBookmarkRepository()
    nicknames = SequenceNicknameGenerator(["용감한호랑이0001", "성실한펭귄0002", "졸린판다0003"])
    return Services(
        posts=PostsService(post_repo=post_repo, bookmark_repo=bookmark_repo),
        bookmarks=BookmarksService(bookmark_repo=bookmark_repo, post_repo=post_repo),
        users=UsersService(
            user_repo=user_repo,
            bookmark_repo=bookmark_repo,
            issuer=issuer,
            nickname_generator=nicknames,  # type: ignore[arg-type]
            profile_url=app_config.profile_url,
        ),
        post_repo=post_repo,
        user_repo=user_repo,
        bookmark_repo=bookmark_repo,
        nicknames=nicknames,
    )


@pytest.fixture
def make_submission() -> Callable[..., PostSubmission]:
    def _make(**overrides: Any) -> PostSubmission:
        data: dict[str, Any] = {
            "category": "project",
            "title": "사이드 프로젝트 팀원 모집",
            "content": "백엔드 개발자를 찾습니다.",
            "stacks": ["python", "react"],
            "capacity": 4,
            "region": RegionInput(
                lat=37.5665, lng=126.978, address="서울특별시 중구", sido="11"
            ),
            "execution_period": [
                datetime(2024, 3, 1, tzinfo=timezone.utc),
                datetime(2024, 6, 1, tzinfo=timezone.utc),
            ],
            "register_deadline": datetime(2024, 2, 20, tzinfo=timezone.utc),
        }
        data.update(overrides)
        return PostSubmission(**data)

    return _make
