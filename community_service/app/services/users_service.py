from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import Depends
from pymongo.database import Database

from common.mongo.client import get_database

from ..config import AppConfig, get_config
from ..exceptions import DuplicateNickname, UserNotFound, ValidationError
from ..models.session import LoginResult
from ..models.user import ProfileUpdate, SnsIdentity, User
from ..repositories.interfaces import (
    BookmarkRepositoryInterface,
    UserRepositoryInterface,
)
from ..repositories.user_repository import UserRepository
from .nickname import NicknameGenerator, get_nickname_generator
from .posts_service import get_bookmark_repository
from .session_service import SessionIssuer, get_session_issuer
from .validators import normalize_stacks


logger = logging.getLogger(__name__)

# 랜덤 닉네임이 기존 닉네임과 겹칠 때 다시 뽑는 최대 횟수
MAX_NICKNAME_ATTEMPTS = 5


class UsersService:
    """SNS 로그인/가입(Identity Linker)과 프로필 조회/수정 비즈니스 로직.

    - Repository(UserRepositoryInterface)에만 의존하고, Mongo 세부 구현은 알지 않는다.
    - 같은 사람이라도 SNS 가 다르면 별도의 계정이 만들어진다.
    """

    def __init__(
        self,
        user_repo: UserRepositoryInterface,
        bookmark_repo: BookmarkRepositoryInterface,
        issuer: SessionIssuer,
        nickname_generator: NicknameGenerator,
        profile_url: str,
    ) -> None:
        self._user_repo = user_repo
        self._bookmark_repo = bookmark_repo
        self._issuer = issuer
        self._nickname_generator = nickname_generator
        self._profile_url = profile_url

    def login_or_register(self, identity: SnsIdentity) -> LoginResult:
        """(sns_type, sns_id) 로 유저를 찾고, 없으면 새로 만든 뒤 세션을 발급한다."""

        if not identity.sns_type or not identity.sns_id:
            raise ValidationError("snsType and snsId are required")

        existing = self._user_repo.find_by_sns(identity.sns_type, identity.sns_id)
        if existing is not None:
            return self._login(existing, is_new=False)

        user, created = self._create_user(identity)
        if created:
            logger.info(
                "user registered",
                extra={"user_id": user.id, "body": {"sns_type": user.sns_type}},
            )
        return self._login(user, is_new=created)

    def login_if_registered(self, sns_type: str, sns_id: str) -> LoginResult | None:
        """이미 가입된 SNS 계정이면 세션을 발급하고, 아니면 None 을 반환한다. 계정을 만들지 않는다."""

        if not sns_type or not sns_id:
            raise ValidationError("snsType and snsId are required")

        user = self._user_repo.find_by_sns(sns_type, sns_id)
        if user is None:
            return None
        return self._login(user, is_new=False)

    def _create_user(self, identity: SnsIdentity) -> tuple[User, bool]:
        last_error: DuplicateNickname | None = None
        for _ in range(MAX_NICKNAME_ATTEMPTS):
            now = datetime.now(timezone.utc)
            candidate = User(
                sns_type=identity.sns_type,
                sns_id=identity.sns_id,
                nickname=self._nickname_generator.generate(),
                image_url=identity.image_url or self._profile_url,
                created_at=now,
                updated_at=now,
            )
            try:
                return self._user_repo.insert_if_absent(candidate)
            except DuplicateNickname as exc:
                logger.warning("generated nickname collided, retrying")
                last_error = exc

        assert last_error is not None
        raise last_error

    def _login(self, user: User, *, is_new: bool) -> LoginResult:
        assert user.id is not None
        credential = self._issuer.issue(user.id)
        return LoginResult(user=user, credential=credential, is_new=is_new)

    def get_profile(self, user_id: str) -> tuple[User, list[str]]:
        """유저 정보와 북마크한 게시글 ID 목록을 반환한다."""

        user = self._user_repo.find_by_id(user_id)
        if user is None:
            raise UserNotFound()
        return user, self._bookmark_repo.list_post_ids_by_user(user_id)

    def update_profile(self, user_id: str, update: ProfileUpdate) -> User:
        nickname = (update.nickname or "").strip()
        if not nickname:
            raise ValidationError("nickname is required")

        normalized = ProfileUpdate(
            nickname=nickname,
            position=update.position,
            stacks=normalize_stacks(update.stacks),
            sido=update.sido,
            sigungu=update.sigungu,
            image_url=update.image_url or self._profile_url,
        )
        user = self._user_repo.update_profile(user_id, normalized)
        if user is None:
            raise UserNotFound()
        return user

    def is_nickname_available(self, nickname: str) -> bool:
        return not self._user_repo.exists_nickname(nickname)


def get_user_repository(
    db: Database = Depends(get_database),
) -> UserRepositoryInterface:
    """FastAPI DI용 UserRepository 팩토리."""

    return UserRepository(db)


def get_users_service(
    user_repo: UserRepositoryInterface = Depends(get_user_repository),
    bookmark_repo: BookmarkRepositoryInterface = Depends(get_bookmark_repository),
    issuer: SessionIssuer = Depends(get_session_issuer),
    nickname_generator: NicknameGenerator = Depends(get_nickname_generator),
    config: AppConfig = Depends(get_config),
) -> UsersService:
    """FastAPI DI용 UsersService 팩토리."""

    return UsersService(
        user_repo=user_repo,
        bookmark_repo=bookmark_repo,
        issuer=issuer,
        nickname_generator=nickname_generator,
        profile_url=config.profile_url,
    )
