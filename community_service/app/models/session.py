from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, field_validator

from .user import User


class SessionCredential(BaseModel):
    """서명된 세션 토큰과 만료 시각(epoch seconds). 저장하지 않고 로그인마다 새로 발급한다."""

    token: str
    expires_at: int

    @field_validator("token")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value

    def expires_at_datetime(self) -> datetime:
        """쿠키 만료 시각으로 사용할 절대 시각(UTC)."""

        return datetime.fromtimestamp(self.expires_at, tz=timezone.utc)


class LoginResult(BaseModel):
    """Identity Linker 결과. is_new 는 이번 호출에서 계정이 새로 만들어졌는지 여부."""

    user: User
    credential: SessionCredential
    is_new: bool
