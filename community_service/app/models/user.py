from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class User(BaseModel):
    """유저 도메인 모델.

    - (sns_type, sns_id) 조합으로 SNS 계정을 식별하며, 한 번 생성되면 바뀌지 않는다.
    - 서로 다른 SNS 로 로그인하면 같은 사람이라도 별도의 로컬 계정이 된다.
    """

    id: str | None = None
    sns_type: str
    sns_id: str
    nickname: str
    position: str | None = None
    stacks: list[str] = Field(default_factory=list)
    sido: str | None = None
    sigungu: str | None = None
    image_url: str
    created_at: datetime
    updated_at: datetime


class SnsIdentity(BaseModel):
    """SNS 제공자(또는 직접 가입 요청)로부터 받은 식별 정보."""

    sns_type: str
    sns_id: str
    image_url: str | None = None


class ProfileUpdate(BaseModel):
    """프로필 수정 입력. 검증은 UsersService 에서 수행한다."""

    nickname: str | None = None
    position: str | None = None
    stacks: list[str] | None = None
    sido: str | None = None
    sigungu: str | None = None
    image_url: str | None = None
