from __future__ import annotations

from pydantic import Field, field_validator

from common.schemas.base import CamelSchema, UtcDateTime

from ...models.user import ProfileUpdate, SnsIdentity, User


class SignUpRequest(CamelSchema):
    """SNS 식별 정보를 직접 받아 가입/로그인하는 요청."""

    sns_type: str = Field(min_length=1)
    sns_id: str = Field(min_length=1)
    image_url: str | None = Field(default=None, alias="imageURL")

    @field_validator("sns_id", mode="before")
    @classmethod
    def _coerce_sns_id(cls, value: object) -> object:
        # Kakao 회원번호처럼 숫자로 들어오는 ID도 문자열로 다룬다.
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def to_domain(self) -> SnsIdentity:
        return SnsIdentity(
            sns_type=self.sns_type, sns_id=self.sns_id, image_url=self.image_url
        )


class RegionSchema(CamelSchema):
    sido: str | None = None
    sigungu: str | None = None


class UserResponse(CamelSchema):
    id: str
    sns_type: str
    nickname: str
    position: str | None = None
    stacks: list[str] = Field(default_factory=list)
    region: RegionSchema
    image_url: str = Field(alias="imageURL")
    created_at: UtcDateTime

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id or "",
            sns_type=user.sns_type,
            nickname=user.nickname,
            position=user.position,
            stacks=list(user.stacks),
            region=RegionSchema(sido=user.sido, sigungu=user.sigungu),
            image_url=user.image_url,
            created_at=user.created_at,
        )


class LoginResponse(CamelSchema):
    user: UserResponse
    token: str
    expires_at: int
    is_new: bool


class ProfileResponse(UserResponse):
    bookmarks: list[str] = Field(default_factory=list)

    @classmethod
    def from_profile(cls, user: User, bookmarks: list[str]) -> "ProfileResponse":
        base = UserResponse.from_domain(user)
        return cls(**base.model_dump(), bookmarks=bookmarks)


class ProfileUpdateRequest(CamelSchema):
    nickname: str | None = None
    position: str | None = None
    stacks: list[str] | None = None
    region: RegionSchema | None = None
    image_url: str | None = Field(default=None, alias="imageURL")

    def to_domain(self) -> ProfileUpdate:
        region = self.region or RegionSchema()
        return ProfileUpdate(
            nickname=self.nickname,
            position=self.position,
            stacks=self.stacks,
            sido=region.sido,
            sigungu=region.sigungu,
            image_url=self.image_url,
        )


class SnsAccountResponse(CamelSchema):
    """SNS 계정 가입 여부. 가입된 계정이면 login 에 세션 정보가 담긴다."""

    sns_type: str
    sns_id: str
    registered: bool
    login: LoginResponse | None = None


class BookmarkCountResponse(CamelSchema):
    bookmark_count: int


class NicknameAvailabilityResponse(CamelSchema):
    nickname: str
    available: bool
