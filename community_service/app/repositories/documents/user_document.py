from __future__ import annotations

from common.mongo.types import BaseDocument

from ...models.user import User


class UserDocument(BaseDocument):
    """MongoDB users 컬렉션 도큐먼트 모델."""

    sns_type: str
    sns_id: str
    nickname: str
    position: str | None = None
    stacks: list[str] = []
    sido: str | None = None
    sigungu: str | None = None
    image_url: str

    @classmethod
    def from_domain(cls, user: User) -> "UserDocument":
        return cls.from_domain_model(user)

    def to_domain(self) -> User:
        return User(**self.domain_fields())
