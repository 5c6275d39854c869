from __future__ import annotations

from common.mongo.types import BaseDocument, MongoDateTime

from ...models.post import GeoPoint, Post


class PostDocument(BaseDocument):
    """MongoDB posts 컬렉션 도큐먼트 모델.

    location 은 GeoJSON Point({type, coordinates: [lat, lng]}) 그대로 저장한다.
    """

    author_id: str
    category: str
    title: str
    content: str
    stacks: list[str] = []
    capacity: int
    location: GeoPoint | None = None
    address: str | None = None
    sido: str | None = None
    start_date: MongoDateTime
    end_date: MongoDateTime
    register_deadline: MongoDateTime
    view_count: int = 0
    bookmark_count: int = 0

    @classmethod
    def from_domain(cls, post: Post) -> "PostDocument":
        return cls.from_domain_model(post)

    def to_domain(self) -> Post:
        return Post(**self.domain_fields())
