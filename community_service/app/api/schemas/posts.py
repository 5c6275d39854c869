from __future__ import annotations

from datetime import datetime

from pydantic import Field

from common.schemas.base import CamelSchema, UtcDateTime

from ...models.post import GeoPoint, Post, PostSubmission, RegionInput


class RegionRequest(CamelSchema):
    lat: float | None = None
    lng: float | None = None
    address: str | None = None
    sido: str | None = None


class PostSubmissionRequest(CamelSchema):
    """게시글 생성/수정 요청 바디.

    필수값 검사는 PostsService 에서 도메인 에러(ValidationError 등)로 처리하므로 모두 optional 로 받는다.
    """

    category: str | None = None
    title: str | None = None
    content: str | None = None
    stacks: list[str] | None = None
    capacity: int | None = None
    region: RegionRequest | None = None
    execution_period: list[datetime | None] | None = None
    register_deadline: datetime | None = None

    def to_domain(self) -> PostSubmission:
        region = None
        if self.region is not None:
            region = RegionInput(**self.region.model_dump())
        return PostSubmission(
            category=self.category,
            title=self.title,
            content=self.content,
            stacks=self.stacks,
            capacity=self.capacity,
            region=region,
            execution_period=self.execution_period,
            register_deadline=self.register_deadline,
        )


class PostResponse(CamelSchema):
    id: str
    author: str
    category: str
    title: str
    content: str
    stacks: list[str]
    capacity: int
    location: GeoPoint | None = None
    address: str | None = None
    sido: str | None = None
    start_date: UtcDateTime
    end_date: UtcDateTime
    register_deadline: UtcDateTime
    view_count: int
    bookmark_count: int
    created_at: UtcDateTime
    updated_at: UtcDateTime

    @classmethod
    def from_domain(cls, post: Post) -> "PostResponse":
        # 저장소 내부 필드(_id 등)가 새지 않도록 필요한 필드만 옮긴다.
        return cls(
            id=post.id or "",
            author=post.author_id,
            category=post.category,
            title=post.title,
            content=post.content,
            stacks=list(post.stacks),
            capacity=post.capacity,
            location=post.location,
            address=post.address,
            sido=post.sido,
            start_date=post.start_date,
            end_date=post.end_date,
            register_deadline=post.register_deadline,
            view_count=post.view_count,
            bookmark_count=post.bookmark_count,
            created_at=post.created_at,
            updated_at=post.updated_at,
        )


class PostCreatedResponse(CamelSchema):
    id: str = Field(description="생성된 게시글 ID")
