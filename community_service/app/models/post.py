from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


Category = Literal["project", "study"]
CATEGORIES: frozenset[str] = frozenset({"project", "study"})


class GeoPoint(BaseModel):
    """GeoJSON 형태의 좌표. coordinates 는 [lat, lng] 순서로 저장한다."""

    type: Literal["Point"] = "Point"
    coordinates: list[float] = Field(min_length=2, max_length=2)


class PostFields(BaseModel):
    """검증/정규화가 끝난 게시글의 수정 가능한 필드 묶음.

    - 생성과 수정이 같은 필드 집합을 사용하므로 별도 모델로 분리한다.
    - author / id / view_count 는 여기에 포함되지 않는다.
    """

    category: Category
    title: str
    content: str
    stacks: list[str] = Field(default_factory=list)
    capacity: int
    location: GeoPoint | None = None
    address: str | None = None
    sido: str | None = None
    start_date: datetime
    end_date: datetime
    register_deadline: datetime


class Post(PostFields):
    """게시글 도메인 모델."""

    id: str | None = None
    author_id: str
    view_count: int = 0
    bookmark_count: int = 0
    created_at: datetime
    updated_at: datetime


class RegionInput(BaseModel):
    lat: float | None = None
    lng: float | None = None
    address: str | None = None
    sido: str | None = None


class PostSubmission(BaseModel):
    """게시글 생성/수정 요청 원본. 필드가 비어 있을 수 있으며 PostsService 가 검증한다."""

    category: str | None = None
    title: str | None = None
    content: str | None = None
    stacks: list[str] | None = None
    capacity: int | None = None
    region: RegionInput | None = None
    execution_period: list[datetime | None] | None = None
    register_deadline: datetime | None = None
