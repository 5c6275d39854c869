from __future__ import annotations

from pydantic import BaseModel, Field


DEFAULT_PER_PAGE = 10
MAX_PER_PAGE = 100
# skip 은 int64 로 인코딩된다. 이보다 뒤의 페이지는 조회 없이 빈 목록으로 처리한다.
MAX_SKIP = 2**31 - 1


class Pagination(BaseModel):
    """page/perPage 를 skip/limit 쌍으로 바꾼 결과."""

    page: int = 1
    per_page: int = DEFAULT_PER_PAGE

    @classmethod
    def from_page(cls, page: int | None, per_page: int | None) -> "Pagination":
        """page < 1 은 1 로, per_page 는 1..MAX_PER_PAGE 범위로 보정한다."""

        if page is None or page <= 0:
            page = 1
        if per_page is None or per_page <= 0:
            per_page = DEFAULT_PER_PAGE
        elif per_page > MAX_PER_PAGE:
            per_page = MAX_PER_PAGE
        return cls(page=page, per_page=per_page)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.per_page

    @property
    def limit(self) -> int:
        return self.per_page

    @property
    def is_past_max_skip(self) -> bool:
        return self.skip > MAX_SKIP


class ListPostsFilter(BaseModel):
    """게시글 목록 조회 옵션.

    post_ids 가 주어지면 해당 ID 집합(예: 북마크한 게시글) 안에서만 조회한다.
    """

    category: str
    pagination: Pagination = Field(default_factory=Pagination)
    post_ids: list[str] | None = None
