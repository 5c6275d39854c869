from __future__ import annotations

from common.mongo.types import BaseDocument

from ...models.bookmark import Bookmark


class BookmarkDocument(BaseDocument):
    """MongoDB bookmarks 컬렉션 도큐먼트 모델. 북마크는 수정되지 않으므로 updated_at == created_at."""

    user_id: str
    post_id: str

    @classmethod
    def from_domain(cls, bookmark: Bookmark) -> "BookmarkDocument":
        return cls.from_domain_model(bookmark)

    def to_domain(self) -> Bookmark:
        return Bookmark(**self.domain_fields())
