from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class Bookmark(BaseModel):
    """유저가 북마크한 게시글 도메인 모델. (user_id, post_id) 조합은 유일하다."""

    id: str | None = None
    user_id: str
    post_id: str
    created_at: datetime
