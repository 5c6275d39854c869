from __future__ import annotations

import logging

from fastapi import Depends

from ..exceptions import NoSuchBookmark, PostNotFound
from ..models.pagination import ListPostsFilter, Pagination
from ..models.post import Post
from ..repositories.interfaces import (
    BookmarkRepositoryInterface,
    PostRepositoryInterface,
)
from .posts_service import get_bookmark_repository, get_post_repository
from .validators import ensure_category


logger = logging.getLogger(__name__)


class BookmarksService:
    """유저 북마크 관리 비즈니스 로직 (Bookmark Ledger).

    - 중복 여부는 사전 조회가 아니라 (user_id, post_id) 유니크 인덱스로 판단한다.
    - 게시글의 bookmark_count 는 $inc 로만 바꾼다.
    """

    def __init__(
        self,
        bookmark_repo: BookmarkRepositoryInterface,
        post_repo: PostRepositoryInterface,
    ) -> None:
        self._bookmark_repo = bookmark_repo
        self._post_repo = post_repo

    def add_bookmark(self, user_id: str, post_id: str) -> int:
        """북마크를 추가하고 게시글의 새 bookmark_count 를 반환한다.

        - 게시글이 없으면 PostNotFound
        - 이미 북마크한 경우 AlreadyBookmarked (저장소에서 발생)
        """

        if self._post_repo.find_by_id(post_id) is None:
            raise PostNotFound()

        self._bookmark_repo.create(user_id, post_id)

        count = self._post_repo.increment_bookmark_count(post_id, 1)
        if count is None:
            # 북마크 생성 직후 게시글이 삭제된 경우
            self._bookmark_repo.delete(user_id, post_id)
            raise PostNotFound()

        logger.info("bookmark added", extra={"user_id": user_id, "body": {"post_id": post_id}})
        return count

    def remove_bookmark(self, user_id: str, post_id: str) -> int:
        """북마크를 삭제하고 게시글의 새 bookmark_count 를 반환한다.

        삭제된 북마크가 없으면 NoSuchBookmark. 게시글이 이미 없으면 0 을 반환한다.
        """

        if not self._bookmark_repo.delete(user_id, post_id):
            raise NoSuchBookmark()

        count = self._post_repo.increment_bookmark_count(post_id, -1)
        logger.info("bookmark removed", extra={"user_id": user_id, "body": {"post_id": post_id}})
        return 0 if count is None else count

    def list_bookmarked_posts(
        self,
        user_id: str,
        category: str | None,
        page: int | None,
        per_page: int | None,
    ) -> list[Post]:
        """유저가 북마크한 게시글 중 카테고리에 해당하는 것만 페이지네이션하여 반환한다."""

        category = ensure_category(category)
        pagination = Pagination.from_page(page, per_page)
        if pagination.is_past_max_skip:
            return []

        post_ids = self._bookmark_repo.list_post_ids_by_user(user_id)
        if not post_ids:
            return []

        return self._post_repo.list(
            ListPostsFilter(category=category, pagination=pagination, post_ids=post_ids)
        )


def get_bookmarks_service(
    bookmark_repo: BookmarkRepositoryInterface = Depends(get_bookmark_repository),
    post_repo: PostRepositoryInterface = Depends(get_post_repository),
) -> BookmarksService:
    """FastAPI DI용 BookmarksService 팩토리."""

    return BookmarksService(bookmark_repo=bookmark_repo, post_repo=post_repo)
