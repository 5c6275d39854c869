from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import Depends
from pymongo.database import Database

from common.mongo.client import get_database

from ..exceptions import Forbidden, PostNotFound
from ..models.pagination import ListPostsFilter, Pagination
from ..models.post import Post, PostSubmission
from ..repositories.bookmark_repository import BookmarkRepository
from ..repositories.interfaces import (
    BookmarkRepositoryInterface,
    PostRepositoryInterface,
)
from ..repositories.post_repository import PostRepository
from .validators import ensure_category, validate_post_submission


logger = logging.getLogger(__name__)


class PostsService:
    """게시글 CRUD 비즈니스 로직 (Post Store Gateway).

    - Repository(PostRepositoryInterface)에만 의존하고, Mongo 세부 구현은 알지 않는다.
    - 모든 입력 검증은 저장소 쓰기 전에 끝난다.
    - 수정/삭제는 작성자 본인만 가능하다.
    """

    def __init__(
        self,
        post_repo: PostRepositoryInterface,
        bookmark_repo: BookmarkRepositoryInterface,
    ) -> None:
        self._post_repo = post_repo
        self._bookmark_repo = bookmark_repo

    def list_posts(
        self, category: str | None, page: int | None, per_page: int | None
    ) -> list[Post]:
        """카테고리별 게시글을 최신순으로 페이지네이션하여 반환한다."""

        flt = ListPostsFilter(
            category=ensure_category(category),
            pagination=Pagination.from_page(page, per_page),
        )
        if flt.pagination.is_past_max_skip:
            return []
        return self._post_repo.list(flt)

    def get_post_detail(self, post_id: str) -> Post:
        """게시글을 조회하고 조회수를 1 증가시킨다. 증가된 값이 반영된 게시글을 반환한다."""

        post = self._post_repo.increment_view_count(post_id)
        if post is None:
            raise PostNotFound()
        return post

    def create_post(self, author_id: str, submission: PostSubmission) -> Post:
        fields = validate_post_submission(submission)

        now = datetime.now(timezone.utc)
        post = Post(
            **fields.model_dump(),
            author_id=author_id,
            created_at=now,
            updated_at=now,
        )
        created = self._post_repo.insert(post)
        logger.info(
            "post created",
            extra={"user_id": author_id, "body": {"post_id": created.id}},
        )
        return created

    def update_post(
        self, author_id: str, post_id: str, submission: PostSubmission
    ) -> None:
        fields = validate_post_submission(submission)
        self._ensure_owner(author_id, post_id)

        # (id, author) 조건으로 쓰기 때문에 그 사이 삭제된 게시글은 되살아나지 않는다.
        if not self._post_repo.replace_fields(post_id, author_id, fields):
            raise PostNotFound()

    def delete_post(self, author_id: str, post_id: str) -> None:
        self._ensure_owner(author_id, post_id)

        if not self._post_repo.delete(post_id, author_id):
            raise PostNotFound()

        removed = self._bookmark_repo.delete_all_by_post_id(post_id)
        logger.info(
            "post deleted",
            extra={"user_id": author_id, "body": {"post_id": post_id, "bookmarks": removed}},
        )

    def _ensure_owner(self, author_id: str, post_id: str) -> Post:
        post = self._post_repo.find_by_id(post_id)
        if post is None:
            raise PostNotFound()
        if post.author_id != author_id:
            raise Forbidden()
        return post


def get_post_repository(
    db: Database = Depends(get_database),
) -> PostRepositoryInterface:
    """FastAPI DI용 PostRepository 팩토리."""

    return PostRepository(db)


def get_bookmark_repository(
    db: Database = Depends(get_database),
) -> BookmarkRepositoryInterface:
    """FastAPI DI용 BookmarkRepository 팩토리."""

    return BookmarkRepository(db)


def get_posts_service(
    post_repo: PostRepositoryInterface = Depends(get_post_repository),
    bookmark_repo: BookmarkRepositoryInterface = Depends(get_bookmark_repository),
) -> PostsService:
    """FastAPI DI용 PostsService 팩토리."""

    return PostsService(post_repo=post_repo, bookmark_repo=bookmark_repo)
