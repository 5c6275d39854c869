from __future__ import annotations

from typing import Protocol

from ..models.bookmark import Bookmark
from ..models.pagination import ListPostsFilter
from ..models.post import Post, PostFields
from ..models.user import ProfileUpdate, User


class PostRepositoryInterface(Protocol):
    """PostRepository가 따라야 할 최소한의 계약.

    Service 레이어는 이 인터페이스에만 의존하고, 구체 구현(Mongo 등)은 몰라도 된다.
    """

    def insert(self, post: Post) -> Post:  # pragma: no cover - Protocol
        ...

    def find_by_id(self, post_id: str) -> Post | None:  # pragma: no cover - Protocol
        ...

    def list(self, flt: ListPostsFilter) -> list[Post]:  # pragma: no cover - Protocol
        ...

    def increment_view_count(
        self, post_id: str
    ) -> Post | None:  # pragma: no cover - Protocol
        """조회수를 원자적으로 1 증가시키고 증가된 게시글을 반환한다. 없으면 None."""
        ...

    def replace_fields(
        self, post_id: str, author_id: str, fields: PostFields
    ) -> bool:  # pragma: no cover - Protocol
        """작성자가 일치하는 경우에만 수정 가능한 필드를 교체한다."""
        ...

    def delete(
        self, post_id: str, author_id: str
    ) -> bool:  # pragma: no cover - Protocol
        ...

    def increment_bookmark_count(
        self, post_id: str, delta: int
    ) -> int | None:  # pragma: no cover - Protocol
        """북마크 수를 원자적으로 delta 만큼 바꾸고 바뀐 값을 반환한다. 없으면 None."""
        ...


class UserRepositoryInterface(Protocol):
    """UserRepository가 따라야 할 최소한의 계약.

    - (sns_type, sns_id) 와 nickname 은 저장소 레벨에서 유일해야 한다.
    """

    def find_by_id(self, user_id: str) -> User | None:  # pragma: no cover - Protocol
        ...

    def find_by_sns(
        self, sns_type: str, sns_id: str
    ) -> User | None:  # pragma: no cover - Protocol
        ...

    def insert_if_absent(
        self, user: User
    ) -> tuple[User, bool]:  # pragma: no cover - Protocol
        """(sns_type, sns_id) 가 없을 때만 생성한다.

        (저장된 유저, 새로 생성했는지 여부) 를 반환하며, 닉네임 충돌 시 DuplicateNickname 을 던진다.
        """
        ...

    def update_profile(
        self, user_id: str, update: ProfileUpdate
    ) -> User | None:  # pragma: no cover - Protocol
        ...

    def exists_nickname(self, nickname: str) -> bool:  # pragma: no cover - Protocol
        ...


class BookmarkRepositoryInterface(Protocol):
    """BookmarkRepository가 따라야 할 최소한의 계약.

    - user_id + post_id 조합으로 유니크하게 북마크를 관리한다.
    """

    def create(
        self, user_id: str, post_id: str
    ) -> Bookmark:  # pragma: no cover - Protocol
        """이미 존재하면 AlreadyBookmarked 를 던진다."""
        ...

    def delete(
        self, user_id: str, post_id: str
    ) -> bool:  # pragma: no cover - Protocol
        ...

    def list_post_ids_by_user(
        self, user_id: str
    ) -> list[str]:  # pragma: no cover - Protocol
        ...

    def delete_all_by_post_id(
        self, post_id: str
    ) -> int:  # pragma: no cover - Protocol
        """주어진 게시글을 가리키는 모든 북마크를 삭제하고 삭제된 개수를 반환한다."""
        ...
