from __future__ import annotations

import pytest
from bson import ObjectId

from community_service.app.exceptions import (
    AlreadyBookmarked,
    InvalidCategory,
    NoSuchBookmark,
    PostNotFound,
)


USER = "user-001"


def test_add_bookmark_twice_counts_once(services, make_submission) -> None:
    post = services.posts.create_post("author", make_submission())

    assert services.bookmarks.add_bookmark(USER, post.id) == 1
    with pytest.raises(AlreadyBookmarked):
        services.bookmarks.add_bookmark(USER, post.id)

    assert services.post_repo.posts[post.id].bookmark_count == 1
    assert len(services.bookmark_repo.bookmarks) == 1


def test_add_bookmark_counts_each_user(services, make_submission) -> None:
    post = services.posts.create_post("author", make_submission())

    services.bookmarks.add_bookmark("user-a", post.id)

    assert services.bookmarks.add_bookmark("user-b", post.id) == 2


def test_add_bookmark_on_missing_post(services) -> None:
    with pytest.raises(PostNotFound):
        services.bookmarks.add_bookmark(USER, str(ObjectId()))

    assert services.bookmark_repo.bookmarks == []


def test_remove_bookmark_decrements_count(services, make_submission) -> None:
    post = services.posts.create_post("author", make_submission())
    services.bookmarks.add_bookmark(USER, post.id)

    assert services.bookmarks.remove_bookmark(USER, post.id) == 0
    assert services.bookmark_repo.bookmarks == []


def test_remove_missing_bookmark_does_not_change_count(services, make_submission) -> None:
    post = services.posts.create_post("author", make_submission())
    services.bookmarks.add_bookmark("someone-else", post.id)

    with pytest.raises(NoSuchBookmark):
        services.bookmarks.remove_bookmark(USER, post.id)

    assert services.post_repo.posts[post.id].bookmark_count == 1


def test_list_bookmarked_posts_is_restricted_to_user_and_category(
    services, make_submission
) -> None:
    project = services.posts.create_post("author", make_submission(title="p"))
    study = services.posts.create_post("author", make_submission(title="s", category="study"))
    services.posts.create_post("author", make_submission(title="not bookmarked"))

    services.bookmarks.add_bookmark(USER, project.id)
    services.bookmarks.add_bookmark(USER, study.id)

    projects = services.bookmarks.list_bookmarked_posts(USER, "project", 1, 10)
    studies = services.bookmarks.list_bookmarked_posts(USER, "study", 1, 10)

    assert [p.id for p in projects] == [project.id]
    assert [p.id for p in studies] == [study.id]
    assert services.bookmarks.list_bookmarked_posts("nobody", "project", 1, 10) == []


def test_list_bookmarked_posts_rejects_unknown_category(services) -> None:
    with pytest.raises(InvalidCategory):
        services.bookmarks.list_bookmarked_posts(USER, "hobby", 1, 10)


def test_list_bookmarked_posts_far_past_the_end_is_empty(services, make_submission) -> None:
    post = services.posts.create_post("author", make_submission())
    services.bookmarks.add_bookmark(USER, post.id)

    assert services.bookmarks.list_bookmarked_posts(USER, "project", 10**18, 100) == []
