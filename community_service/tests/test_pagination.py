from __future__ import annotations

import pytest

from community_service.app.models.pagination import (
    DEFAULT_PER_PAGE,
    MAX_PER_PAGE,
    MAX_SKIP,
    Pagination,
)


def test_page_two_skips_first_page() -> None:
    pagination = Pagination.from_page(2, 10)

    assert pagination.skip == 10
    assert pagination.limit == 10


@pytest.mark.parametrize("page", [None, 0, -3])
def test_non_positive_page_is_treated_as_first_page(page: int | None) -> None:
    assert Pagination.from_page(page, 5).skip == 0


@pytest.mark.parametrize(
    "per_page, expected",
    [(None, DEFAULT_PER_PAGE), (0, DEFAULT_PER_PAGE), (-1, DEFAULT_PER_PAGE), (1000, MAX_PER_PAGE), (25, 25)],
)
def test_per_page_is_clamped(per_page: int | None, expected: int) -> None:
    assert Pagination.from_page(1, per_page).limit == expected


def test_huge_page_is_past_max_skip() -> None:
    assert Pagination.from_page(10**18, 10).is_past_max_skip is True
    assert Pagination.from_page(MAX_SKIP // 10 + 1, 10).is_past_max_skip is False
