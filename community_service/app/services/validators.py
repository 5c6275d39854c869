"""게시글/프로필 입력 검증 및 정규화."""

from __future__ import annotations

import re
from collections.abc import Iterable

from common.mongo.types import ensure_utc_datetime

from ..exceptions import InvalidCategory, StackFormatError, ValidationError
from ..models.post import CATEGORIES, GeoPoint, PostFields, PostSubmission


STACK_PATTERN = re.compile(r"^[a-z]+$")


def ensure_category(category: str | None) -> str:
    if category not in CATEGORIES:
        raise InvalidCategory()
    return category


def normalize_stacks(stacks: Iterable[str] | None) -> list[str]:
    """스택 태그가 모두 소문자 알파벳인지 확인하고, 순서를 유지한 채 중복을 제거한다."""

    if stacks is None:
        return []

    result: list[str] = []
    for stack in stacks:
        if not isinstance(stack, str) or not STACK_PATTERN.fullmatch(stack):
            raise StackFormatError(f"invalid stack tag: {stack!r}")
        if stack not in result:
            result.append(stack)
    return result


def _is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    # capacity 0 도 미입력으로 취급한다.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value == 0
    if isinstance(value, list):
        return len(value) == 0
    return False


def validate_post_submission(submission: PostSubmission) -> PostFields:
    """게시글 생성/수정 입력을 검증하고 저장 가능한 PostFields 로 정규화한다.

    검사 순서: 필수값 -> 카테고리 -> 스택 형식 -> 진행 기간 -> 날짜 순서 -> 좌표 범위.
    모든 검사는 저장소에 쓰기 전에 끝난다.
    """

    required = (
        submission.category,
        submission.title,
        submission.content,
        submission.capacity,
        submission.execution_period,
        submission.register_deadline,
    )
    if any(_is_blank(value) for value in required):
        raise ValidationError()

    category = ensure_category(submission.category)
    stacks = normalize_stacks(submission.stacks)

    period = submission.execution_period or []
    start_date = period[0] if len(period) > 0 else None
    end_date = period[1] if len(period) > 1 else None
    if start_date is None or end_date is None:
        raise ValidationError("executionPeriod requires both start and end dates")
    start_date = ensure_utc_datetime(start_date)
    end_date = ensure_utc_datetime(end_date)
    if start_date > end_date:
        raise ValidationError("executionPeriod start must not be after end")

    capacity = submission.capacity
    if capacity is None or capacity < 0:
        raise ValidationError("capacity must be positive")

    location: GeoPoint | None = None
    address: str | None = None
    sido: str | None = None
    region = submission.region
    if region is not None:
        address = region.address
        sido = region.sido
        if region.lat is not None and region.lng is not None:
            if not -90 <= region.lat <= 90 or not -180 <= region.lng <= 180:
                raise ValidationError("region coordinates are out of range")
            location = GeoPoint(coordinates=[region.lat, region.lng])

    title, content, deadline = submission.title, submission.content, submission.register_deadline
    if title is None or content is None or deadline is None:
        raise ValidationError()
    return PostFields(
        category=category,  # type: ignore[arg-type]
        title=title,
        content=content,
        stacks=stacks,
        capacity=capacity,
        location=location,
        address=address,
        sido=sido,
        start_date=start_date,
        end_date=end_date,
        register_deadline=ensure_utc_datetime(deadline),
    )
