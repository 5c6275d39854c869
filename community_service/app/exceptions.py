from __future__ import annotations


class CommunityError(Exception):
    """Base exception for all community-service domain errors.

    `code` and `status_code` are translated once, at the HTTP boundary.
    """

    code = "COMMUNITY_ERROR"
    status_code = 500
    default_message = "unexpected community error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CommunityError):
    """A required field is missing or a value is out of range."""

    code = "VALIDATION_ERROR"
    status_code = 400
    default_message = "required field is missing or invalid"


class InvalidCategory(CommunityError):
    code = "INVALID_CATEGORY"
    status_code = 400
    default_message = "category must be one of: project, study"


class StackFormatError(CommunityError):
    """A stack tag is not made of lowercase letters only."""

    code = "STACK_FORMAT_ERROR"
    status_code = 400
    default_message = "stacks must contain lowercase letters only"


class PostNotFound(CommunityError):
    code = "POST_NOT_FOUND"
    status_code = 404
    default_message = "post not found"


class Forbidden(CommunityError):
    """Mutation attempted by someone other than the owner."""

    code = "FORBIDDEN"
    status_code = 403
    default_message = "only the author can modify this post"


class AlreadyBookmarked(CommunityError):
    code = "ALREADY_BOOKMARKED"
    status_code = 409
    default_message = "post is already bookmarked"


class NoSuchBookmark(CommunityError):
    code = "NO_SUCH_BOOKMARK"
    status_code = 404
    default_message = "bookmark does not exist"


class DuplicateNickname(CommunityError):
    code = "DUPLICATE_NICKNAME"
    status_code = 409
    default_message = "nickname is already taken"


class UserNotFound(CommunityError):
    code = "USER_NOT_FOUND"
    status_code = 404
    default_message = "user not found"


class InvalidSession(CommunityError):
    """Session credential is missing, malformed or expired."""

    code = "INVALID_SESSION"
    status_code = 401
    default_message = "login required"


class UpstreamAuthFailure(CommunityError):
    """OAuth provider call failed or returned an unexpected shape."""

    code = "UPSTREAM_AUTH_FAILURE"
    status_code = 502
    default_message = "failed to authenticate with the SNS provider"
