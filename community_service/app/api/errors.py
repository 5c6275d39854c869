"""도메인 예외를 HTTP 응답으로 바꾸는 경계 레이어."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from common.schemas.response import ErrorDetail, ErrorResponse

from ..exceptions import CommunityError


logger = logging.getLogger(__name__)


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message))
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def handle_community_error(request: Request, exc: CommunityError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning(
            "upstream failure: %s",
            exc.message,
            extra={"path": request.url.path, "error_code": exc.code},
        )
    return _error_response(exc.status_code, exc.code, exc.message)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = exc.errors()
    message = "request validation failed"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg', 'invalid value')}" if location else message
    return _error_response(400, "VALIDATION_ERROR", message)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled error",
        extra={"path": request.url.path, "error_code": "INTERNAL_SERVER_ERROR"},
    )
    return _error_response(500, "INTERNAL_SERVER_ERROR", "internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CommunityError, handle_community_error)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, handle_unexpected_error)
