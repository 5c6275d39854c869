from __future__ import annotations

from fastapi import Request
from starlette.responses import Response

from ..config import SessionConfig
from ..models.session import SessionCredential


def _cookie_domain(request: Request, config: SessionConfig) -> str | None:
    # 설정이 없으면 요청 host 에 쿠키를 묶는다.
    return config.cookie_domain or request.url.hostname


def set_session_cookie(
    response: Response,
    request: Request,
    config: SessionConfig,
    credential: SessionCredential,
) -> None:
    response.set_cookie(
        key=config.cookie_name,
        value=credential.token,
        expires=credential.expires_at_datetime(),
        domain=_cookie_domain(request, config),
        httponly=True,
        secure=config.cookie_secure,
        samesite="lax",
    )


def clear_session_cookie(
    response: Response, request: Request, config: SessionConfig
) -> None:
    response.delete_cookie(
        key=config.cookie_name,
        domain=_cookie_domain(request, config),
        httponly=True,
        secure=config.cookie_secure,
        samesite="lax",
    )
