from __future__ import annotations

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..config import AppConfig, get_config
from ..exceptions import InvalidSession
from ..services.session_service import SessionIssuer, get_session_issuer


bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user_id(
    request: Request,
    bearer: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    issuer: SessionIssuer = Depends(get_session_issuer),
    config: AppConfig = Depends(get_config),
) -> str:
    """세션 쿠키 또는 Authorization: Bearer 헤더에서 유저 ID를 꺼낸다.

    둘 다 없거나 토큰이 유효하지 않으면 InvalidSession(401).
    """

    token = request.cookies.get(config.session.cookie_name)
    if not token and bearer is not None:
        token = bearer.credentials
    if not token:
        raise InvalidSession()

    user_id = issuer.verify(token)
    # RequestTraceMiddleware 가 요청 로그에 함께 남긴다.
    request.state.user_id = user_id
    return user_id
