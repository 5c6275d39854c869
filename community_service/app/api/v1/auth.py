"""SNS 로그인 리다이렉트/콜백 라우터.

콜백은 provider 토큰 교환 -> 프로필 조회 -> Identity Linker -> 세션 쿠키 설정 순서로 처리한 뒤
설정된 클라이언트 URL 로 리다이렉트한다.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse

from common.schemas.response import ApiResponse

from ..cookies import clear_session_cookie, set_session_cookie
from ...config import AppConfig, get_config
from ...services.oauth_clients import (
    GoogleOAuthClient,
    KakaoOAuthClient,
    OAuthClient,
    get_google_client,
    get_kakao_client,
)
from ...services.users_service import UsersService, get_users_service


router = APIRouter()


def _complete_login(
    request: Request,
    client: OAuthClient,
    code: str | None,
    service: UsersService,
    config: AppConfig,
) -> RedirectResponse:
    identity = client.fetch_identity(code)
    result = service.login_or_register(identity)
    request.state.user_id = result.user.id

    response = RedirectResponse(url=config.client_url)
    set_session_cookie(response, request, config.session, result.credential)
    return response


@router.get("/kakao", summary="Kakao 로그인 페이지로 리다이렉트")
def kakao_login(client: KakaoOAuthClient = Depends(get_kakao_client)) -> RedirectResponse:
    return RedirectResponse(url=client.authorize_url())


@router.get("/kakao/callback", summary="Kakao 로그인 콜백")
def kakao_callback(
    request: Request,
    code: str | None = Query(None),
    client: KakaoOAuthClient = Depends(get_kakao_client),
    service: UsersService = Depends(get_users_service),
    config: AppConfig = Depends(get_config),
) -> RedirectResponse:
    return _complete_login(request, client, code, service, config)


@router.get("/google", summary="Google 로그인 페이지로 리다이렉트")
def google_login(client: GoogleOAuthClient = Depends(get_google_client)) -> RedirectResponse:
    return RedirectResponse(url=client.authorize_url())


@router.get("/google/callback", summary="Google 로그인 콜백")
def google_callback(
    request: Request,
    code: str | None = Query(None),
    client: GoogleOAuthClient = Depends(get_google_client),
    service: UsersService = Depends(get_users_service),
    config: AppConfig = Depends(get_config),
) -> RedirectResponse:
    return _complete_login(request, client, code, service, config)


@router.post("/logout", summary="로그아웃 (세션 쿠키 삭제)")
def logout(request: Request, config: AppConfig = Depends(get_config)) -> JSONResponse:
    response = JSONResponse(content=ApiResponse[dict](message="logged out", data={}).model_dump())
    clear_session_cookie(response, request, config.session)
    return response
