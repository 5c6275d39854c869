from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, Response, status

from common.schemas.response import ApiResponse

from ..cookies import set_session_cookie
from ..deps import get_current_user_id
from ..schemas.posts import PostResponse
from ..schemas.users import (
    BookmarkCountResponse,
    LoginResponse,
    NicknameAvailabilityResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    SignUpRequest,
    SnsAccountResponse,
    UserResponse,
)
from ...config import AppConfig, get_config
from ...exceptions import DuplicateNickname
from ...services.bookmarks_service import BookmarksService, get_bookmarks_service
from ...services.users_service import UsersService, get_users_service


router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[LoginResponse],
    summary="SNS 식별 정보로 회원가입 또는 로그인",
    responses={201: {"description": "새 계정 생성"}, 200: {"description": "기존 계정 로그인"}},
)
def sign_up(
    body: SignUpRequest,
    request: Request,
    response: Response,
    service: UsersService = Depends(get_users_service),
    config: AppConfig = Depends(get_config),
) -> ApiResponse[LoginResponse]:
    result = service.login_or_register(body.to_domain())
    request.state.user_id = result.user.id

    response.status_code = status.HTTP_201_CREATED if result.is_new else status.HTTP_200_OK
    set_session_cookie(response, request, config.session, result.credential)
    return ApiResponse(
        data=LoginResponse(
            user=UserResponse.from_domain(result.user),
            token=result.credential.token,
            expires_at=result.credential.expires_at,
            is_new=result.is_new,
        )
    )


@router.get("/me", response_model=ApiResponse[ProfileResponse], summary="내 프로필 조회")
def get_me(
    user_id: str = Depends(get_current_user_id),
    service: UsersService = Depends(get_users_service),
) -> ApiResponse[ProfileResponse]:
    user, bookmarks = service.get_profile(user_id)
    return ApiResponse(data=ProfileResponse.from_profile(user, bookmarks))


@router.put("/me", response_model=ApiResponse[UserResponse], summary="내 프로필 수정")
def update_me(
    body: ProfileUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    service: UsersService = Depends(get_users_service),
) -> ApiResponse[UserResponse]:
    user = service.update_profile(user_id, body.to_domain())
    return ApiResponse(message="user updated", data=UserResponse.from_domain(user))


@router.get(
    "/nickname/{nickname}",
    response_model=ApiResponse[NicknameAvailabilityResponse],
    summary="닉네임 사용 가능 여부 확인",
)
def check_nickname(
    nickname: str,
    service: UsersService = Depends(get_users_service),
) -> ApiResponse[NicknameAvailabilityResponse]:
    if not service.is_nickname_available(nickname):
        raise DuplicateNickname()
    return ApiResponse(data=NicknameAvailabilityResponse(nickname=nickname, available=True))


@router.get(
    "/bookmarks",
    response_model=ApiResponse[list[PostResponse]],
    summary="북마크한 게시글 목록 조회",
)
def list_bookmarks(
    category: str | None = Query(None, description="project | study"),
    page: int = Query(1, description="조회할 페이지 (1부터 시작)"),
    per_page: int = Query(10, alias="perPage", description="페이지당 게시글 수 (최대 100)"),
    user_id: str = Depends(get_current_user_id),
    service: BookmarksService = Depends(get_bookmarks_service),
) -> ApiResponse[list[PostResponse]]:
    posts = service.list_bookmarked_posts(user_id, category, page, per_page)
    return ApiResponse(data=[PostResponse.from_domain(p) for p in posts])


@router.post(
    "/bookmarks/{post_id}",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[BookmarkCountResponse],
    summary="북마크 추가",
)
def add_bookmark(
    post_id: str,
    user_id: str = Depends(get_current_user_id),
    service: BookmarksService = Depends(get_bookmarks_service),
) -> ApiResponse[BookmarkCountResponse]:
    count = service.add_bookmark(user_id, post_id)
    return ApiResponse(message="bookmark added", data=BookmarkCountResponse(bookmark_count=count))


@router.delete(
    "/bookmarks/{post_id}",
    response_model=ApiResponse[BookmarkCountResponse],
    summary="북마크 삭제",
)
def remove_bookmark(
    post_id: str,
    user_id: str = Depends(get_current_user_id),
    service: BookmarksService = Depends(get_bookmarks_service),
) -> ApiResponse[BookmarkCountResponse]:
    count = service.remove_bookmark(user_id, post_id)
    return ApiResponse(message="bookmark removed", data=BookmarkCountResponse(bookmark_count=count))


# 단일 세그먼트 경로(/me, /bookmarks)와 /nickname/{nickname} 뒤에 선언해야 한다.
@router.get(
    "/{sns_type}/{sns_id}",
    response_model=ApiResponse[SnsAccountResponse],
    summary="SNS 계정 가입 여부 확인 (가입된 계정이면 로그인)",
)
def check_sns_account(
    sns_type: str,
    sns_id: str,
    request: Request,
    response: Response,
    service: UsersService = Depends(get_users_service),
    config: AppConfig = Depends(get_config),
) -> ApiResponse[SnsAccountResponse]:
    result = service.login_if_registered(sns_type, sns_id)
    if result is None:
        return ApiResponse(
            message="sns account not registered",
            data=SnsAccountResponse(sns_type=sns_type, sns_id=sns_id, registered=False),
        )

    request.state.user_id = result.user.id
    set_session_cookie(response, request, config.session, result.credential)
    return ApiResponse(
        message="login success",
        data=SnsAccountResponse(
            sns_type=sns_type,
            sns_id=sns_id,
            registered=True,
            login=LoginResponse(
                user=UserResponse.from_domain(result.user),
                token=result.credential.token,
                expires_at=result.credential.expires_at,
                is_new=False,
            ),
        ),
    )
