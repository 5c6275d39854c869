from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from common.schemas.response import ApiResponse

from ..deps import get_current_user_id
from ..schemas.posts import PostCreatedResponse, PostResponse, PostSubmissionRequest
from ...services.posts_service import PostsService, get_posts_service


router = APIRouter()


@router.get(
    "",
    response_model=ApiResponse[list[PostResponse]],
    summary="카테고리별 게시글 목록 조회",
)
def list_posts(
    category: str | None = Query(None, description="project | study"),
    page: int = Query(1, description="조회할 페이지 (1부터 시작)"),
    per_page: int = Query(10, alias="perPage", description="페이지당 게시글 수 (최대 100)"),
    service: PostsService = Depends(get_posts_service),
) -> ApiResponse[list[PostResponse]]:
    posts = service.list_posts(category, page, per_page)
    return ApiResponse(data=[PostResponse.from_domain(p) for p in posts])


@router.get(
    "/{post_id}",
    response_model=ApiResponse[PostResponse],
    summary="게시글 상세 조회 (조회수 증가)",
)
def get_post(
    post_id: str,
    service: PostsService = Depends(get_posts_service),
) -> ApiResponse[PostResponse]:
    post = service.get_post_detail(post_id)
    return ApiResponse(data=PostResponse.from_domain(post))


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[PostCreatedResponse],
    summary="게시글 작성",
)
def create_post(
    body: PostSubmissionRequest,
    user_id: str = Depends(get_current_user_id),
    service: PostsService = Depends(get_posts_service),
) -> ApiResponse[PostCreatedResponse]:
    post = service.create_post(user_id, body.to_domain())
    return ApiResponse(message="post created", data=PostCreatedResponse(id=post.id or ""))


@router.put(
    "/{post_id}",
    response_model=ApiResponse[dict],
    summary="게시글 수정 (작성자만)",
)
def update_post(
    post_id: str,
    body: PostSubmissionRequest,
    user_id: str = Depends(get_current_user_id),
    service: PostsService = Depends(get_posts_service),
) -> ApiResponse[dict]:
    service.update_post(user_id, post_id, body.to_domain())
    return ApiResponse(message="post updated", data={})


@router.delete(
    "/{post_id}",
    response_model=ApiResponse[dict],
    summary="게시글 삭제 (작성자만)",
)
def delete_post(
    post_id: str,
    user_id: str = Depends(get_current_user_id),
    service: PostsService = Depends(get_posts_service),
) -> ApiResponse[dict]:
    service.delete_post(user_id, post_id)
    return ApiResponse(message="post deleted", data={})
