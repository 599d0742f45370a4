from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from shelf_social_api.config import settings
from shelf_social_api.dependencies.auth import get_current_user_id, get_optional_user_id
from shelf_social_api.dependencies.social import get_comment_service, get_like_service
from shelf_social_api.domain import ListId, UserId
from shelf_social_api.schemas.comment import CommentCreateRequest, CommentRead
from shelf_social_api.schemas.common import Page
from shelf_social_api.schemas.like import LikeStatus
from shelf_social_api.services.comment_service import CommentService
from shelf_social_api.services.like_service import LikeService

router = APIRouter(prefix="/lists", tags=["lists"])


@router.get("/{list_id}/comments", response_model=Page[CommentRead])
def list_list_comments(
    list_id: ListId,
    svc: Annotated[CommentService, Depends(get_comment_service)],
    viewer_id: Annotated[UserId | None, Depends(get_optional_user_id)],
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(
        settings.default_page_size, ge=1, le=settings.max_page_size, description="Items per page"
    ),
) -> Page[CommentRead]:
    return svc.list_top_level(list_id, "list", viewer_id=viewer_id, page=page, size=size)


@router.post(
    "/{list_id}/comments",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
    responses={401: {"description": "Not authenticated"}, 404: {"description": "List not found"}},
)
def comment_on_list(
    list_id: ListId,
    payload: CommentCreateRequest,
    actor_id: Annotated[UserId, Depends(get_current_user_id)],
    svc: Annotated[CommentService, Depends(get_comment_service)],
) -> CommentRead:
    return svc.add_comment(
        list_id, "list", actor_id, payload.text, parent_comment_id=payload.parent_comment_id
    )


@router.put("/{list_id}/like", response_model=LikeStatus)
def like_list(
    list_id: ListId,
    actor_id: Annotated[UserId, Depends(get_current_user_id)],
    svc: Annotated[LikeService, Depends(get_like_service)],
) -> LikeStatus:
    changed = svc.like(list_id, "list", actor_id)
    return LikeStatus(target_kind="list", target_id=list_id, liked=True, changed=changed)


@router.delete("/{list_id}/like", response_model=LikeStatus)
def unlike_list(
    list_id: ListId,
    actor_id: Annotated[UserId, Depends(get_current_user_id)],
    svc: Annotated[LikeService, Depends(get_like_service)],
) -> LikeStatus:
    changed = svc.unlike(list_id, "list", actor_id)
    return LikeStatus(target_kind="list", target_id=list_id, liked=False, changed=changed)
