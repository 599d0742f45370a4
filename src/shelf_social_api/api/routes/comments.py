from typing import Annotated

from fastapi import APIRouter, Depends

from shelf_social_api.dependencies.auth import get_current_user_id, get_optional_user_id
from shelf_social_api.dependencies.social import get_comment_service, get_like_service
from shelf_social_api.domain import CommentId, UserId
from shelf_social_api.schemas.comment import CommentDeleteResponse, CommentRead
from shelf_social_api.schemas.like import LikeStatus
from shelf_social_api.services.comment_service import CommentService
from shelf_social_api.services.like_service import LikeService

router = APIRouter(prefix="/comments", tags=["comments"])


@router.get("/{comment_id}/replies", response_model=list[CommentRead])
def list_replies(
    comment_id: CommentId,
    svc: Annotated[CommentService, Depends(get_comment_service)],
    viewer_id: Annotated[UserId | None, Depends(get_optional_user_id)],
) -> list[CommentRead]:
    """Replies to a top-level comment, oldest first."""
    return svc.list_replies(comment_id, viewer_id=viewer_id)


@router.delete(
    "/{comment_id}",
    response_model=CommentDeleteResponse,
    summary="Delete a Comment",
    description=(
        "Removes a comment that has no replies. A comment with replies is tombstoned "
        "instead: its text is replaced and the replies stay attached."
    ),
    responses={
        401: {"description": "Not authenticated"},
        403: {"description": "Not the author"},
        404: {"description": "Content no longer available"},
    },
)
def delete_comment(
    comment_id: CommentId,
    actor_id: Annotated[UserId, Depends(get_current_user_id)],
    svc: Annotated[CommentService, Depends(get_comment_service)],
) -> CommentDeleteResponse:
    outcome = svc.delete(comment_id, actor_id)
    return CommentDeleteResponse(comment_id=comment_id, outcome=outcome)


@router.put("/{comment_id}/like", response_model=LikeStatus)
def like_comment(
    comment_id: CommentId,
    actor_id: Annotated[UserId, Depends(get_current_user_id)],
    svc: Annotated[LikeService, Depends(get_like_service)],
) -> LikeStatus:
    changed = svc.like(comment_id, "comment", actor_id)
    return LikeStatus(target_kind="comment", target_id=comment_id, liked=True, changed=changed)


@router.delete("/{comment_id}/like", response_model=LikeStatus)
def unlike_comment(
    comment_id: CommentId,
    actor_id: Annotated[UserId, Depends(get_current_user_id)],
    svc: Annotated[LikeService, Depends(get_like_service)],
) -> LikeStatus:
    changed = svc.unlike(comment_id, "comment", actor_id)
    return LikeStatus(target_kind="comment", target_id=comment_id, liked=False, changed=changed)
