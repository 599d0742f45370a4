from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from shelf_social_api.config import settings
from shelf_social_api.dependencies.auth import get_current_user_id, get_optional_user_id
from shelf_social_api.dependencies.reviews import get_review_service
from shelf_social_api.dependencies.social import get_comment_service, get_like_service
from shelf_social_api.domain import BookId, ReviewId, UserId
from shelf_social_api.schemas.comment import CommentCreateRequest, CommentRead
from shelf_social_api.schemas.common import Page
from shelf_social_api.schemas.like import LikeStatus
from shelf_social_api.schemas.review import ReviewCreateRequest, ReviewRead, ReviewUpdateRequest
from shelf_social_api.services.comment_service import CommentService
from shelf_social_api.services.like_service import LikeService
from shelf_social_api.services.review_service import ReviewService

router = APIRouter(tags=["reviews"])

_AUTH_RESPONSES: dict[int | str, dict[str, str]] = {
    401: {"description": "Not authenticated"},
    404: {"description": "Content no longer available"},
}


@router.post(
    "/books/{book_id}/reviews",
    response_model=ReviewRead,
    status_code=status.HTTP_201_CREATED,
    summary="Review a Book",
    responses={**_AUTH_RESPONSES, 409: {"description": "Book already reviewed by this user"}},
)
def create_review(
    book_id: BookId,
    payload: ReviewCreateRequest,
    actor_id: Annotated[UserId, Depends(get_current_user_id)],
    svc: Annotated[ReviewService, Depends(get_review_service)],
) -> ReviewRead:
    return svc.create(book_id, actor_id, payload.rating, payload.review_text)


@router.get("/books/{book_id}/reviews", response_model=Page[ReviewRead])
def list_book_reviews(
    book_id: BookId,
    svc: Annotated[ReviewService, Depends(get_review_service)],
    viewer_id: Annotated[UserId | None, Depends(get_optional_user_id)],
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(
        settings.default_page_size, ge=1, le=settings.max_page_size, description="Items per page"
    ),
) -> Page[ReviewRead]:
    """Reviews of a book, newest first."""
    return svc.list_for_book(book_id, viewer_id=viewer_id, page=page, size=size)


@router.get("/reviews/{review_id}", response_model=ReviewRead)
def get_review(
    review_id: ReviewId,
    svc: Annotated[ReviewService, Depends(get_review_service)],
    viewer_id: Annotated[UserId | None, Depends(get_optional_user_id)],
) -> ReviewRead:
    return svc.get(review_id, viewer_id=viewer_id)


@router.patch(
    "/reviews/{review_id}",
    response_model=ReviewRead,
    summary="Edit a Review",
    description="Updates the rating and/or text of a review. Only the author may edit it.",
    responses={**_AUTH_RESPONSES, 403: {"description": "Not the author"}},
)
def update_review(
    review_id: ReviewId,
    payload: ReviewUpdateRequest,
    actor_id: Annotated[UserId, Depends(get_current_user_id)],
    svc: Annotated[ReviewService, Depends(get_review_service)],
) -> ReviewRead:
    return svc.update(review_id, actor_id, rating=payload.rating, review_text=payload.review_text)


@router.delete(
    "/reviews/{review_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a Review",
    description=(
        "Deletes a review together with its comments and likes. The rating it left on the "
        "author's interaction with the book is cleared unless the book is marked read, "
        "watchlisted, liked or owned."
    ),
    responses={**_AUTH_RESPONSES, 403: {"description": "Not the author"}},
)
def delete_review(
    review_id: ReviewId,
    actor_id: Annotated[UserId, Depends(get_current_user_id)],
    svc: Annotated[ReviewService, Depends(get_review_service)],
) -> Response:
    svc.delete(review_id, actor_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/reviews/{review_id}/like", response_model=LikeStatus, responses=_AUTH_RESPONSES)
def like_review(
    review_id: ReviewId,
    actor_id: Annotated[UserId, Depends(get_current_user_id)],
    svc: Annotated[LikeService, Depends(get_like_service)],
) -> LikeStatus:
    changed = svc.like(review_id, "review", actor_id)
    return LikeStatus(target_kind="review", target_id=review_id, liked=True, changed=changed)


@router.delete("/reviews/{review_id}/like", response_model=LikeStatus, responses=_AUTH_RESPONSES)
def unlike_review(
    review_id: ReviewId,
    actor_id: Annotated[UserId, Depends(get_current_user_id)],
    svc: Annotated[LikeService, Depends(get_like_service)],
) -> LikeStatus:
    changed = svc.unlike(review_id, "review", actor_id)
    return LikeStatus(target_kind="review", target_id=review_id, liked=False, changed=changed)


@router.get("/reviews/{review_id}/comments", response_model=Page[CommentRead])
def list_review_comments(
    review_id: ReviewId,
    svc: Annotated[CommentService, Depends(get_comment_service)],
    viewer_id: Annotated[UserId | None, Depends(get_optional_user_id)],
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(
        settings.default_page_size, ge=1, le=settings.max_page_size, description="Items per page"
    ),
) -> Page[CommentRead]:
    """Top-level comments on a review, oldest first, each with its replies."""
    return svc.list_top_level(review_id, "review", viewer_id=viewer_id, page=page, size=size)


@router.post(
    "/reviews/{review_id}/comments",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
    responses=_AUTH_RESPONSES,
)
def comment_on_review(
    review_id: ReviewId,
    payload: CommentCreateRequest,
    actor_id: Annotated[UserId, Depends(get_current_user_id)],
    svc: Annotated[CommentService, Depends(get_comment_service)],
) -> CommentRead:
    return svc.add_comment(
        review_id, "review", actor_id, payload.text, parent_comment_id=payload.parent_comment_id
    )
