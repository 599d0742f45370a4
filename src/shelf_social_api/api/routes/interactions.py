from typing import Annotated

from fastapi import APIRouter, Depends

from shelf_social_api.dependencies.auth import get_current_user_id
from shelf_social_api.dependencies.social import get_interaction_service
from shelf_social_api.domain import BookId, UserId
from shelf_social_api.errors import NotFound
from shelf_social_api.schemas.interaction import InteractionRead, InteractionUpdate
from shelf_social_api.services.interaction_service import InteractionService

router = APIRouter(prefix="/books", tags=["interactions"])


@router.get(
    "/{book_id}/interaction",
    response_model=InteractionRead,
    responses={401: {"description": "Not authenticated"}, 404: {"description": "Not recorded"}},
)
def get_my_interaction(
    book_id: BookId,
    user_id: Annotated[UserId, Depends(get_current_user_id)],
    svc: Annotated[InteractionService, Depends(get_interaction_service)],
) -> InteractionRead:
    interaction = svc.get(user_id, book_id)
    if interaction is None:
        raise NotFound(f"No interaction recorded for book {book_id}")
    return interaction


@router.patch(
    "/{book_id}/interaction",
    response_model=InteractionRead,
    summary="Update My Interaction With a Book",
    description="Only provided fields are updated. The record is created on first use.",
    responses={401: {"description": "Not authenticated"}, 404: {"description": "Book not found"}},
)
def update_my_interaction(
    book_id: BookId,
    payload: InteractionUpdate,
    user_id: Annotated[UserId, Depends(get_current_user_id)],
    svc: Annotated[InteractionService, Depends(get_interaction_service)],
) -> InteractionRead:
    return svc.update(user_id, book_id, payload)
