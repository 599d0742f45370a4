from typing import Annotated

from fastapi import APIRouter, Depends, Query

from shelf_social_api.config import settings
from shelf_social_api.dependencies.auth import get_current_user_id
from shelf_social_api.dependencies.notifications import get_notification_service
from shelf_social_api.domain import UserId
from shelf_social_api.schemas.notification import (
    MarkReadRequest,
    MarkReadResponse,
    NotificationPage,
)
from shelf_social_api.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get(
    "",
    response_model=NotificationPage,
    summary="List My Notifications",
    responses={401: {"description": "Not authenticated"}},
)
def list_notifications(
    user_id: Annotated[UserId, Depends(get_current_user_id)],
    svc: Annotated[NotificationService, Depends(get_notification_service)],
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(
        settings.default_page_size, ge=1, le=settings.max_page_size, description="Items per page"
    ),
) -> NotificationPage:
    return svc.list_for_user(user_id, page=page, size=size)


@router.post(
    "/read",
    response_model=MarkReadResponse,
    summary="Mark Notifications Read",
    description=(
        "Marks the listed notifications as read, or every notification when the list is "
        "omitted or empty. "
        "Ids belonging to other users are ignored."
    ),
    responses={401: {"description": "Not authenticated"}},
)
def mark_notifications_read(
    payload: MarkReadRequest,
    user_id: Annotated[UserId, Depends(get_current_user_id)],
    svc: Annotated[NotificationService, Depends(get_notification_service)],
) -> MarkReadResponse:
    updated = svc.mark_read(user_id, payload.notification_ids)
    return MarkReadResponse(updated_count=updated)
