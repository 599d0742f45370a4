from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from shelf_social_api.domain import NotificationEntityType, NotificationType
from shelf_social_api.schemas.common import Page


class NotificationRead(BaseModel):
    id: str = Field(description="Unique ID of the notification")
    user_id: str = Field(description="Recipient")
    actor_id: str = Field(description="User whose action produced the notification")
    type: NotificationType = Field(description="Kind of social event")
    entity_type: NotificationEntityType = Field(description="Kind of entity acted upon")
    entity_id: str = Field(description="Entity acted upon")
    entity_parent_id: str | None = Field(
        default=None, description="Review or list the entity belongs to"
    )
    entity_parent_title: str | None = Field(
        default=None,
        description="Book title or list name captured when the notification was created",
        examples=["Dune"],
    )
    read: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class NotificationPage(Page[NotificationRead]):
    unread_count: int = Field(description="Unread notifications across all pages")


class MarkReadRequest(BaseModel):
    notification_ids: list[str] | None = Field(
        default=None,
        description="Notifications to mark as read; every notification when omitted or empty",
    )


class MarkReadResponse(BaseModel):
    updated_count: int = Field(description="Number of notifications flipped to read")
