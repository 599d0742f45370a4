import logging
from collections.abc import Sequence

from pydantic import validate_call
from sqlalchemy.exc import SQLAlchemyError

from shelf_social_api.domain import ListId, PageNumber, PageSize, ReviewId, UserId
from shelf_social_api.errors import store_errors
from shelf_social_api.models import Notification
from shelf_social_api.notifications import NotificationDraft, SocialEvent, derive_notification
from shelf_social_api.repositories.notifications_repository import NotificationsRepository
from shelf_social_api.schemas.common import page_offset, total_pages
from shelf_social_api.schemas.notification import NotificationPage, NotificationRead

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, repo: NotificationsRepository) -> None:
        self._repo = repo

    def fan_out(self, event: SocialEvent) -> Notification | None:
        """
        Derives and stores the notification for a committed social action.

        Best effort: the triggering mutation is already durable, so a failure here is
        logged and swallowed. The insert is never retried.
        """
        draft = derive_notification(event)
        if draft is None:
            logger.debug(
                "Notification suppressed for self-action kind=%s subject=%s actor=%s",
                event.kind,
                event.subject_id,
                event.actor_id,
            )
            return None

        try:
            title = self._resolve_parent_title(draft)
            notification = self._repo.create(draft, entity_parent_title=title)
        except SQLAlchemyError:
            self._repo.rollback()
            logger.exception(
                "notification_fan_out_failed",
                extra={
                    "notification_type": draft.type,
                    "recipient_id": draft.user_id,
                    "actor_id": draft.actor_id,
                    "entity_id": draft.entity_id,
                },
            )
            return None

        logger.info(
            "notification_created",
            extra={
                "notification_type": draft.type,
                "recipient_id": draft.user_id,
                "actor_id": draft.actor_id,
                "entity_id": draft.entity_id,
            },
        )
        return notification

    def _resolve_parent_title(self, draft: NotificationDraft) -> str | None:
        if draft.scope_id is None:
            return None
        if draft.scope_kind == "review":
            return self._repo.review_book_title(ReviewId(draft.scope_id))
        return self._repo.list_name(ListId(draft.scope_id))

    @validate_call
    def list_for_user(
        self, user_id: UserId, page: PageNumber = 1, size: PageSize = 10
    ) -> NotificationPage:
        with store_errors():
            items, total = self._repo.list_for_user(
                user_id, limit=size, offset=page_offset(page, size)
            )
            unread = self._repo.count_unread(user_id)

        return NotificationPage(
            items=[NotificationRead.model_validate(item) for item in items],
            total=total,
            page=page,
            page_size=size,
            total_pages=total_pages(total, size),
            unread_count=unread,
        )

    @validate_call
    def mark_read(self, user_id: UserId, notification_ids: Sequence[str] | None = None) -> int:
        """
        Flips the read flag on the recipient's notifications; all of them when ids are empty.
        """
        with store_errors():
            updated = self._repo.mark_read(user_id, notification_ids)
        logger.info("Marked %s notifications read for user=%s", updated, user_id)
        return updated
