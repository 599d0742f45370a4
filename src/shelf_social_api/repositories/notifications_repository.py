import uuid
from collections.abc import Sequence
from datetime import UTC, datetime

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from shelf_social_api.domain import ListId, ReviewId, UserId
from shelf_social_api.models import Book, ListCollection, Notification, Review
from shelf_social_api.notifications import NotificationDraft


class NotificationsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, draft: NotificationDraft, entity_parent_title: str | None) -> Notification:
        notification = Notification(
            id=str(uuid.uuid4()),
            user_id=draft.user_id,
            actor_id=draft.actor_id,
            type=draft.type,
            entity_type=draft.entity_type,
            entity_id=draft.entity_id,
            entity_parent_id=draft.entity_parent_id,
            entity_parent_title=entity_parent_title,
            read=False,
            created_at=datetime.now(UTC),
        )
        self.session.add(notification)
        self.session.commit()

        return notification

    def rollback(self) -> None:
        self.session.rollback()

    def review_book_title(self, review_id: ReviewId) -> str | None:
        stmt = select(Book.title).join(Review, Review.book_id == Book.id).where(
            Review.id == review_id
        )
        return self.session.scalars(stmt).first()

    def list_name(self, list_id: ListId) -> str | None:
        stmt = select(ListCollection.name).where(ListCollection.id == list_id)
        return self.session.scalars(stmt).first()

    def list_for_user(
        self, user_id: UserId, limit: int, offset: int
    ) -> tuple[Sequence[Notification], int]:
        """
        Returns a tuple of (items, total_count), newest first.
        """
        count_stmt = select(func.count()).select_from(Notification).where(
            Notification.user_id == user_id
        )
        stmt = (
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
            .offset(offset)
        )

        total = self.session.execute(count_stmt).scalar_one()
        items = self.session.scalars(stmt).all()

        return items, total

    def count_unread(self, user_id: UserId) -> int:
        stmt = (
            select(func.count())
            .select_from(Notification)
            .where(Notification.user_id == user_id)
            .where(Notification.read.is_(False))
        )
        return self.session.execute(stmt).scalar_one()

    def mark_read(self, user_id: UserId, notification_ids: Sequence[str] | None) -> int:
        stmt = (
            update(Notification)
            .where(Notification.user_id == user_id)
            .where(Notification.read.is_(False))
            .values(read=True)
            .execution_options(synchronize_session=False)
        )
        if notification_ids:
            stmt = stmt.where(Notification.id.in_(notification_ids))

        result = self.session.execute(stmt)
        self.session.commit()
        return result.rowcount
