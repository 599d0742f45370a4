from datetime import UTC, datetime
from typing import Any

from sqlalchemy import update
from sqlalchemy.orm import Session

from shelf_social_api.database import dialect_insert
from shelf_social_api.domain import BookId, UserId
from shelf_social_api.models import UserBookInteraction

# Flags that keep a rating alive once the review carrying it is gone.
# is_currently_reading is deliberately absent.
RATING_RETAINING_FLAGS = ("is_read", "is_on_watchlist", "is_liked", "is_owned")


def interaction_upsert(
    session: Session, user_id: UserId, book_id: BookId, values: dict[str, Any]
) -> Any:
    """
    Builds an INSERT ... ON CONFLICT (user_id, book_id) DO UPDATE touching only ``values``.
    """
    now = datetime.now(UTC)
    stmt = dialect_insert(session, UserBookInteraction).values(
        user_id=user_id, book_id=book_id, created_at=now, updated_at=now, **values
    )
    return stmt.on_conflict_do_update(
        index_elements=["user_id", "book_id"],
        set_={**values, "updated_at": now},
    )


class InteractionsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: UserId, book_id: BookId) -> UserBookInteraction | None:
        return self.session.get(UserBookInteraction, (user_id, book_id))

    def upsert(
        self, user_id: UserId, book_id: BookId, values: dict[str, Any]
    ) -> UserBookInteraction:
        self.session.execute(interaction_upsert(self.session, user_id, book_id, values))
        self.session.commit()

        interaction = self.get(user_id, book_id)
        if interaction is None:
            raise RuntimeError(
                f"Interaction for user={user_id} book={book_id} vanished after upsert"
            )
        self.session.refresh(interaction)
        return interaction

    def clear_rating_if_unretained(self, user_id: UserId, book_id: BookId) -> bool:
        """
        Clears the rating when no retaining flag is set.

        The flag check is part of the UPDATE so a flag set concurrently keeps the rating.
        Returns True when a rating was cleared.
        """
        stmt = (
            update(UserBookInteraction)
            .where(UserBookInteraction.user_id == user_id)
            .where(UserBookInteraction.book_id == book_id)
            .where(UserBookInteraction.rating.is_not(None))
            .values(rating=None, updated_at=datetime.now(UTC))
            .execution_options(synchronize_session=False)
        )
        for flag in RATING_RETAINING_FLAGS:
            stmt = stmt.where(getattr(UserBookInteraction, flag).is_(False))

        result = self.session.execute(stmt)
        self.session.commit()
        return result.rowcount > 0

    def rollback(self) -> None:
        self.session.rollback()
