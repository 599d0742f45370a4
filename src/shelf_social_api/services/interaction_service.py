import logging

from pydantic import validate_call

from shelf_social_api.domain import BookId, UserId
from shelf_social_api.errors import NotFound, store_errors
from shelf_social_api.models import UserBookInteraction
from shelf_social_api.repositories.catalog_repository import CatalogRepository
from shelf_social_api.repositories.interactions_repository import InteractionsRepository
from shelf_social_api.schemas.interaction import InteractionRead, InteractionUpdate

logger = logging.getLogger(__name__)

_NULLABLE_FIELDS = frozenset({"rating", "read_date"})
_FLAGS = ("is_read", "is_currently_reading", "is_on_watchlist", "is_liked", "is_owned")


def _is_blank(interaction: UserBookInteraction) -> bool:
    # No flag and no rating: the user has nothing recorded for the book.
    return interaction.rating is None and not any(getattr(interaction, f) for f in _FLAGS)


class InteractionService:
    def __init__(self, repo: InteractionsRepository, catalog: CatalogRepository) -> None:
        self.repo = repo
        self.catalog = catalog

    @validate_call
    def get(self, user_id: UserId, book_id: BookId) -> InteractionRead | None:
        with store_errors():
            interaction = self.repo.get(user_id, book_id)
        if interaction is None or _is_blank(interaction):
            return None
        return InteractionRead.model_validate(interaction)

    @validate_call
    def update(
        self, user_id: UserId, book_id: BookId, patch: InteractionUpdate
    ) -> InteractionRead:
        """
        Upserts the user's interaction with a book. Only fields set on ``patch`` change;
        rating and read_date may be cleared with an explicit null, flags may not.
        """
        values = {
            key: value
            for key, value in patch.model_dump(exclude_unset=True).items()
            if value is not None or key in _NULLABLE_FIELDS
        }
        with store_errors():
            if self.catalog.get_book(book_id) is None:
                raise NotFound(f"Book {book_id} not found")
            interaction = self.repo.upsert(user_id, book_id, values)

        logger.info(
            "interaction_updated",
            extra={"user_id": user_id, "book_id": book_id, "fields": sorted(values)},
        )
        return InteractionRead.model_validate(interaction)

    def mark_currently_reading(self, user_id: UserId, book_id: BookId) -> InteractionRead:
        # Starting a book takes it off the watchlist.
        return self.update(
            user_id, book_id, InteractionUpdate(is_currently_reading=True, is_on_watchlist=False)
        )

    def add_to_watchlist(self, user_id: UserId, book_id: BookId) -> InteractionRead:
        return self.update(
            user_id, book_id, InteractionUpdate(is_on_watchlist=True, is_currently_reading=False)
        )

    def set_liked(self, user_id: UserId, book_id: BookId, liked: bool) -> InteractionRead:
        return self.update(user_id, book_id, InteractionUpdate(is_liked=liked))
