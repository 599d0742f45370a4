import logging
from dataclasses import dataclass
from typing import Literal

from pydantic import validate_call
from sqlalchemy.exc import IntegrityError

from shelf_social_api.domain import CommentId, LikeTargetKind, ListId, ReviewId, UserId
from shelf_social_api.errors import NotFound, is_foreign_key_violation, store_errors
from shelf_social_api.notifications import SocialEvent
from shelf_social_api.repositories.catalog_repository import CatalogRepository
from shelf_social_api.repositories.comments_repository import CommentsRepository
from shelf_social_api.repositories.likes_repository import LikesRepository
from shelf_social_api.repositories.reviews_repository import ReviewsRepository
from shelf_social_api.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LikeTarget:
    kind: LikeTargetKind
    id: str
    owner_id: str
    scope_kind: Literal["review", "list"] | None
    scope_id: str | None


class LikeService:
    def __init__(
        self,
        likes: LikesRepository,
        reviews: ReviewsRepository,
        comments: CommentsRepository,
        catalog: CatalogRepository,
        notifications: NotificationService,
    ) -> None:
        self._likes = likes
        self._reviews = reviews
        self._comments = comments
        self._catalog = catalog
        self._notifications = notifications

    def _resolve_target(self, target_kind: LikeTargetKind, target_id: str) -> LikeTarget:
        if target_kind == "review":
            review = self._reviews.get_by_id(ReviewId(target_id))
            if review is None:
                raise NotFound(f"Review {target_id} not found")
            return LikeTarget("review", review.id, review.user_id, "review", review.id)

        if target_kind == "comment":
            comment = self._comments.get_by_id(CommentId(target_id))
            if comment is None:
                raise NotFound(f"Comment {target_id} not found")
            scope_kind: Literal["review", "list"] = "review" if comment.review_id else "list"
            return LikeTarget(
                kind="comment",
                id=comment.id,
                owner_id=comment.user_id,
                scope_kind=scope_kind,
                scope_id=comment.review_id or comment.list_id,
            )

        collection = self._catalog.get_list(ListId(target_id))
        if collection is None:
            raise NotFound(f"List {target_id} not found")
        return LikeTarget("list", collection.id, collection.user_id, "list", collection.id)

    @validate_call
    def like(self, target_id: str, target_kind: LikeTargetKind, actor_id: UserId) -> bool:
        """
        Records that ``actor_id`` likes the target. Idempotent.

        Returns True when this call created the like. A repeated or concurrent like
        for the same pair returns False and produces no second notification.
        """
        with store_errors():
            target = self._resolve_target(target_kind, target_id)
            try:
                inserted = self._likes.insert_if_absent(actor_id, target_kind, target.id)
            except IntegrityError as exc:
                self._likes.rollback()
                # Target deleted between the lookup and the insert.
                if is_foreign_key_violation(exc):
                    raise NotFound() from exc
                raise

        if not inserted:
            logger.debug("Like already present user=%s %s=%s", actor_id, target_kind, target_id)
            return False

        self._notifications.fan_out(
            SocialEvent(
                kind="like",
                subject_kind=target.kind,
                subject_id=target.id,
                subject_owner_id=target.owner_id,
                actor_id=actor_id,
                scope_kind=target.scope_kind,
                scope_id=target.scope_id,
            )
        )
        return True

    @validate_call
    def unlike(self, target_id: str, target_kind: LikeTargetKind, actor_id: UserId) -> bool:
        """
        Removes the like if present. Notifications already sent are kept.
        """
        with store_errors():
            removed = self._likes.delete(actor_id, target_kind, target_id)
        if not removed:
            logger.debug("No like to remove user=%s %s=%s", actor_id, target_kind, target_id)
        return removed
