import logging
from collections.abc import Sequence

from pydantic import validate_call
from sqlalchemy.exc import IntegrityError

from shelf_social_api.domain import (
    CommentId,
    CommentTargetKind,
    ListId,
    PageNumber,
    PageSize,
    ReviewId,
    UserId,
)
from shelf_social_api.errors import NotFound, Unauthorized, is_foreign_key_violation, store_errors
from shelf_social_api.models import Comment
from shelf_social_api.notifications import SocialEvent
from shelf_social_api.repositories.catalog_repository import CatalogRepository
from shelf_social_api.repositories.comments_repository import CommentsRepository
from shelf_social_api.repositories.likes_repository import LikesRepository
from shelf_social_api.repositories.reviews_repository import ReviewsRepository
from shelf_social_api.schemas.comment import CommentRead
from shelf_social_api.schemas.common import Page, page_offset, total_pages
from shelf_social_api.services.notification_service import NotificationService
from shelf_social_api.threads import (
    CommentState,
    DeleteOutcome,
    Reply,
    plan_delete,
    position_of,
    reply_anchor,
)

logger = logging.getLogger(__name__)


def _thread_id(comment: Comment, target_kind: CommentTargetKind) -> str | None:
    if target_kind == "review":
        return comment.review_id
    return comment.list_id


class CommentService:
    def __init__(
        self,
        comments: CommentsRepository,
        likes: LikesRepository,
        reviews: ReviewsRepository,
        catalog: CatalogRepository,
        notifications: NotificationService,
    ) -> None:
        self._comments = comments
        self._likes = likes
        self._reviews = reviews
        self._catalog = catalog
        self._notifications = notifications

    def _target_owner(self, target_kind: CommentTargetKind, target_id: str) -> str:
        if target_kind == "review":
            review = self._reviews.get_by_id(ReviewId(target_id))
            if review is None:
                raise NotFound(f"Review {target_id} not found")
            return review.user_id

        collection = self._catalog.get_list(ListId(target_id))
        if collection is None:
            raise NotFound(f"List {target_id} not found")
        return collection.user_id

    def _to_schema(
        self,
        comment: Comment,
        like_counts: dict[str, int],
        liked: set[str],
        replies: list[CommentRead] | None = None,
    ) -> CommentRead:
        return CommentRead(
            id=comment.id,
            user_id=comment.user_id,
            review_id=comment.review_id,
            list_id=comment.list_id,
            parent_comment_id=comment.parent_comment_id,
            text=comment.text,
            state=CommentState(comment.state),
            created_at=comment.created_at,
            like_count=like_counts.get(comment.id, 0),
            liked_by_viewer=comment.id in liked,
            replies=replies or [],
        )

    def _annotate(
        self, comments: Sequence[Comment], viewer_id: UserId | None
    ) -> tuple[dict[str, int], set[str]]:
        ids = [c.id for c in comments]
        return (
            self._likes.count_by_target("comment", ids),
            self._likes.liked_by(viewer_id, "comment", ids),
        )

    @validate_call
    def add_comment(
        self,
        target_id: str,
        target_kind: CommentTargetKind,
        actor_id: UserId,
        text: str,
        parent_comment_id: CommentId | None = None,
    ) -> CommentRead:
        """
        Posts a top-level comment or a reply on a review or list thread.

        A reply to a reply is stored under the same top-level comment. The person
        being replied to is notified; for a top-level comment the review or list
        owner is.
        """
        with store_errors():
            target_owner_id = self._target_owner(target_kind, target_id)

            replied_to: Comment | None = None
            stored_parent_id: str | None = None
            if parent_comment_id is not None:
                replied_to = self._comments.get_by_id(parent_comment_id)
                if replied_to is None or _thread_id(replied_to, target_kind) != target_id:
                    raise NotFound(f"Comment {parent_comment_id} not found on this thread")
                anchor = reply_anchor(replied_to.id, position_of(replied_to.parent_comment_id))
                stored_parent_id = anchor.parent_id

            try:
                comment = self._comments.create(
                    user_id=actor_id,
                    target_kind=target_kind,
                    target_id=target_id,
                    text=text,
                    parent_comment_id=stored_parent_id,
                )
            except IntegrityError as exc:
                self._comments.rollback()
                # Target or parent deleted between the lookup and the insert.
                if is_foreign_key_violation(exc):
                    raise NotFound() from exc
                raise
            result = self._to_schema(comment, like_counts={}, liked=set())
            replied_to_owner = replied_to.user_id if replied_to is not None else None
            replied_to_id = replied_to.id if replied_to is not None else None

        logger.info(
            "comment_created",
            extra={
                "comment_id": result.id,
                "target_kind": target_kind,
                "target_id": target_id,
                "is_reply": stored_parent_id is not None,
            },
        )

        if replied_to_id is not None and replied_to_owner is not None:
            event = SocialEvent(
                kind="reply",
                subject_kind="comment",
                subject_id=replied_to_id,
                subject_owner_id=replied_to_owner,
                actor_id=actor_id,
                comment_id=result.id,
                scope_kind=target_kind,
                scope_id=target_id,
            )
        else:
            event = SocialEvent(
                kind="comment",
                subject_kind=target_kind,
                subject_id=target_id,
                subject_owner_id=target_owner_id,
                actor_id=actor_id,
                comment_id=result.id,
                scope_kind=target_kind,
                scope_id=target_id,
            )
        self._notifications.fan_out(event)

        return result

    @validate_call
    def delete(self, comment_id: CommentId, actor_id: UserId) -> DeleteOutcome:
        """
        Removes a comment with no replies, or tombstones one that has replies.
        """
        with store_errors():
            comment = self._comments.get_by_id(comment_id)
            if comment is None:
                raise NotFound(f"Comment {comment_id} not found")
            if comment.user_id != actor_id:
                raise Unauthorized("Only the author can delete this comment")

            outcome = plan_delete(self._comments.count_replies(comment_id))
            if outcome is DeleteOutcome.REMOVED and self._comments.delete_owned_if_childless(
                comment_id, actor_id
            ):
                logger.info("comment_removed", extra={"comment_id": comment_id})
                return DeleteOutcome.REMOVED

            # Either replies existed, or one arrived between the count and the DELETE.
            if not self._comments.tombstone_owned(comment_id, actor_id):
                raise NotFound(f"Comment {comment_id} not found")

        logger.info("comment_tombstoned", extra={"comment_id": comment_id})
        return DeleteOutcome.TOMBSTONED

    @validate_call
    def list_replies(
        self, comment_id: CommentId, viewer_id: UserId | None = None
    ) -> list[CommentRead]:
        with store_errors():
            replies = self._comments.list_replies([comment_id])
            like_counts, liked = self._annotate(replies, viewer_id)
            return [self._to_schema(reply, like_counts, liked) for reply in replies]

    @validate_call
    def list_top_level(
        self,
        target_id: str,
        target_kind: CommentTargetKind,
        viewer_id: UserId | None = None,
        page: PageNumber = 1,
        size: PageSize = 10,
    ) -> Page[CommentRead]:
        """
        Returns one page of a thread's top-level comments, oldest first, each with all
        of its replies.
        """
        with store_errors():
            self._target_owner(target_kind, target_id)
            items, total = self._comments.list_top_level(
                target_kind, target_id, limit=size, offset=page_offset(page, size)
            )
            replies = self._comments.list_replies([item.id for item in items])
            like_counts, liked = self._annotate([*items, *replies], viewer_id)

            replies_by_parent: dict[str, list[CommentRead]] = {}
            for reply in replies:
                position = position_of(reply.parent_comment_id)
                if isinstance(position, Reply):
                    replies_by_parent.setdefault(position.parent_id, []).append(
                        self._to_schema(reply, like_counts, liked)
                    )

            return Page[CommentRead](
                items=[
                    self._to_schema(item, like_counts, liked, replies_by_parent.get(item.id))
                    for item in items
                ],
                total=total,
                page=page,
                page_size=size,
                total_pages=total_pages(total, size),
            )
