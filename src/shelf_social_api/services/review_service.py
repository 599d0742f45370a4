import logging
from datetime import UTC, datetime

from pydantic import validate_call
from sqlalchemy.exc import SQLAlchemyError

from shelf_social_api.domain import BookId, PageNumber, PageSize, Rating, ReviewId, UserId
from shelf_social_api.errors import Conflict, NotFound, Unauthorized, store_errors
from shelf_social_api.models import Book, Review, User
from shelf_social_api.repositories.catalog_repository import CatalogRepository
from shelf_social_api.repositories.interactions_repository import InteractionsRepository
from shelf_social_api.repositories.likes_repository import LikesRepository
from shelf_social_api.repositories.reviews_repository import ReviewsRepository
from shelf_social_api.schemas.book import BookSummary
from shelf_social_api.schemas.common import Page, page_offset, total_pages
from shelf_social_api.schemas.review import ReviewRead
from shelf_social_api.schemas.user import UserSummary

logger = logging.getLogger(__name__)


class ReviewService:
    def __init__(
        self,
        reviews: ReviewsRepository,
        likes: LikesRepository,
        interactions: InteractionsRepository,
        catalog: CatalogRepository,
    ) -> None:
        self._reviews = reviews
        self._likes = likes
        self._interactions = interactions
        self._catalog = catalog

    def _map_to_schema(
        self,
        review: Review,
        user: User,
        book: Book,
        like_count: int = 0,
        comment_count: int = 0,
        liked_by_viewer: bool = False,
    ) -> ReviewRead:
        return ReviewRead(
            id=review.id,
            user_id=review.user_id,
            book_id=review.book_id,
            rating=review.rating,
            review_text=review.review_text,
            created_at=review.created_at,
            updated_at=review.updated_at,
            user=UserSummary.model_validate(user),
            book=BookSummary.model_validate(book),
            like_count=like_count,
            comment_count=comment_count,
            liked_by_viewer=liked_by_viewer,
        )

    def _load(self, review_id: ReviewId) -> ReviewRead:
        row = self._reviews.get_with_context(review_id)
        if row is None:
            raise NotFound(f"Review {review_id} not found")
        return self._map_to_schema(*row)

    def _ensure_owner(self, review_id: ReviewId, actor_id: UserId) -> Review:
        review = self._reviews.get_by_id(review_id)
        if review is None:
            raise NotFound(f"Review {review_id} not found")
        if review.user_id != actor_id:
            raise Unauthorized("Only the author can change this review")
        return review

    @validate_call
    def create(
        self, book_id: BookId, actor_id: UserId, rating: Rating, review_text: str | None = None
    ) -> ReviewRead:
        """
        Publishes the actor's review of a book and records the rating and read status
        on their interaction with it.
        """
        with store_errors():
            if self._catalog.get_book(book_id) is None:
                raise NotFound(f"Book {book_id} not found")

            review_id = self._reviews.create(
                user_id=actor_id,
                book_id=book_id,
                rating=rating,
                review_text=review_text,
                read_on=datetime.now(UTC).date(),
            )
            if review_id is None:
                raise Conflict("You have already reviewed this book")

            logger.info(
                "review_created",
                extra={"review_id": review_id, "book_id": book_id, "rating": rating},
            )
            return self._load(review_id)

    @validate_call
    def update(
        self,
        review_id: ReviewId,
        actor_id: UserId,
        rating: Rating | None = None,
        review_text: str | None = None,
    ) -> ReviewRead:
        with store_errors():
            if not self._reviews.update_owned(review_id, actor_id, rating, review_text):
                # Zero rows matched: tell a missing review apart from someone else's.
                self._ensure_owner(review_id, actor_id)
                raise NotFound(f"Review {review_id} not found")
            return self._load(review_id)

    @validate_call
    def delete(self, review_id: ReviewId, actor_id: UserId) -> None:
        """
        Deletes the actor's review, then clears the rating it carried on their
        interaction when nothing else about the book justifies keeping it.

        The interaction cleanup is best effort: once the review is gone the call
        succeeds, and a cleanup failure is only logged.
        """
        with store_errors():
            review = self._ensure_owner(review_id, actor_id)
            book_id = BookId(review.book_id)
            if not self._reviews.delete_owned(review_id, actor_id):
                raise NotFound(f"Review {review_id} not found")

        logger.info("review_deleted", extra={"review_id": review_id, "book_id": book_id})

        try:
            cleared = self._interactions.clear_rating_if_unretained(actor_id, book_id)
        except SQLAlchemyError:
            self._interactions.rollback()
            logger.exception(
                "interaction_rating_cleanup_failed",
                extra={"review_id": review_id, "user_id": actor_id, "book_id": book_id},
            )
            return

        if cleared:
            logger.info(
                "interaction_rating_cleared", extra={"user_id": actor_id, "book_id": book_id}
            )

    @validate_call
    def get(self, review_id: ReviewId, viewer_id: UserId | None = None) -> ReviewRead:
        with store_errors():
            row = self._reviews.get_with_context(review_id)
            if row is None:
                raise NotFound(f"Review {review_id} not found")

            review, user, book = row
            return self._map_to_schema(
                review,
                user,
                book,
                like_count=self._likes.count_by_target("review", [review.id]).get(review.id, 0),
                comment_count=self._reviews.count_comments([review.id]).get(review.id, 0),
                liked_by_viewer=(
                    viewer_id is not None and self._likes.exists(viewer_id, "review", review.id)
                ),
            )

    @validate_call
    def list_for_book(
        self,
        book_id: BookId,
        viewer_id: UserId | None = None,
        page: PageNumber = 1,
        size: PageSize = 10,
    ) -> Page[ReviewRead]:
        with store_errors():
            if self._catalog.get_book(book_id) is None:
                raise NotFound(f"Book {book_id} not found")

            rows, total = self._reviews.list_for_book(
                book_id, limit=size, offset=page_offset(page, size)
            )
            review_ids = [review.id for review, _, _ in rows]
            like_counts = self._likes.count_by_target("review", review_ids)
            comment_counts = self._reviews.count_comments(review_ids)
            liked = self._likes.liked_by(viewer_id, "review", review_ids)

            return Page[ReviewRead](
                items=[
                    self._map_to_schema(
                        review,
                        user,
                        book,
                        like_count=like_counts.get(review.id, 0),
                        comment_count=comment_counts.get(review.id, 0),
                        liked_by_viewer=review.id in liked,
                    )
                    for review, user, book in rows
                ],
                total=total,
                page=page,
                page_size=size,
                total_pages=total_pages(total, size),
            )
