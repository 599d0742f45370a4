import uuid
from collections.abc import Sequence
from datetime import UTC, date, datetime

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from shelf_social_api.database import dialect_insert
from shelf_social_api.domain import BookId, ReviewId, UserId
from shelf_social_api.models import Book, Comment, Review, User
from shelf_social_api.repositories.interactions_repository import interaction_upsert


class ReviewsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, review_id: ReviewId) -> Review | None:
        return self.session.get(Review, review_id)

    def get_with_context(self, review_id: ReviewId) -> tuple[Review, User, Book] | None:
        """
        Returns the review together with its author and book, or None if it is gone.
        """
        stmt = (
            select(Review, User, Book)
            .join(User, User.id == Review.user_id)
            .join(Book, Book.id == Review.book_id)
            .where(Review.id == review_id)
        )
        row = self.session.execute(stmt).first()
        if row is None:
            return None
        return row[0], row[1], row[2]

    def create(
        self,
        user_id: UserId,
        book_id: BookId,
        rating: int,
        review_text: str | None,
        read_on: date,
    ) -> ReviewId | None:
        """
        Inserts a review and syncs the author's interaction for the book in one commit.

        Returns None without touching the interaction when the author already
        reviewed the book.
        """
        review_id = ReviewId(str(uuid.uuid4()))
        now = datetime.now(UTC)
        stmt = (
            dialect_insert(self.session, Review)
            .values(
                id=review_id,
                user_id=user_id,
                book_id=book_id,
                rating=rating,
                review_text=review_text,
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_nothing(index_elements=["user_id", "book_id"])
        )
        result = self.session.execute(stmt)
        if max(result.rowcount, 0) == 0:
            return None

        self.session.execute(
            interaction_upsert(
                self.session,
                user_id,
                book_id,
                {"rating": rating, "is_read": True, "read_date": read_on},
            )
        )
        self.session.commit()
        return review_id

    def update_owned(
        self,
        review_id: ReviewId,
        owner_id: UserId,
        rating: int | None,
        review_text: str | None,
    ) -> bool:
        values: dict[str, object] = {"updated_at": datetime.now(UTC)}
        if rating is not None:
            values["rating"] = rating
        if review_text is not None:
            values["review_text"] = review_text

        stmt = (
            update(Review)
            .where(Review.id == review_id)
            .where(Review.user_id == owner_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        self.session.commit()
        return result.rowcount > 0

    def delete_owned(self, review_id: ReviewId, owner_id: UserId) -> bool:
        """
        Deletes the review if ``owner_id`` still owns it.

        Comments and likes go with it through ON DELETE CASCADE.
        """
        stmt = (
            delete(Review)
            .where(Review.id == review_id)
            .where(Review.user_id == owner_id)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        self.session.commit()
        return result.rowcount > 0

    def list_for_book(
        self, book_id: BookId, limit: int, offset: int
    ) -> tuple[Sequence[tuple[Review, User, Book]], int]:
        """
        Returns a tuple of (rows, total_count), newest review first.
        """
        count_stmt = select(func.count()).select_from(Review).where(Review.book_id == book_id)
        stmt = (
            select(Review, User, Book)
            .join(User, User.id == Review.user_id)
            .join(Book, Book.id == Review.book_id)
            .where(Review.book_id == book_id)
            .order_by(Review.created_at.desc(), Review.id)
            .limit(limit)
            .offset(offset)
        )

        total = self.session.execute(count_stmt).scalar_one()
        rows = [(row[0], row[1], row[2]) for row in self.session.execute(stmt).all()]
        return rows, total

    def count_comments(self, review_ids: Sequence[str]) -> dict[str, int]:
        if not review_ids:
            return {}
        stmt = (
            select(Comment.review_id, func.count())
            .where(Comment.review_id.in_(review_ids))
            .group_by(Comment.review_id)
        )
        return {review_id: count for review_id, count in self.session.execute(stmt).all()}
