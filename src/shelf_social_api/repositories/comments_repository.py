import uuid
from collections.abc import Sequence
from datetime import UTC, datetime

from sqlalchemy import delete, exists, func, select, update
from sqlalchemy.orm import InstrumentedAttribute, Session, aliased

from shelf_social_api.domain import CommentId, CommentTargetKind, UserId
from shelf_social_api.models import Comment
from shelf_social_api.threads import CommentState, tombstone_fields


def _target_column(target_kind: CommentTargetKind) -> InstrumentedAttribute[str | None]:
    if target_kind == "review":
        return Comment.review_id
    return Comment.list_id


class CommentsRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, comment_id: CommentId) -> Comment | None:
        return self.session.get(Comment, comment_id)

    def create(
        self,
        user_id: UserId,
        target_kind: CommentTargetKind,
        target_id: str,
        text: str,
        parent_comment_id: str | None,
    ) -> Comment:
        comment = Comment(
            id=str(uuid.uuid4()),
            user_id=user_id,
            review_id=target_id if target_kind == "review" else None,
            list_id=target_id if target_kind == "list" else None,
            parent_comment_id=parent_comment_id,
            text=text,
            state=CommentState.ACTIVE.value,
        )
        self.session.add(comment)
        self.session.commit()
        self.session.refresh(comment)

        return comment

    def count_replies(self, comment_id: CommentId) -> int:
        stmt = select(func.count()).select_from(Comment).where(
            Comment.parent_comment_id == comment_id
        )
        return self.session.execute(stmt).scalar_one()

    def delete_owned_if_childless(self, comment_id: CommentId, owner_id: UserId) -> bool:
        """
        Hard-deletes the comment unless it has replies at the moment of the DELETE.

        The reply check lives in the statement itself; a reply inserted after the
        caller counted replies makes this a no-op instead of cascading the reply away.
        """
        reply = aliased(Comment)
        has_replies = exists().where(reply.parent_comment_id == Comment.id)
        stmt = (
            delete(Comment)
            .where(Comment.id == comment_id)
            .where(Comment.user_id == owner_id)
            .where(~has_replies)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        self.session.commit()
        return result.rowcount > 0

    def tombstone_owned(self, comment_id: CommentId, owner_id: UserId) -> bool:
        stmt = (
            update(Comment)
            .where(Comment.id == comment_id)
            .where(Comment.user_id == owner_id)
            .values(**tombstone_fields(), updated_at=datetime.now(UTC))
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        self.session.commit()
        return result.rowcount > 0

    def list_top_level(
        self, target_kind: CommentTargetKind, target_id: str, limit: int, offset: int
    ) -> tuple[Sequence[Comment], int]:
        """
        Returns a tuple of (items, total_count), oldest comment first.
        """
        target_col = _target_column(target_kind)
        count_stmt = (
            select(func.count())
            .select_from(Comment)
            .where(target_col == target_id)
            .where(Comment.parent_comment_id.is_(None))
        )
        stmt = (
            select(Comment)
            .where(target_col == target_id)
            .where(Comment.parent_comment_id.is_(None))
            .order_by(Comment.created_at.asc(), Comment.id.asc())
            .limit(limit)
            .offset(offset)
        )

        total = self.session.execute(count_stmt).scalar_one()
        items = self.session.scalars(stmt).all()

        return items, total

    def list_replies(self, parent_ids: Sequence[str]) -> Sequence[Comment]:
        """
        Returns replies to any of ``parent_ids``, oldest first.
        """
        if not parent_ids:
            return []
        stmt = (
            select(Comment)
            .where(Comment.parent_comment_id.in_(parent_ids))
            .order_by(Comment.created_at.asc(), Comment.id.asc())
        )
        return self.session.scalars(stmt).all()

    def rollback(self) -> None:
        self.session.rollback()
