import uuid
from collections.abc import Sequence
from datetime import UTC, datetime

from sqlalchemy import delete, func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from shelf_social_api.database import dialect_insert
from shelf_social_api.domain import LikeTargetKind, UserId
from shelf_social_api.models import Like

_TARGET_COLUMNS: dict[str, str] = {
    "review": "review_id",
    "comment": "comment_id",
    "list": "list_id",
}


def _target_column(target_kind: LikeTargetKind) -> InstrumentedAttribute[str | None]:
    return getattr(Like, _TARGET_COLUMNS[target_kind])


class LikesRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def insert_if_absent(
        self, user_id: UserId, target_kind: LikeTargetKind, target_id: str
    ) -> bool:
        """
        Inserts a like unless (user, target) already has one.

        Uses ON CONFLICT DO NOTHING against the per-target partial unique index, so
        concurrent calls for the same pair settle on a single row. Returns True when
        this call inserted the row.
        """
        column_name = _TARGET_COLUMNS[target_kind]
        target_col = _target_column(target_kind)
        stmt = (
            dialect_insert(self.session, Like)
            .values(
                id=str(uuid.uuid4()),
                user_id=user_id,
                created_at=datetime.now(UTC),
                **{column_name: target_id},
            )
            .on_conflict_do_nothing(
                index_elements=["user_id", column_name],
                index_where=target_col.is_not(None),
            )
        )

        result = self.session.execute(stmt)
        self.session.commit()

        return max(getattr(result, "rowcount", 0), 0) > 0

    def delete(self, user_id: UserId, target_kind: LikeTargetKind, target_id: str) -> bool:
        target_col = _target_column(target_kind)
        stmt = (
            delete(Like)
            .where(Like.user_id == user_id)
            .where(target_col == target_id)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        self.session.commit()
        return result.rowcount > 0

    def exists(self, user_id: UserId, target_kind: LikeTargetKind, target_id: str) -> bool:
        target_col = _target_column(target_kind)
        stmt = select(Like.id).where(Like.user_id == user_id).where(target_col == target_id)
        return self.session.execute(stmt).first() is not None

    def count_by_target(
        self, target_kind: LikeTargetKind, target_ids: Sequence[str]
    ) -> dict[str, int]:
        if not target_ids:
            return {}
        target_col = _target_column(target_kind)
        stmt = (
            select(target_col, func.count())
            .where(target_col.in_(target_ids))
            .group_by(target_col)
        )
        return {target_id: count for target_id, count in self.session.execute(stmt).all()}

    def liked_by(
        self, user_id: UserId | None, target_kind: LikeTargetKind, target_ids: Sequence[str]
    ) -> set[str]:
        """
        Returns the subset of ``target_ids`` that ``user_id`` has liked.
        """
        if user_id is None or not target_ids:
            return set()
        target_col = _target_column(target_kind)
        stmt = select(target_col).where(Like.user_id == user_id).where(target_col.in_(target_ids))
        return {target_id for target_id in self.session.scalars(stmt).all() if target_id}

    def rollback(self) -> None:
        self.session.rollback()
