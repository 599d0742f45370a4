"""
Comment thread shape and lifecycle.

Threads are two levels deep: top-level comments attached to a review or list, and
replies attached to exactly one top-level comment. A comment that still has replies
is never removed; deleting it tombstones it so the replies keep their parent.
"""

from dataclasses import dataclass
from enum import StrEnum

from shelf_social_api.domain import TOMBSTONE_TEXT


class CommentState(StrEnum):
    ACTIVE = "active"
    TOMBSTONED = "tombstoned"


class DeleteOutcome(StrEnum):
    REMOVED = "removed"
    TOMBSTONED = "tombstoned"


@dataclass(frozen=True)
class TopLevel:
    pass


@dataclass(frozen=True)
class Reply:
    parent_id: str


ThreadPosition = TopLevel | Reply


def position_of(parent_comment_id: str | None) -> ThreadPosition:
    if parent_comment_id is None:
        return TopLevel()
    return Reply(parent_id=parent_comment_id)


def reply_anchor(parent_id: str, parent_position: ThreadPosition) -> Reply:
    """
    Resolves where a reply to ``parent_id`` is stored.

    Replying to a reply attaches the new comment to the same top-level comment
    instead of nesting deeper.
    """
    match parent_position:
        case Reply(parent_id=top_level_id):
            return Reply(parent_id=top_level_id)
        case TopLevel():
            return Reply(parent_id=parent_id)


def plan_delete(reply_count: int) -> DeleteOutcome:
    if reply_count > 0:
        return DeleteOutcome.TOMBSTONED
    return DeleteOutcome.REMOVED


def tombstone_fields() -> dict[str, str]:
    return {"text": TOMBSTONE_TEXT, "state": CommentState.TOMBSTONED.value}
