"""
Fan-out rules: which social events produce a notification, for whom, and of what type.

This module is pure. Persisting the result and resolving display context is the job
of ``NotificationService``.
"""

from dataclasses import dataclass
from typing import Literal

from shelf_social_api.domain import (
    NotificationEntityType,
    NotificationType,
)

TriggerKind = Literal["like", "comment", "reply"]
SubjectKind = Literal["review", "comment", "list"]


@dataclass(frozen=True)
class SocialEvent:
    kind: TriggerKind
    # What was liked, or what a comment was posted on / replied to.
    subject_kind: SubjectKind
    subject_id: str
    subject_owner_id: str
    actor_id: str
    # The comment created by a comment/reply trigger.
    comment_id: str | None = None
    # Review or list the subject belongs to, for display context.
    scope_kind: Literal["review", "list"] | None = None
    scope_id: str | None = None


@dataclass(frozen=True)
class NotificationDraft:
    user_id: str
    actor_id: str
    type: NotificationType
    entity_type: NotificationEntityType
    entity_id: str
    entity_parent_id: str | None
    scope_kind: Literal["review", "list"] | None
    scope_id: str | None


_RULES: dict[tuple[TriggerKind, SubjectKind], NotificationType] = {
    ("like", "review"): "like_review",
    ("like", "comment"): "like_review",
    ("like", "list"): "like_list",
    ("comment", "review"): "comment_review",
    ("comment", "list"): "comment_list",
    ("reply", "comment"): "reply_comment",
}


def derive_notification(event: SocialEvent) -> NotificationDraft | None:
    """Returns the notification an event produces, or None when it is suppressed."""
    notification_type = _RULES.get((event.kind, event.subject_kind))
    if notification_type is None:
        raise ValueError(f"No fan-out rule for {event.kind} on {event.subject_kind}")

    if event.actor_id == event.subject_owner_id:
        return None

    if event.kind == "like":
        entity_type: NotificationEntityType = event.subject_kind
        entity_id = event.subject_id
        # A liked review/list is its own context; a liked comment points at its scope.
        entity_parent_id = event.scope_id if event.subject_kind == "comment" else None
    else:
        if event.comment_id is None:
            raise ValueError("comment and reply events must carry the created comment id")
        entity_type = "comment"
        entity_id = event.comment_id
        entity_parent_id = event.scope_id

    return NotificationDraft(
        user_id=event.subject_owner_id,
        actor_id=event.actor_id,
        type=notification_type,
        entity_type=entity_type,
        entity_id=entity_id,
        entity_parent_id=entity_parent_id,
        scope_kind=event.scope_kind,
        scope_id=event.scope_id,
    )
