from unittest.mock import create_autospec

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shelf_social_api.domain import TOMBSTONE_TEXT
from shelf_social_api.errors import NotFound, Unauthorized
from shelf_social_api.models import Comment, Like
from shelf_social_api.repositories.catalog_repository import CatalogRepository
from shelf_social_api.repositories.comments_repository import CommentsRepository
from shelf_social_api.repositories.likes_repository import LikesRepository
from shelf_social_api.repositories.reviews_repository import ReviewsRepository
from shelf_social_api.services.comment_service import CommentService
from shelf_social_api.services.notification_service import NotificationService
from shelf_social_api.threads import CommentState, DeleteOutcome


def test_add_top_level_comment_notifies_review_owner(
    comment_service: CommentService, social_graph
) -> None:
    # When
    comment = comment_service.add_comment("review-1", "review", "bob", "Great take")

    # Then
    assert comment.review_id == "review-1"
    assert comment.parent_comment_id is None
    assert comment.state == CommentState.ACTIVE
    assert comment.like_count == 0
    assert comment.replies == []

    [notification] = social_graph.get_notifications("alice")
    assert notification.type == "comment_review"
    assert notification.entity_type == "comment"
    assert notification.entity_id == comment.id
    assert notification.entity_parent_id == "review-1"
    assert notification.entity_parent_title == "Dune"


def test_comment_on_list_notifies_list_owner(
    comment_service: CommentService, social_graph
) -> None:
    comment = comment_service.add_comment("list-1", "list", "carol", "Add Hyperion")

    assert comment.list_id == "list-1"
    [notification] = social_graph.get_notifications("bob")
    assert notification.type == "comment_list"
    assert notification.entity_parent_title == "Desert Classics"


def test_own_comment_produces_no_notification(
    comment_service: CommentService, social_graph
) -> None:
    comment_service.add_comment("review-1", "review", "alice", "Thanks all")

    assert social_graph.get_notifications() == []


def test_reply_notifies_only_the_replied_to_author(
    comment_service: CommentService, social_graph
) -> None:
    top = comment_service.add_comment("review-1", "review", "bob", "Great take")

    reply = comment_service.add_comment(
        "review-1", "review", "carol", "Agreed", parent_comment_id=top.id
    )

    assert reply.parent_comment_id == top.id
    [notification] = social_graph.get_notifications("bob")
    assert notification.type == "reply_comment"
    assert notification.entity_id == reply.id
    # alice only hears about bob's top-level comment
    assert [n.type for n in social_graph.get_notifications("alice")] == ["comment_review"]


def test_reply_to_reply_is_attached_to_top_level_comment(
    comment_service: CommentService, social_graph
) -> None:
    top = comment_service.add_comment("review-1", "review", "bob", "Great take")
    reply = comment_service.add_comment(
        "review-1", "review", "carol", "Agreed", parent_comment_id=top.id
    )

    nested = comment_service.add_comment(
        "review-1", "review", "alice", "Thank you both", parent_comment_id=reply.id
    )

    assert nested.parent_comment_id == top.id
    [notification] = [
        n for n in social_graph.get_notifications("carol") if n.type == "reply_comment"
    ]
    assert notification.entity_id == nested.id


def test_add_comment_to_missing_target_raises_not_found(
    comment_service: CommentService, social_graph
) -> None:
    with pytest.raises(NotFound):
        comment_service.add_comment("review-404", "review", "bob", "Hello?")
    with pytest.raises(NotFound):
        comment_service.add_comment("list-404", "list", "bob", "Hello?")


def test_reply_to_comment_on_another_thread_raises_not_found(
    comment_service: CommentService, social_graph
) -> None:
    other = comment_service.add_comment("list-1", "list", "carol", "On the list")

    with pytest.raises(NotFound):
        comment_service.add_comment(
            "review-1", "review", "bob", "Wrong thread", parent_comment_id=other.id
        )
    assert social_graph.count(Comment, Comment.review_id == "review-1") == 0


def test_delete_comment_without_replies_removes_it(
    comment_service: CommentService, social_graph
) -> None:
    social_graph.create_comment("comment-1", user_id="bob", review_id="review-1")
    social_graph.create_like("carol", comment_id="comment-1")
    social_graph.commit()

    outcome = comment_service.delete("comment-1", "bob")

    assert outcome is DeleteOutcome.REMOVED
    assert social_graph.count(Comment) == 0
    assert social_graph.count(Like) == 0


def test_delete_comment_with_replies_tombstones_it(
    comment_service: CommentService, social_graph
) -> None:
    social_graph.create_comment("comment-1", user_id="bob", review_id="review-1", text="Hot take")
    social_graph.create_comment(
        "comment-2", user_id="carol", review_id="review-1", parent_comment_id="comment-1"
    )
    social_graph.commit()

    outcome = comment_service.delete("comment-1", "bob")

    assert outcome is DeleteOutcome.TOMBSTONED
    page = comment_service.list_top_level("review-1", "review")
    [top] = page.items
    assert top.id == "comment-1"
    assert top.user_id == "bob"
    assert top.text == TOMBSTONE_TEXT
    assert top.state == CommentState.TOMBSTONED
    assert [reply.id for reply in top.replies] == ["comment-2"]


def test_delete_reply_leaves_tombstoned_parent_in_place(
    comment_service: CommentService, social_graph
) -> None:
    social_graph.create_comment("comment-1", user_id="bob", review_id="review-1")
    social_graph.create_comment(
        "comment-2", user_id="carol", review_id="review-1", parent_comment_id="comment-1"
    )
    social_graph.commit()
    comment_service.delete("comment-1", "bob")

    assert comment_service.delete("comment-2", "carol") is DeleteOutcome.REMOVED

    [top] = comment_service.list_top_level("review-1", "review").items
    assert top.state == CommentState.TOMBSTONED
    assert top.replies == []


def test_delete_by_non_author_raises_unauthorized(
    comment_service: CommentService, social_graph
) -> None:
    social_graph.create_comment("comment-1", user_id="bob", review_id="review-1")
    social_graph.commit()

    with pytest.raises(Unauthorized):
        comment_service.delete("comment-1", "alice")
    assert social_graph.count(Comment) == 1


def test_delete_missing_comment_raises_not_found(
    comment_service: CommentService, social_graph
) -> None:
    with pytest.raises(NotFound):
        comment_service.delete("comment-404", "bob")


def test_list_top_level_pages_oldest_first(
    comment_service: CommentService, social_graph
) -> None:
    # Given 15 top-level comments
    for i in range(1, 16):
        social_graph.create_comment(f"comment-{i:02d}", user_id="bob", review_id="review-1")
    social_graph.commit()

    # When
    page = comment_service.list_top_level("review-1", "review", page=2, size=10)

    # Then
    assert [item.id for item in page.items] == [f"comment-{i:02d}" for i in range(11, 16)]
    assert page.total == 15
    assert page.page == 2
    assert page.page_size == 10
    assert page.total_pages == 2


def test_list_top_level_annotates_likes_for_viewer(
    comment_service: CommentService, social_graph
) -> None:
    social_graph.create_comment("comment-1", user_id="bob", review_id="review-1")
    social_graph.create_comment(
        "comment-2", user_id="carol", review_id="review-1", parent_comment_id="comment-1"
    )
    social_graph.create_like("alice", comment_id="comment-1")
    social_graph.create_like("carol", comment_id="comment-1")
    social_graph.create_like("alice", comment_id="comment-2")
    social_graph.commit()

    [top] = comment_service.list_top_level("review-1", "review", viewer_id="carol").items

    assert top.like_count == 2
    assert top.liked_by_viewer is True
    [reply] = top.replies
    assert reply.like_count == 1
    assert reply.liked_by_viewer is False


def test_list_top_level_on_missing_target_raises_not_found(
    comment_service: CommentService, social_graph
) -> None:
    with pytest.raises(NotFound):
        comment_service.list_top_level("review-404", "review")


def test_list_replies_oldest_first(comment_service: CommentService, social_graph) -> None:
    social_graph.create_comment("comment-1", user_id="bob", review_id="review-1")
    social_graph.create_comment(
        "comment-2", user_id="carol", review_id="review-1", parent_comment_id="comment-1"
    )
    social_graph.create_comment(
        "comment-3", user_id="alice", review_id="review-1", parent_comment_id="comment-1"
    )
    social_graph.commit()

    replies = comment_service.list_replies("comment-1")

    assert [reply.id for reply in replies] == ["comment-2", "comment-3"]


def test_comment_on_target_deleted_before_insert_raises_not_found(
    db_session: Session, social_graph, notification_service: NotificationService
) -> None:
    # Given the review disappears after its owner was looked up
    comments_repo = create_autospec(CommentsRepository, instance=True)
    comments_repo.create.side_effect = IntegrityError(
        "INSERT INTO comments", {}, Exception("FOREIGN KEY constraint failed")
    )
    svc = CommentService(
        comments=comments_repo,
        likes=LikesRepository(db_session),
        reviews=ReviewsRepository(db_session),
        catalog=CatalogRepository(db_session),
        notifications=notification_service,
    )

    # When / Then
    with pytest.raises(NotFound):
        svc.add_comment("review-1", "review", "bob", "Great read")
    comments_repo.rollback.assert_called_once()
    assert social_graph.get_notifications() == []
