from sqlalchemy.orm import Session

from shelf_social_api.domain import TOMBSTONE_TEXT
from shelf_social_api.models import Comment
from shelf_social_api.repositories.comments_repository import CommentsRepository


def test_delete_if_childless_refuses_when_reply_exists(db_session: Session, social_graph) -> None:
    social_graph.create_comment("comment-1", user_id="bob", review_id="review-1")
    social_graph.create_comment(
        "comment-2", user_id="carol", review_id="review-1", parent_comment_id="comment-1"
    )
    social_graph.commit()
    repo = CommentsRepository(db_session)

    assert repo.delete_owned_if_childless("comment-1", "bob") is False
    assert social_graph.count(Comment) == 2


def test_delete_if_childless_checks_owner(db_session: Session, social_graph) -> None:
    social_graph.create_comment("comment-1", user_id="bob", review_id="review-1")
    social_graph.commit()
    repo = CommentsRepository(db_session)

    assert repo.delete_owned_if_childless("comment-1", "carol") is False
    assert repo.delete_owned_if_childless("comment-1", "bob") is True
    assert social_graph.count(Comment) == 0


def test_tombstone_owned(db_session: Session, social_graph) -> None:
    social_graph.create_comment("comment-1", user_id="bob", review_id="review-1", text="Hot take")
    social_graph.commit()
    repo = CommentsRepository(db_session)

    assert repo.tombstone_owned("comment-1", "carol") is False
    assert repo.tombstone_owned("comment-1", "bob") is True

    comment = repo.get_by_id("comment-1")
    assert comment is not None
    assert comment.text == TOMBSTONE_TEXT
    assert comment.state == "tombstoned"
    assert comment.user_id == "bob"


def test_list_top_level_excludes_replies_and_other_threads(
    db_session: Session, social_graph
) -> None:
    social_graph.create_comment("comment-1", user_id="bob", review_id="review-1")
    social_graph.create_comment(
        "comment-2", user_id="carol", review_id="review-1", parent_comment_id="comment-1"
    )
    social_graph.create_comment("comment-3", user_id="carol", list_id="list-1")
    social_graph.commit()
    repo = CommentsRepository(db_session)

    items, total = repo.list_top_level("review", "review-1", limit=10, offset=0)

    assert [c.id for c in items] == ["comment-1"]
    assert total == 1
    assert repo.count_replies("comment-1") == 1
    assert [c.id for c in repo.list_replies(["comment-1"])] == ["comment-2"]
    assert repo.list_replies([]) == []
