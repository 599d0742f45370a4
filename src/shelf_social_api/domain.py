import typing
from typing import Annotated, Literal

from pydantic import Field

if typing.TYPE_CHECKING:
    UserId = typing.NewType("UserId", str)
    BookId = typing.NewType("BookId", str)
    ReviewId = typing.NewType("ReviewId", str)
    CommentId = typing.NewType("CommentId", str)
    ListId = typing.NewType("ListId", str)
    NotificationId = typing.NewType("NotificationId", str)
    Rating = typing.NewType("Rating", int)
else:
    _IdStr = Annotated[str, Field(min_length=1, max_length=36)]
    UserId = typing.NewType("UserId", _IdStr)
    BookId = typing.NewType("BookId", _IdStr)
    ReviewId = typing.NewType("ReviewId", _IdStr)
    CommentId = typing.NewType("CommentId", _IdStr)
    ListId = typing.NewType("ListId", _IdStr)
    NotificationId = typing.NewType("NotificationId", _IdStr)

    _RatingInt = Annotated[int, Field(ge=1, le=5)]
    Rating = typing.NewType("Rating", _RatingInt)

# What a comment hangs off.
CommentTargetKind = Literal["review", "list"]
# What a like points at.
LikeTargetKind = Literal["review", "comment", "list"]

NotificationType = Literal[
    "like_review",
    "comment_review",
    "reply_comment",
    "like_list",
    "comment_list",
]
NotificationEntityType = Literal["review", "comment", "list"]

TOMBSTONE_TEXT = "[deleted]"

PageNumber = Annotated[int, Field(ge=1)]
PageSize = Annotated[int, Field(ge=1)]
