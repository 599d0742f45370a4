from datetime import datetime

from pydantic import BaseModel, Field

from shelf_social_api.threads import CommentState, DeleteOutcome


class CommentCreateRequest(BaseModel):
    text: str = Field(
        min_length=1,
        max_length=2000,
        description="Comment body",
        examples=["Completely agree about the ending."],
    )
    parent_comment_id: str | None = Field(
        default=None, description="Comment being replied to, if this is a reply"
    )


class CommentRead(BaseModel):
    id: str = Field(description="Unique ID of the comment")
    user_id: str = Field(description="Author of the comment")
    review_id: str | None = Field(default=None, description="Review the thread belongs to")
    list_id: str | None = Field(default=None, description="List the thread belongs to")
    parent_comment_id: str | None = Field(
        default=None, description="Top-level comment this reply belongs to"
    )
    text: str = Field(description="Comment body, or the deleted marker once tombstoned")
    state: CommentState = Field(description="Lifecycle state of the comment")
    created_at: datetime
    like_count: int = Field(default=0, description="Number of likes on the comment")
    liked_by_viewer: bool = Field(
        default=False, description="Whether the requesting user has liked the comment"
    )
    replies: list["CommentRead"] = Field(
        default_factory=list, description="Replies, oldest first (top-level comments only)"
    )


class CommentDeleteResponse(BaseModel):
    comment_id: str
    outcome: DeleteOutcome = Field(
        description="'removed' when the row was deleted, 'tombstoned' when replies kept it"
    )
