from datetime import datetime

from pydantic import BaseModel, Field

from shelf_social_api.schemas.book import BookSummary
from shelf_social_api.schemas.user import UserSummary


class ReviewCreateRequest(BaseModel):
    rating: int = Field(description="Star rating between 1 and 5", ge=1, le=5, examples=[4])
    review_text: str | None = Field(
        default=None,
        max_length=10000,
        description="Optional free-form review body",
        examples=["A slow start, but the last act is superb."],
    )


class ReviewUpdateRequest(BaseModel):
    rating: int | None = Field(
        default=None, description="Star rating between 1 and 5", ge=1, le=5, examples=[5]
    )
    review_text: str | None = Field(
        default=None, max_length=10000, description="Replacement review body"
    )


class ReviewRead(BaseModel):
    id: str = Field(description="Unique ID of the review")
    user_id: str = Field(description="Author of the review")
    book_id: str = Field(description="Reviewed book")
    rating: int | None = Field(default=None, description="Star rating between 1 and 5")
    review_text: str | None = Field(default=None, description="Review body")
    created_at: datetime
    updated_at: datetime
    user: UserSummary | None = Field(default=None, description="Denormalized author")
    book: BookSummary | None = Field(default=None, description="Denormalized book")
    like_count: int = Field(default=0, description="Number of likes on the review")
    comment_count: int = Field(default=0, description="Number of comments on the review")
    liked_by_viewer: bool = Field(
        default=False, description="Whether the requesting user has liked the review"
    )
