from pydantic import BaseModel, ConfigDict, Field

from shelf_social_api.domain import BookId


class BookSummary(BaseModel):
    id: BookId = Field(description="Unique ID of the book", examples=["book-1"])
    title: str = Field(description="Title of the book", examples=["Dune"])

    model_config = ConfigDict(from_attributes=True)
