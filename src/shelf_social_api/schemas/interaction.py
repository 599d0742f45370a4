from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class InteractionRead(BaseModel):
    user_id: str
    book_id: str
    is_read: bool
    read_date: date | None = None
    is_currently_reading: bool
    is_on_watchlist: bool
    is_liked: bool
    is_owned: bool
    rating: int | None = Field(default=None, description="Personal star rating between 1 and 5")
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class InteractionUpdate(BaseModel):
    is_read: bool | None = Field(default=None, description="Mark the book as read")
    read_date: date | None = Field(default=None, description="Day the book was finished")
    is_currently_reading: bool | None = Field(default=None)
    is_on_watchlist: bool | None = Field(default=None)
    is_liked: bool | None = Field(default=None, description="Like the book itself")
    is_owned: bool | None = Field(default=None)
    rating: int | None = Field(default=None, ge=1, le=5)
