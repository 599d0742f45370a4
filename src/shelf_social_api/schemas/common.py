import math
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    items: list[T]
    total: int = Field(description="Total number of items across all pages")
    page: int = Field(description="1-indexed page number")
    page_size: int = Field(description="Maximum number of items per page")
    total_pages: int = Field(description="Number of pages available")


def page_offset(page: int, page_size: int) -> int:
    return (page - 1) * page_size


def total_pages(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if page_size > 0 else 0
