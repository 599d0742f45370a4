from sqlalchemy.orm import Session

from shelf_social_api.domain import BookId, ListId
from shelf_social_api.models import Book, ListCollection


class CatalogRepository:
    """Read access to the books and lists that social content attaches to."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get_book(self, book_id: BookId) -> Book | None:
        return self.session.get(Book, book_id)

    def get_list(self, list_id: ListId) -> ListCollection | None:
        return self.session.get(ListCollection, list_id)
