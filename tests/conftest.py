import uuid
from collections.abc import Iterator
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import Engine, create_engine, func, select
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from shelf_social_api.database import Base
from shelf_social_api.dependencies.database import get_db_session
from shelf_social_api.main import app
from shelf_social_api.models import (
    Book,
    Comment,
    Like,
    ListCollection,
    Notification,
    Review,
    User,
    UserBookInteraction,
)
from shelf_social_api.repositories.catalog_repository import CatalogRepository
from shelf_social_api.repositories.comments_repository import CommentsRepository
from shelf_social_api.repositories.interactions_repository import InteractionsRepository
from shelf_social_api.repositories.likes_repository import LikesRepository
from shelf_social_api.repositories.notifications_repository import NotificationsRepository
from shelf_social_api.repositories.reviews_repository import ReviewsRepository
from shelf_social_api.services.comment_service import CommentService
from shelf_social_api.services.interaction_service import InteractionService
from shelf_social_api.services.like_service import LikeService
from shelf_social_api.services.notification_service import NotificationService
from shelf_social_api.services.review_service import ReviewService


@pytest.fixture(autouse=True)
def clear_dependency_overrides() -> Iterator[None]:
    app.dependency_overrides.clear()
    yield
    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def db_engine() -> Engine:
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def db_session(db_engine: Engine) -> Iterator[Session]:
    connection = db_engine.connect()
    transaction = connection.begin()
    session_factory = sessionmaker(bind=connection)
    session = session_factory()
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture
def notification_service(db_session: Session) -> NotificationService:
    return NotificationService(repo=NotificationsRepository(db_session))


@pytest.fixture
def review_service(db_session: Session) -> ReviewService:
    return ReviewService(
        reviews=ReviewsRepository(db_session),
        likes=LikesRepository(db_session),
        interactions=InteractionsRepository(db_session),
        catalog=CatalogRepository(db_session),
    )


@pytest.fixture
def comment_service(
    db_session: Session, notification_service: NotificationService
) -> CommentService:
    return CommentService(
        comments=CommentsRepository(db_session),
        likes=LikesRepository(db_session),
        reviews=ReviewsRepository(db_session),
        catalog=CatalogRepository(db_session),
        notifications=notification_service,
    )


@pytest.fixture
def like_service(db_session: Session, notification_service: NotificationService) -> LikeService:
    return LikeService(
        likes=LikesRepository(db_session),
        reviews=ReviewsRepository(db_session),
        comments=CommentsRepository(db_session),
        catalog=CatalogRepository(db_session),
        notifications=notification_service,
    )


@pytest.fixture
def interaction_service(db_session: Session) -> InteractionService:
    return InteractionService(
        repo=InteractionsRepository(db_session), catalog=CatalogRepository(db_session)
    )


@pytest.fixture
def client(db_session: Session) -> Iterator[TestClient]:
    def override_get_db_session() -> Iterator[Session]:
        yield db_session

    app.dependency_overrides[get_db_session] = override_get_db_session

    with TestClient(app) as test_client:
        yield test_client


class DataFactory:
    def __init__(self, session: Session):
        self.session = session
        self._clock = datetime(2024, 1, 1, tzinfo=UTC)

    def _tick(self) -> datetime:
        self._clock += timedelta(minutes=1)
        return self._clock

    def _add(self, obj: object) -> None:
        # No relationship() on the models, so rows are flushed in FK order as they are created.
        self.session.add(obj)
        self.session.flush()

    def create_user(self, id: str, username: str | None = None) -> User:
        u = User(id=id, username=username or id, created_at=self._tick())
        self._add(u)
        return u

    def create_book(self, id: str, title: str = "Test Book", **kwargs) -> Book:
        b = Book(id=id, title=title, **kwargs)
        self._add(b)
        return b

    def create_list(self, id: str, user_id: str, name: str = "Favourites") -> ListCollection:
        lc = ListCollection(id=id, user_id=user_id, name=name, created_at=self._tick())
        self._add(lc)
        return lc

    def create_review(
        self, id: str, user_id: str, book_id: str, rating: int | None = 4, **kwargs
    ) -> Review:
        kwargs.setdefault("created_at", self._tick())
        kwargs.setdefault("updated_at", kwargs["created_at"])
        r = Review(id=id, user_id=user_id, book_id=book_id, rating=rating, **kwargs)
        self._add(r)
        return r

    def create_comment(
        self,
        id: str,
        user_id: str,
        review_id: str | None = None,
        list_id: str | None = None,
        parent_comment_id: str | None = None,
        text: str = "Nice",
        **kwargs,
    ) -> Comment:
        kwargs.setdefault("created_at", self._tick())
        c = Comment(
            id=id,
            user_id=user_id,
            review_id=review_id,
            list_id=list_id,
            parent_comment_id=parent_comment_id,
            text=text,
            **kwargs,
        )
        self._add(c)
        return c

    def create_like(self, user_id: str, **target: str) -> Like:
        like = Like(id=str(uuid.uuid4()), user_id=user_id, created_at=self._tick(), **target)
        self._add(like)
        return like

    def create_interaction(self, user_id: str, book_id: str, **flags) -> UserBookInteraction:
        i = UserBookInteraction(user_id=user_id, book_id=book_id, **flags)
        self._add(i)
        return i

    def create_notification(self, id: str, user_id: str, actor_id: str, **kwargs) -> Notification:
        kwargs.setdefault("type", "like_review")
        kwargs.setdefault("entity_type", "review")
        kwargs.setdefault("entity_id", "review-x")
        kwargs.setdefault("created_at", self._tick())
        n = Notification(id=id, user_id=user_id, actor_id=actor_id, **kwargs)
        self._add(n)
        return n

    def count(self, model: type, *criteria) -> int:
        stmt = select(func.count()).select_from(model)
        for criterion in criteria:
            stmt = stmt.where(criterion)
        return self.session.execute(stmt).scalar_one()

    def get_notifications(self, user_id: str | None = None) -> list[Notification]:
        stmt = select(Notification).order_by(Notification.created_at)
        if user_id is not None:
            stmt = stmt.where(Notification.user_id == user_id)
        return list(self.session.execute(stmt).scalars().all())

    def commit(self):
        self.session.commit()


@pytest.fixture
def test_data(db_session: Session) -> DataFactory:
    return DataFactory(db_session)


@pytest.fixture
def social_graph(test_data: DataFactory) -> DataFactory:
    """
    Three users, one book, alice's review of it and bob's public list.
    """
    test_data.create_user("alice")
    test_data.create_user("bob")
    test_data.create_user("carol")
    test_data.create_book("book-1", title="Dune")
    test_data.create_review("review-1", user_id="alice", book_id="book-1", rating=4)
    test_data.create_list("list-1", user_id="bob", name="Desert Classics")
    test_data.commit()
    return test_data
