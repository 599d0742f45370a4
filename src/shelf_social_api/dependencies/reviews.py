from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from shelf_social_api.dependencies.database import get_db_session
from shelf_social_api.repositories.catalog_repository import CatalogRepository
from shelf_social_api.repositories.comments_repository import CommentsRepository
from shelf_social_api.repositories.interactions_repository import InteractionsRepository
from shelf_social_api.repositories.likes_repository import LikesRepository
from shelf_social_api.repositories.reviews_repository import ReviewsRepository
from shelf_social_api.services.review_service import ReviewService


def get_reviews_repository(
    session: Annotated[Session, Depends(get_db_session)],
) -> ReviewsRepository:
    return ReviewsRepository(session=session)


def get_comments_repository(
    session: Annotated[Session, Depends(get_db_session)],
) -> CommentsRepository:
    return CommentsRepository(session=session)


def get_likes_repository(session: Annotated[Session, Depends(get_db_session)]) -> LikesRepository:
    return LikesRepository(session=session)


def get_interactions_repository(
    session: Annotated[Session, Depends(get_db_session)],
) -> InteractionsRepository:
    return InteractionsRepository(session=session)


def get_catalog_repository(
    session: Annotated[Session, Depends(get_db_session)],
) -> CatalogRepository:
    return CatalogRepository(session=session)


def get_review_service(
    reviews: Annotated[ReviewsRepository, Depends(get_reviews_repository)],
    likes: Annotated[LikesRepository, Depends(get_likes_repository)],
    interactions: Annotated[InteractionsRepository, Depends(get_interactions_repository)],
    catalog: Annotated[CatalogRepository, Depends(get_catalog_repository)],
) -> ReviewService:
    return ReviewService(reviews=reviews, likes=likes, interactions=interactions, catalog=catalog)
