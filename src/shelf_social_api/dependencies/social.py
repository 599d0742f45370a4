from typing import Annotated

from fastapi import Depends

from shelf_social_api.dependencies.notifications import get_notification_service
from shelf_social_api.dependencies.reviews import (
    get_catalog_repository,
    get_comments_repository,
    get_interactions_repository,
    get_likes_repository,
    get_reviews_repository,
)
from shelf_social_api.repositories.catalog_repository import CatalogRepository
from shelf_social_api.repositories.comments_repository import CommentsRepository
from shelf_social_api.repositories.interactions_repository import InteractionsRepository
from shelf_social_api.repositories.likes_repository import LikesRepository
from shelf_social_api.repositories.reviews_repository import ReviewsRepository
from shelf_social_api.services.comment_service import CommentService
from shelf_social_api.services.interaction_service import InteractionService
from shelf_social_api.services.like_service import LikeService
from shelf_social_api.services.notification_service import NotificationService


def get_comment_service(
    comments: Annotated[CommentsRepository, Depends(get_comments_repository)],
    likes: Annotated[LikesRepository, Depends(get_likes_repository)],
    reviews: Annotated[ReviewsRepository, Depends(get_reviews_repository)],
    catalog: Annotated[CatalogRepository, Depends(get_catalog_repository)],
    notifications: Annotated[NotificationService, Depends(get_notification_service)],
) -> CommentService:
    return CommentService(
        comments=comments,
        likes=likes,
        reviews=reviews,
        catalog=catalog,
        notifications=notifications,
    )


def get_like_service(
    likes: Annotated[LikesRepository, Depends(get_likes_repository)],
    reviews: Annotated[ReviewsRepository, Depends(get_reviews_repository)],
    comments: Annotated[CommentsRepository, Depends(get_comments_repository)],
    catalog: Annotated[CatalogRepository, Depends(get_catalog_repository)],
    notifications: Annotated[NotificationService, Depends(get_notification_service)],
) -> LikeService:
    """Dependency to provide the LikeService instance."""
    return LikeService(
        likes=likes,
        reviews=reviews,
        comments=comments,
        catalog=catalog,
        notifications=notifications,
    )


def get_interaction_service(
    repo: Annotated[InteractionsRepository, Depends(get_interactions_repository)],
    catalog: Annotated[CatalogRepository, Depends(get_catalog_repository)],
) -> InteractionService:
    return InteractionService(repo=repo, catalog=catalog)
