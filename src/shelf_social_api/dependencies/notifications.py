from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from shelf_social_api.dependencies.database import get_db_session
from shelf_social_api.repositories.notifications_repository import NotificationsRepository
from shelf_social_api.services.notification_service import NotificationService


def get_notifications_repository(
    session: Annotated[Session, Depends(get_db_session)],
) -> NotificationsRepository:
    return NotificationsRepository(session=session)


def get_notification_service(
    repo: Annotated[NotificationsRepository, Depends(get_notifications_repository)],
) -> NotificationService:
    return NotificationService(repo=repo)
