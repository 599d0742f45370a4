from typing import Annotated

from fastapi import Depends
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from shelf_social_api.dependencies.database import get_db_session
from shelf_social_api.domain import UserId
from shelf_social_api.errors import Unauthenticated
from shelf_social_api.repositories.users_repository import UsersRepository

api_key_header = APIKeyHeader(name="X-User-Id", auto_error=False)


def get_users_repository(session: Annotated[Session, Depends(get_db_session)]) -> UsersRepository:
    return UsersRepository(session=session)


def get_optional_user_id(
    repo: Annotated[UsersRepository, Depends(get_users_repository)],
    api_key: Annotated[str | None, Depends(api_key_header)] = None,
) -> UserId | None:
    """
    Resolves the acting user from the X-User-Id header set by the auth gateway.

    Anonymous (no header) resolves to None. A header naming an unknown user is
    rejected rather than treated as anonymous.
    """
    if not api_key or not api_key.strip():
        return None
    user = repo.get_by_id(UserId(api_key.strip()))
    if user is None:
        raise Unauthenticated("Unknown user in X-User-Id header")
    return UserId(user.id)


def get_current_user_id(
    user_id: Annotated[UserId | None, Depends(get_optional_user_id)],
) -> UserId:
    if user_id is None:
        raise Unauthenticated("Missing or empty X-User-Id header")
    return user_id
