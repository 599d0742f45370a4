from sqlalchemy import select
from sqlalchemy.orm import Session

from shelf_social_api.domain import UserId
from shelf_social_api.models import User


class UsersRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_id(self, user_id: UserId) -> User | None:
        return self.session.get(User, user_id)

    def get_by_username(self, username: str) -> User | None:
        stmt = select(User).where(User.username == username)
        return self.session.scalars(stmt).first()

    def create(self, id: UserId, username: str) -> User:
        user = User(id=id, username=username)
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)

        return user
