import argparse

from shelf_social_api.database import Base, SessionLocal, engine
from shelf_social_api.domain import UserId
from shelf_social_api.models import Book, ListCollection
from shelf_social_api.repositories.users_repository import UsersRepository

DEMO_USERS = [("usr-alice", "alice"), ("usr-bob", "bob"), ("usr-carol", "carol")]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create the social tables.")
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Also insert a few users, a book and a list to click around with.",
    )
    return parser.parse_args()


def seed_demo_data() -> int:
    created = 0
    with SessionLocal() as session:
        users = UsersRepository(session)
        for user_id, username in DEMO_USERS:
            if users.get_by_username(username) is None:
                users.create(UserId(user_id), username)
                created += 1

        session.merge(Book(id="book-dune", title="Dune", authors=["Frank Herbert"]))
        session.merge(ListCollection(id="list-desert", user_id="usr-bob", name="Desert Classics"))
        session.commit()
    return created


def main() -> None:
    args = parse_args()
    Base.metadata.create_all(engine)
    print(f"Schema ready on {engine.url.render_as_string(hide_password=True)}")

    if args.demo:
        created = seed_demo_data()
        print(f"Demo data loaded. new_users={created}")


if __name__ == "__main__":
    main()
