from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import (
    DisconnectionError,
    IntegrityError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError


class SocialError(Exception):
    """Base class for failures reported to callers of the social layer."""

    code = "internal"
    retryable = False
    default_detail = "Internal error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthenticated(SocialError):
    code = "unauthenticated"
    default_detail = "Authentication required"


class Unauthorized(SocialError):
    code = "unauthorized"
    default_detail = "You do not have permission to change this content"


class NotFound(SocialError):
    code = "not_found"
    default_detail = "Content no longer available"


class Conflict(SocialError):
    code = "conflict"
    default_detail = "Content already exists"


class Transient(SocialError):
    code = "transient"
    retryable = True
    default_detail = "Temporary failure, please retry"


class Internal(SocialError):
    code = "internal"
    default_detail = "Unexpected error, please retry later"


@contextmanager
def store_errors() -> Iterator[None]:
    """
    Translates SQLAlchemy failures raised inside the block into the social error taxonomy.
    """
    try:
        yield
    except (OperationalError, DisconnectionError, PoolTimeoutError) as exc:
        raise Transient() from exc
    except IntegrityError as exc:
        raise Conflict() from exc
    except SQLAlchemyError as exc:
        raise Internal() from exc


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    """
    True when the row referenced a parent that no longer exists.

    PostgreSQL reports SQLSTATE 23503; SQLite only names the constraint in the message.
    """
    if getattr(exc.orig, "sqlstate", None) == "23503":
        return True
    return "FOREIGN KEY constraint failed" in str(exc.orig)
