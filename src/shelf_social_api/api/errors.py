import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from shelf_social_api.errors import (
    Conflict,
    Internal,
    NotFound,
    SocialError,
    Transient,
    Unauthenticated,
    Unauthorized,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[SocialError], int] = {
    Unauthenticated: status.HTTP_401_UNAUTHORIZED,
    Unauthorized: status.HTTP_403_FORBIDDEN,
    NotFound: status.HTTP_404_NOT_FOUND,
    Conflict: status.HTTP_409_CONFLICT,
    Transient: status.HTTP_503_SERVICE_UNAVAILABLE,
    Internal: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_for(exc: SocialError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def social_error_handler(request: Request, exc: SocialError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.warning(
            "request_failed",
            extra={"error": exc.code, "path": request.url.path, "retryable": exc.retryable},
        )

    headers = {"WWW-Authenticate": "X-User-Id"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.detail, "error": exc.code, "retryable": exc.retryable},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SocialError, social_error_handler)  # type: ignore[arg-type]
