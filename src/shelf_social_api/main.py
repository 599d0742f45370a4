import logging

from fastapi import FastAPI

from shelf_social_api.api.errors import register_exception_handlers
from shelf_social_api.api.routes.comments import router as comments_router
from shelf_social_api.api.routes.interactions import router as interactions_router
from shelf_social_api.api.routes.lists import router as lists_router
from shelf_social_api.api.routes.notifications import router as notifications_router
from shelf_social_api.api.routes.reviews import router as reviews_router
from shelf_social_api.config import settings
from shelf_social_api.logging_config import configure_logging
from shelf_social_api.middleware import RequestContextMiddleware

configure_logging(
    level=settings.log_level,
    output_format=settings.log_format,
    service_name=settings.log_service_name,
)
logger = logging.getLogger(__name__)
logger.info("Application bootstrapped")

app = FastAPI(
    title=settings.app_name,
    description=settings.app_description,
    version=settings.app_version,
)
app.add_middleware(RequestContextMiddleware)
register_exception_handlers(app)

app.include_router(reviews_router)
app.include_router(comments_router)
app.include_router(lists_router)
app.include_router(notifications_router)
app.include_router(interactions_router)


@app.get("/health", tags=["health"])
def health_check() -> dict[str, str]:
    return {"status": "ok", "service": settings.log_service_name}
