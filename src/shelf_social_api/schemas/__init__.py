from shelf_social_api.schemas.comment import (
    CommentCreateRequest,
    CommentDeleteResponse,
    CommentRead,
)
from shelf_social_api.schemas.common import Page
from shelf_social_api.schemas.interaction import InteractionRead, InteractionUpdate
from shelf_social_api.schemas.like import LikeStatus
from shelf_social_api.schemas.notification import (
    MarkReadRequest,
    MarkReadResponse,
    NotificationPage,
    NotificationRead,
)
from shelf_social_api.schemas.review import ReviewCreateRequest, ReviewRead, ReviewUpdateRequest

__all__ = [
    "CommentCreateRequest",
    "CommentDeleteResponse",
    "CommentRead",
    "InteractionRead",
    "InteractionUpdate",
    "LikeStatus",
    "MarkReadRequest",
    "MarkReadResponse",
    "NotificationPage",
    "NotificationRead",
    "Page",
    "ReviewCreateRequest",
    "ReviewRead",
    "ReviewUpdateRequest",
]
