from pydantic import BaseModel, Field

from shelf_social_api.domain import LikeTargetKind


class LikeStatus(BaseModel):
    target_kind: LikeTargetKind
    target_id: str
    liked: bool = Field(description="Whether the requesting user likes the target after the call")
    changed: bool = Field(description="False when the call found the like already in that state")
