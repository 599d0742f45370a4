from pydantic import BaseModel, ConfigDict, Field


class UserSummary(BaseModel):
    id: str = Field(description="Unique ID of the user", examples=["usr-1"])
    username: str = Field(description="Public handle of the user", examples=["bookworm"])

    model_config = ConfigDict(from_attributes=True)
