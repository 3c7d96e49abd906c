from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from mangashelf.schemas.social import TargetType


class ReactionCreate(BaseModel):
    emoji: str = Field(..., min_length=1, max_length=16)


class ReactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    target_type: TargetType
    target_id: int
    emoji: str
    updated_at: datetime
