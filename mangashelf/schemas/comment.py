from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from mangashelf.schemas.social import TargetType


class CommentCreate(BaseModel):
    body: str = Field(..., max_length=5000)
    parent_id: Optional[int] = None


class CommentAuthor(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    nickname: Optional[str] = None
    avatar: Optional[str] = None


class CommentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    target_type: TargetType
    target_id: int
    parent_id: Optional[int] = None
    body: str
    created_at: datetime


class CommentNode(CommentResponse):
    """A comment with its author, vote score, reactions and nested replies."""

    author: Optional[CommentAuthor] = None
    score: int = 0
    reactions: Dict[str, int] = {}
    replies: List["CommentNode"] = []


CommentNode.model_rebuild()
