from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserBase(BaseModel):
    username: str = Field(..., min_length=3, max_length=32)
    nickname: Optional[str] = None


class UserCreate(UserBase):
    password: str = Field(..., min_length=6)


class UserUpdate(BaseModel):
    nickname: Optional[str] = None
    avatar: Optional[str] = None
    family_safe: Optional[bool] = None
    role: Optional[str] = None


class UserLogin(BaseModel):
    username: str
    password: str


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: str
    nickname: Optional[str] = None
    avatar: Optional[str] = None
    family_safe: bool
    created_at: Optional[datetime] = None


class FamilySafeState(BaseModel):
    family_safe: bool
    return_to: str = "/"
