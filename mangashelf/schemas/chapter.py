from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class ChapterCreate(BaseModel):
    title: str
    volume: Optional[str] = None


class ChapterUpdate(BaseModel):
    title: Optional[str] = None
    volume: Optional[str] = None


class ChapterBrief(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    slug: str
    volume: str
    created_at: datetime


class ChapterResponse(ChapterBrief):
    manga_id: int
    pages: List[str] = []


class VolumeGroup(BaseModel):
    label: str
    chapters: List[ChapterBrief] = []
