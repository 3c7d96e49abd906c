from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from mangashelf.schemas.chapter import ChapterBrief
from mangashelf.schemas.manga import MangaResponse


class ReadingProgressResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    manga_id: int
    chapter_id: int
    updated_at: datetime


class ReadingProgressWithDetails(ReadingProgressResponse):
    manga: Optional[MangaResponse] = None
    chapter: Optional[ChapterBrief] = None
