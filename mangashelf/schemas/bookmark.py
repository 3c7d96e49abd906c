from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from mangashelf.schemas.manga import MangaResponse


class BookmarkResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: int
    manga_id: int
    created_at: Optional[datetime] = None


class BookmarkWithDetails(BookmarkResponse):
    manga: Optional[MangaResponse] = None


class BookmarkState(BaseModel):
    manga_id: int
    bookmarked: bool
