from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from mangashelf.models.manga import VALID_RATINGS
from mangashelf.schemas.chapter import ChapterBrief


def _normalize_rating(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    value = value.strip()
    if value not in VALID_RATINGS:
        raise ValueError("rating must be '18+' or empty")
    return value


class MangaBase(BaseModel):
    title: str
    other_title: Optional[str] = None
    author: Optional[str] = None
    artist: Optional[str] = None
    genre: str = ""
    status: Optional[str] = None
    type: Optional[str] = None
    synopsis: Optional[str] = None
    rating: str = ""

    @field_validator("rating")
    @classmethod
    def check_rating(cls, value: Optional[str]) -> Optional[str]:
        return _normalize_rating(value)


class MangaCreate(MangaBase):
    pass


class MangaUpdate(BaseModel):
    title: Optional[str] = None
    other_title: Optional[str] = None
    author: Optional[str] = None
    artist: Optional[str] = None
    genre: Optional[str] = None
    status: Optional[str] = None
    type: Optional[str] = None
    synopsis: Optional[str] = None
    rating: Optional[str] = None

    @field_validator("rating")
    @classmethod
    def check_rating(cls, value: Optional[str]) -> Optional[str]:
        return _normalize_rating(value)


class MangaResponse(MangaBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    cover: Optional[str] = None
    created_at: Optional[datetime] = None


class MangaSummary(MangaResponse):
    """A library card: the manga plus its per-request facets."""

    chapter_count: int = 0
    is_hot: bool = False
    is_new: bool = False
    latest_chapters: List[ChapterBrief] = []


class RelatedManga(BaseModel):
    manga: MangaResponse
    score: int
