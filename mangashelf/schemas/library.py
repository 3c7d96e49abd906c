"""
Aggregate view records handed to the presentation layer. Each one is the
result of a single ordered pipeline in ``mangashelf.services.library_service``.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel

from mangashelf.schemas.chapter import ChapterBrief, ChapterResponse, VolumeGroup
from mangashelf.schemas.comment import CommentNode
from mangashelf.schemas.manga import MangaResponse, MangaSummary, RelatedManga
from mangashelf.schemas.reading_progress import ReadingProgressResponse


class LibraryPage(BaseModel):
    items: List[MangaSummary] = []
    page: int
    page_size: int
    total: int
    total_pages: int
    genres: List[str] = []
    q: Optional[str] = None
    genre: Optional[str] = None
    family_safe: bool = True


class MangaDetail(BaseModel):
    manga: MangaResponse
    genres: List[str] = []
    chapter_count: int = 0
    volumes: List[VolumeGroup] = []
    related: List[RelatedManga] = []
    is_bookmarked: bool = False
    progress: Optional[ReadingProgressResponse] = None
    reactions: Dict[str, int] = {}
    comments: List[CommentNode] = []


class ChapterView(BaseModel):
    manga: MangaResponse
    chapter: ChapterResponse
    chapters: List[ChapterBrief] = []
    previous: Optional[ChapterBrief] = None
    next: Optional[ChapterBrief] = None
    reactions: Dict[str, int] = {}
    comments: List[CommentNode] = []
