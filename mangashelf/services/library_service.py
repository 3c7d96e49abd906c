"""
Library index: facets computed per request over the catalog, and the
aggregate view records returned by the read endpoints.
"""

import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy.orm import Session

from mangashelf.core.config import settings
from mangashelf.core.exceptions import ChapterNotFound, MangaNotFound
from mangashelf.crud.bookmark import crud_bookmark
from mangashelf.crud.chapter import crud_chapter
from mangashelf.crud.manga import crud_manga
from mangashelf.crud.reading_progress import crud_reading_progress
from mangashelf.models.chapter import UNKNOWN_VOLUME, Chapter
from mangashelf.models.manga import Manga
from mangashelf.models.user import User
from mangashelf.schemas.chapter import ChapterBrief, ChapterResponse, VolumeGroup
from mangashelf.schemas.library import ChapterView, LibraryPage, MangaDetail
from mangashelf.schemas.manga import MangaResponse, MangaSummary, RelatedManga
from mangashelf.schemas.reading_progress import ReadingProgressResponse
from mangashelf.schemas.social import CommentSort, TargetType
from mangashelf.services import social_service
from mangashelf.utils.text import is_numeric_volume, split_genres

logger = logging.getLogger(__name__)

SPECIALS_LABEL = "Specials"


def is_family_safe(viewer: Optional[User]) -> bool:
    """Anonymous visitors get the family-safe view."""
    return viewer is None or bool(viewer.family_safe)


def visible_to(manga: Manga, family_safe: bool) -> bool:
    return not (family_safe and manga.is_adult)


# ===============================
# FACETS
# ===============================
def genre_universe(genre_strings: Sequence[str]) -> List[str]:
    """Union of every comma-separated genre token, deduplicated and sorted."""
    genres = set()
    for genre in genre_strings:
        genres.update(split_genres(genre))
    return sorted(genres, key=lambda g: (g.lower(), g))


def is_hot(chapter_count: int) -> bool:
    return chapter_count >= settings.HOT_CHAPTER_THRESHOLD


def _newest_first(chapters: Sequence[Chapter]) -> List[Chapter]:
    return sorted(chapters, key=lambda c: (c.created_at, c.id), reverse=True)


def group_volumes(chapters: Sequence[Chapter]) -> List[VolumeGroup]:
    """
    Group chapters for the detail page.

    Order: "Unknown Volume", numeric volumes descending ("Volume <n>"),
    then one "Specials" group for every other label. Chapters within a
    group are newest first.
    """
    unknown: List[Chapter] = []
    numeric: Dict[str, List[Chapter]] = {}
    specials: List[Chapter] = []
    for chapter in chapters:
        volume = (chapter.volume or "").strip()
        if not volume or volume == UNKNOWN_VOLUME:
            unknown.append(chapter)
        elif is_numeric_volume(volume):
            numeric.setdefault(volume, []).append(chapter)
        else:
            specials.append(chapter)

    groups = []
    if unknown:
        groups.append((UNKNOWN_VOLUME, unknown))
    for volume in sorted(numeric, key=float, reverse=True):
        groups.append((f"Volume {volume}", numeric[volume]))
    if specials:
        groups.append((SPECIALS_LABEL, specials))

    return [
        VolumeGroup(
            label=label,
            chapters=[ChapterBrief.model_validate(c) for c in _newest_first(members)],
        )
        for label, members in groups
    ]


def related_score(base: Manga, candidate: Manga) -> int:
    score = 0
    author = (base.author or "").strip()
    if author and author == (candidate.author or "").strip():
        score += 2
    candidate_genre = (candidate.genre or "").lower()
    for token in split_genres(base.genre):
        if token.lower() in candidate_genre:
            score += 1
    return score


def related_titles(
    base: Manga,
    candidates: Sequence[Manga],
    family_safe: bool = True,
    limit: Optional[int] = None,
) -> List[Tuple[Manga, int]]:
    """Score every other manga against ``base`` and keep the best positive matches."""
    if limit is None:
        limit = settings.RELATED_LIMIT
    scored = []
    for candidate in candidates:
        if candidate.id == base.id or not visible_to(candidate, family_safe):
            continue
        score = related_score(base, candidate)
        if score > 0:
            scored.append((candidate, score))
    scored.sort(key=lambda pair: pair[1], reverse=True)
    return scored[:limit]


def filter_by_genre(mangas: Sequence[Manga], genre: Optional[str]) -> List[Manga]:
    if not genre or not genre.strip():
        return list(mangas)
    genre = genre.strip()
    return [m for m in mangas if genre in split_genres(m.genre)]


def paginate(items: Sequence, page: int, page_size: Optional[int] = None):
    """
    Slice one 1-indexed page.

    Returns ``(page_items, page, total_pages)``. Pages below 1 clamp to 1;
    pages past the end are empty.
    """
    if page_size is None:
        page_size = settings.PAGE_SIZE
    page = max(page, 1)
    total_pages = math.ceil(len(items) / page_size)
    start = (page - 1) * page_size
    return list(items[start : start + page_size]), page, total_pages


# ===============================
# VIEW RECORDS
# ===============================
def build_library_page(
    db: Session,
    *,
    viewer: Optional[User] = None,
    q: Optional[str] = None,
    genre: Optional[str] = None,
    page: int = 1,
) -> LibraryPage:
    family_safe = is_family_safe(viewer)
    matches = filter_by_genre(
        crud_manga.search(db, query=q, family_safe=family_safe), genre
    )
    items, page, total_pages = paginate(matches, page)
    logger.debug(
        f"Library query q={q!r} genre={genre!r}: {len(matches)} matches, page {page}/{total_pages}"
    )

    ids = [m.id for m in items]
    counts = crud_manga.get_chapter_counts(db, manga_ids=ids)
    newest = set(crud_manga.get_newest_ids(db, limit=settings.NEW_MANGA_COUNT))
    latest = crud_chapter.get_latest_by_manga(
        db, manga_ids=ids, per_manga=settings.LATEST_CHAPTERS_PER_MANGA
    )

    summaries = []
    for manga in items:
        count = counts.get(manga.id, 0)
        summary = MangaSummary.model_validate(manga)
        summary.chapter_count = count
        summary.is_hot = is_hot(count)
        summary.is_new = manga.id in newest
        summary.latest_chapters = [
            ChapterBrief.model_validate(c) for c in latest.get(manga.id, [])
        ]
        summaries.append(summary)

    return LibraryPage(
        items=summaries,
        page=page,
        page_size=settings.PAGE_SIZE,
        total=len(matches),
        total_pages=total_pages,
        genres=genre_universe(crud_manga.get_genre_strings(db)),
        q=q,
        genre=genre,
        family_safe=family_safe,
    )


def get_manga_or_404(db: Session, slug: str) -> Manga:
    manga = crud_manga.get_by_slug(db, slug=slug)
    if manga is None:
        raise MangaNotFound(slug)
    return manga


def get_chapter_or_404(db: Session, manga: Manga, chapter_slug: str) -> Chapter:
    chapter = crud_chapter.get_by_slug(db, manga_id=manga.id, slug=chapter_slug)
    if chapter is None:
        raise ChapterNotFound(manga.slug, chapter_slug)
    return chapter


def build_manga_detail(
    db: Session,
    *,
    slug: str,
    viewer: Optional[User] = None,
    sort: CommentSort = CommentSort.NEW,
) -> MangaDetail:
    manga = get_manga_or_404(db, slug)
    chapters = crud_chapter.get_by_manga(db, manga_id=manga.id)
    related = related_titles(
        manga, crud_manga.get_all(db), family_safe=is_family_safe(viewer)
    )

    detail = MangaDetail(
        manga=MangaResponse.model_validate(manga),
        genres=split_genres(manga.genre),
        chapter_count=len(chapters),
        volumes=group_volumes(chapters),
        related=[
            RelatedManga(manga=MangaResponse.model_validate(m), score=score)
            for m, score in related
        ],
        reactions=social_service.get_reaction_counts(
            db, target_type=TargetType.MANGA, target_id=manga.id
        ),
        comments=social_service.list_comments(
            db, target_type=TargetType.MANGA, target_id=manga.id, sort=sort
        ),
    )
    if viewer is not None:
        detail.is_bookmarked = crud_bookmark.is_bookmarked(
            db, user_id=viewer.id, manga_id=manga.id
        )
        progress = crud_reading_progress.get(db, user_id=viewer.id, manga_id=manga.id)
        if progress is not None:
            detail.progress = ReadingProgressResponse.model_validate(progress)
    return detail


def build_chapter_view(
    db: Session,
    *,
    slug: str,
    chapter_slug: str,
    viewer: Optional[User] = None,
    sort: CommentSort = CommentSort.NEW,
) -> ChapterView:
    """
    Reader page for one chapter. Opening a chapter as a signed-in user
    records it as that user's reading progress for the manga.
    """
    manga = get_manga_or_404(db, slug)
    chapter = get_chapter_or_404(db, manga, chapter_slug)
    chapters = crud_chapter.get_by_manga(db, manga_id=manga.id)

    position = next(i for i, c in enumerate(chapters) if c.id == chapter.id)
    previous = chapters[position - 1] if position > 0 else None
    following = chapters[position + 1] if position + 1 < len(chapters) else None

    view = ChapterView(
        manga=MangaResponse.model_validate(manga),
        chapter=ChapterResponse.model_validate(chapter),
        chapters=[ChapterBrief.model_validate(c) for c in chapters],
        previous=ChapterBrief.model_validate(previous) if previous else None,
        next=ChapterBrief.model_validate(following) if following else None,
        reactions=social_service.get_reaction_counts(
            db, target_type=TargetType.CHAPTER, target_id=chapter.id
        ),
        comments=social_service.list_comments(
            db, target_type=TargetType.CHAPTER, target_id=chapter.id, sort=sort
        ),
    )

    if viewer is not None:
        crud_reading_progress.upsert(
            db, user_id=viewer.id, manga_id=manga.id, chapter_id=chapter.id
        )
    return view
