"""
Content mutation layer: manga and chapter writes, uploads and bookmarks.

Files are written first and the catalog row second. When the row cannot
be written the files are removed again, so a failed request leaves no
half-created content behind.
"""

import logging
import zipfile
from typing import Iterable, List, Optional, Tuple

from fastapi import UploadFile
from sqlalchemy.orm import Session

from mangashelf.core.config import settings
from mangashelf.core.exceptions import (
    DuplicateChapter,
    DuplicateManga,
    EmptyField,
    InvalidTitle,
    InvalidUpload,
)
from mangashelf.core.storage import manga_storage
from mangashelf.crud.bookmark import crud_bookmark
from mangashelf.crud.chapter import crud_chapter
from mangashelf.crud.manga import crud_manga
from mangashelf.models.chapter import UNKNOWN_VOLUME, Chapter
from mangashelf.models.manga import Manga
from mangashelf.models.user import User
from mangashelf.schemas.chapter import ChapterCreate, ChapterUpdate
from mangashelf.schemas.manga import MangaCreate, MangaUpdate
from mangashelf.utils.text import is_safe_slug, replace_prefix, slugify_title

logger = logging.getLogger(__name__)

# Columns that may not be set to NULL through a partial update
_REQUIRED_MANGA_FIELDS = ("title", "genre", "rating")


def _megabytes(size: int) -> str:
    return f"{size / (1024 * 1024):.1f}MB"


def read_upload(
    file: UploadFile,
    allowed_types: Iterable[str],
    max_size: int,
    allowed_extensions: Tuple[str, ...] = (),
) -> bytes:
    """Validate an uploaded file's type and size, then return its bytes."""
    allowed_types = list(allowed_types)
    filename = (file.filename or "").lower()
    if file.content_type not in allowed_types and not (
        allowed_extensions and filename.endswith(allowed_extensions)
    ):
        raise InvalidUpload(
            f"Invalid file type for '{file.filename}'. "
            f"Allowed types: {', '.join(allowed_types)}"
        )

    file.file.seek(0, 2)
    size = file.file.tell()
    file.file.seek(0)
    if size > max_size:
        raise InvalidUpload(
            f"File size too large. Maximum allowed: {_megabytes(max_size)}"
        )
    if size == 0:
        raise InvalidUpload(f"File '{file.filename}' is empty")
    return file.file.read()


def read_image(file: UploadFile) -> bytes:
    return read_upload(file, settings.ALLOWED_IMAGE_TYPES, settings.MAX_UPLOAD_SIZE)


def _derive_slug(title: Optional[str]) -> Tuple[str, str]:
    title = (title or "").strip()
    if not title:
        raise EmptyField("title")
    slug = slugify_title(title)
    if not is_safe_slug(slug):
        raise InvalidTitle(title)
    return title, slug


def normalize_volume(volume: Optional[str]) -> str:
    return (volume or "").strip() or UNKNOWN_VOLUME


# ===============================
# MANGA
# ===============================
def create_manga(
    db: Session, *, obj_in: MangaCreate, cover: Optional[UploadFile] = None
) -> Manga:
    title, slug = _derive_slug(obj_in.title)
    if crud_manga.get_by_slug(db, slug=slug):
        raise DuplicateManga(slug)
    cover_bytes = read_image(cover) if cover is not None else None

    created_dir = manga_storage.ensure_manga_dir(slug)
    try:
        cover_path = None
        if cover_bytes is not None:
            cover_path = manga_storage.save_cover(slug, cover_bytes, cover.filename)
        manga = crud_manga.create_with_slug(
            db,
            obj_in=obj_in.model_copy(update={"title": title}),
            slug=slug,
            cover=cover_path,
        )
    except Exception:
        if created_dir:
            manga_storage.remove_manga_dir(slug)
        raise
    return manga


def update_manga(
    db: Session,
    *,
    manga: Manga,
    obj_in: MangaUpdate,
    cover: Optional[UploadFile] = None,
) -> int:
    """
    Apply a partial update. A new title recomputes the slug, renames the
    folder and rewrites every stored media path under it.
    """
    values = obj_in.model_dump(exclude_unset=True)
    for field in _REQUIRED_MANGA_FIELDS:
        if field in values and values[field] is None:
            del values[field]

    manga_id = manga.id
    old_slug = manga.slug
    new_slug = old_slug
    if "title" in values:
        values["title"], new_slug = _derive_slug(values["title"])
        if new_slug != old_slug:
            if crud_manga.get_by_slug(db, slug=new_slug):
                raise DuplicateManga(new_slug)
            values["slug"] = new_slug
    cover_bytes = read_image(cover) if cover is not None else None
    old_cover = replace_prefix(
        manga.cover,
        manga_storage.manga_prefix(old_slug),
        manga_storage.manga_prefix(new_slug),
    )

    renamed = new_slug != old_slug
    if renamed:
        manga_storage.rename_manga_dir(old_slug, new_slug)
    staged_cover = None
    try:
        if cover_bytes is not None:
            staged_cover, values["cover"] = manga_storage.stage_cover(
                new_slug, cover_bytes, cover.filename
            )
        affected = crud_manga.update_by_id(
            db,
            id=manga_id,
            values=values,
            old_prefix=manga_storage.manga_prefix(old_slug),
            new_prefix=manga_storage.manga_prefix(new_slug),
        )
    except Exception:
        if staged_cover is not None:
            manga_storage.discard(staged_cover)
        if renamed:
            logger.warning(f"Manga update failed, renaming {new_slug} back to {old_slug}")
            manga_storage.rename_manga_dir(new_slug, old_slug)
        raise

    if staged_cover is not None:
        manga_storage.promote_cover(staged_cover)
    if "cover" in values and old_cover and old_cover != values["cover"]:
        manga_storage.delete_public_file(old_cover)
    logger.info(f"Updated manga {manga_id}: {sorted(values)}")
    return affected


def delete_manga(db: Session, *, manga: Manga) -> None:
    slug = manga.slug
    crud_manga.remove(db, id=manga.id)
    if not manga_storage.remove_manga_dir(slug):
        logger.warning(f"Manga {slug} deleted but its folder could not be removed")


# ===============================
# CHAPTERS
# ===============================
def _prepare_chapter(db: Session, manga: Manga, obj_in: ChapterCreate) -> Tuple[str, str]:
    title, slug = _derive_slug(obj_in.title)
    if crud_chapter.get_by_slug(db, manga_id=manga.id, slug=slug):
        raise DuplicateChapter(manga.slug, slug)
    return title, slug


def _store_chapter(
    db: Session,
    *,
    manga: Manga,
    title: str,
    slug: str,
    volume: Optional[str],
    files: List[Tuple[str, bytes]],
) -> Chapter:
    manga_slug = manga.slug
    # Only a folder this request created may be written to or cleaned up
    if not manga_storage.create_chapter_dir(manga_slug, slug):
        raise DuplicateChapter(manga_slug, slug)
    try:
        pages = manga_storage.save_pages(manga_slug, slug, files)
        return crud_chapter.create_for_manga(
            db,
            manga_id=manga.id,
            title=title,
            slug=slug,
            volume=normalize_volume(volume),
            pages=pages,
        )
    except Exception:
        manga_storage.remove_chapter_dir(manga_slug, slug)
        raise


def create_chapter(
    db: Session, *, manga: Manga, obj_in: ChapterCreate, pages: List[UploadFile]
) -> Chapter:
    """Create a chapter from individually uploaded pages, kept in upload order."""
    title, slug = _prepare_chapter(db, manga, obj_in)
    pages = [page for page in pages if page.filename]
    if not pages:
        raise InvalidUpload("At least one page image is required")
    files = [(page.filename, read_image(page)) for page in pages]
    return _store_chapter(
        db, manga=manga, title=title, slug=slug, volume=obj_in.volume, files=files
    )


def create_chapter_from_archive(
    db: Session, *, manga: Manga, obj_in: ChapterCreate, archive: UploadFile
) -> Chapter:
    """Create a chapter from a zip of page images, in natural filename order."""
    title, slug = _prepare_chapter(db, manga, obj_in)
    content = read_upload(
        archive,
        settings.ALLOWED_ARCHIVE_TYPES,
        settings.MAX_ARCHIVE_SIZE,
        allowed_extensions=(".zip", ".cbz"),
    )
    try:
        files = manga_storage.read_archive(content)
    except zipfile.BadZipFile:
        raise InvalidUpload(f"'{archive.filename}' is not a valid zip archive")
    except ValueError as e:
        raise InvalidUpload(str(e))
    return _store_chapter(
        db, manga=manga, title=title, slug=slug, volume=obj_in.volume, files=files
    )


def update_chapter(
    db: Session, *, manga: Manga, chapter: Chapter, obj_in: ChapterUpdate
) -> int:
    values = obj_in.model_dump(exclude_unset=True)
    manga_slug = manga.slug
    old_slug = chapter.slug
    new_slug = old_slug

    if values.get("title") is not None:
        values["title"], new_slug = _derive_slug(values["title"])
        if new_slug != old_slug:
            if crud_chapter.get_by_slug(db, manga_id=manga.id, slug=new_slug):
                raise DuplicateChapter(manga_slug, new_slug)
            values["slug"] = new_slug
            old_prefix = manga_storage.chapter_prefix(manga_slug, old_slug)
            new_prefix = manga_storage.chapter_prefix(manga_slug, new_slug)
            values["pages"] = [
                replace_prefix(page, old_prefix, new_prefix)
                for page in chapter.pages or []
            ]
    else:
        values.pop("title", None)
    if "volume" in values:
        values["volume"] = normalize_volume(values["volume"])

    renamed = new_slug != old_slug
    if renamed:
        manga_storage.rename_chapter_dir(manga_slug, old_slug, new_slug)
    try:
        affected = crud_chapter.update_by_id(db, id=chapter.id, values=values)
    except Exception:
        if renamed:
            logger.warning(
                f"Chapter update failed, renaming {new_slug} back to {old_slug}"
            )
            manga_storage.rename_chapter_dir(manga_slug, new_slug, old_slug)
        raise
    return affected


def delete_chapter(db: Session, *, manga: Manga, chapter: Chapter) -> None:
    manga_slug, chapter_slug = manga.slug, chapter.slug
    crud_chapter.remove(db, id=chapter.id)
    if not manga_storage.remove_chapter_dir(manga_slug, chapter_slug):
        logger.warning(
            f"Chapter {manga_slug}/{chapter_slug} deleted but its folder could not be removed"
        )


# ===============================
# BOOKMARKS
# ===============================
def set_bookmark(db: Session, *, user: User, manga: Manga) -> None:
    crud_bookmark.set(db, user_id=user.id, manga_id=manga.id)


def clear_bookmark(db: Session, *, user: User, manga: Manga) -> bool:
    return crud_bookmark.clear(db, user_id=user.id, manga_id=manga.id) > 0
