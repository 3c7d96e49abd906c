"""
Operations behind the admin scripts in ``scripts/``.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image, ImageOps
from sqlalchemy.orm import Session

from mangashelf.core.config import settings
from mangashelf.core.security import generate_temporary_password
from mangashelf.core.storage import IMAGE_EXTENSIONS, MangaStorage, manga_storage
from mangashelf.crud.chapter import crud_chapter
from mangashelf.crud.manga import crud_manga
from mangashelf.crud.user import crud_user
from mangashelf.models.chapter import UNKNOWN_VOLUME
from mangashelf.models.manga import Manga
from mangashelf.models.user import ROLE_ADMIN, User
from mangashelf.schemas.manga import MangaCreate
from mangashelf.schemas.user import UserCreate
from mangashelf.utils.text import natural_key, title_from_slug

logger = logging.getLogger(__name__)

COVER_NAME = "cover.webp"


@dataclass
class ImportReport:
    manga_created: List[str] = field(default_factory=list)
    chapters_created: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)


def ensure_admin(db: Session, username: str) -> Tuple[User, Optional[str]]:
    """
    Promote ``username`` to admin, creating the account when it does not
    exist yet. Returns the user and, for new accounts, the temporary password.
    """
    user = crud_user.get_by_username(db, username=username)
    if user is not None:
        crud_user.promote_to_admin(db, username=username)
        db.refresh(user)
        return user, None

    password = generate_temporary_password()
    user = crud_user.create(
        db, obj_in=UserCreate(username=username, password=password), role=ROLE_ADMIN
    )
    return user, password


def _page_files(folder: Path) -> List[Path]:
    files = [
        p
        for p in folder.iterdir()
        if p.is_file()
        and not p.name.startswith(".")
        and p.suffix.lower() in IMAGE_EXTENSIONS
    ]
    return sorted(files, key=lambda p: natural_key(p.name))


def _find_cover(folder: Path) -> Optional[Path]:
    for path in sorted(folder.iterdir()):
        if path.is_file() and path.stem.lower() == "cover":
            if path.suffix.lower() in IMAGE_EXTENSIONS:
                return path
    return None


def import_library(db: Session, storage: MangaStorage = manga_storage) -> ImportReport:
    """
    Register folders already on disk. Every folder under the media root is
    a manga, every subfolder of it a chapter. Existing rows are left alone,
    so running the import twice changes nothing.
    """
    report = ImportReport()
    root = storage.root
    if not root.is_dir():
        logger.info(f"No media folder at {root}; nothing to import")
        return report

    for manga_dir in sorted(p for p in root.iterdir() if p.is_dir()):
        slug = manga_dir.name
        if slug.startswith(".") or slug == "avatars":
            continue

        manga = crud_manga.get_by_slug(db, slug=slug)
        if manga is None:
            cover = _find_cover(manga_dir)
            try:
                manga = crud_manga.create_with_slug(
                    db,
                    obj_in=MangaCreate(title=title_from_slug(slug)),
                    slug=slug,
                    cover=storage.public_path(slug, cover.name) if cover else None,
                )
            except Exception as e:
                db.rollback()
                logger.error(f"Error importing manga {slug}: {e}")
                report.errors.append(slug)
                continue
            report.manga_created.append(slug)

        for chapter_dir in sorted(
            (p for p in manga_dir.iterdir() if p.is_dir() and not p.name.startswith(".")),
            key=lambda p: natural_key(p.name),
        ):
            chapter_slug = chapter_dir.name
            if crud_chapter.get_by_slug(db, manga_id=manga.id, slug=chapter_slug):
                continue
            pages = [
                storage.public_path(slug, chapter_slug, page.name)
                for page in _page_files(chapter_dir)
            ]
            try:
                crud_chapter.create_for_manga(
                    db,
                    manga_id=manga.id,
                    title=title_from_slug(chapter_slug),
                    slug=chapter_slug,
                    volume=UNKNOWN_VOLUME,
                    pages=pages,
                )
            except Exception as e:
                logger.error(f"Error importing chapter {slug}/{chapter_slug}: {e}")
                report.errors.append(f"{slug}/{chapter_slug}")
                continue
            report.chapters_created.append(f"{slug}/{chapter_slug}")

    logger.info(
        f"Imported {len(report.manga_created)} manga and "
        f"{len(report.chapters_created)} chapters"
    )
    return report


def convert_to_webp(source: Path, target: Path) -> bool:
    tmp = target.with_name(target.name + ".tmp")
    try:
        with Image.open(source) as img:
            img = ImageOps.exif_transpose(img)
            if img.mode not in ("RGB", "RGBA"):
                img = img.convert("RGBA" if "transparency" in img.info else "RGB")
            img.save(tmp, "WEBP", quality=settings.IMAGE_QUALITY)
        tmp.replace(target)
    except Exception as e:
        logger.error(f"Convert failed for {source}: {e}")
        if tmp.exists():
            tmp.unlink()
        return False
    return True


def convert_cover(db: Session, manga: Manga, storage: MangaStorage = manga_storage) -> bool:
    """
    Re-encode a manga's cover as ``<slug>/cover.webp`` and point the row
    at it. Returns False when no usable cover image was found.
    """
    folder = storage.manga_dir(manga.slug)
    target = folder / COVER_NAME
    desired = storage.public_path(manga.slug, COVER_NAME)

    source = storage.local_path(manga.cover) if manga.cover else None
    if source is None or not source.is_file():
        source = target if target.is_file() else None
    if source is None and folder.is_dir():
        source = _find_cover(folder)
    if source is None:
        logger.warning(f"No cover found for {manga.slug}")
        return False

    if not convert_to_webp(source, target):
        return False
    if source != target:
        source.unlink()
    if manga.cover != desired:
        crud_manga.update_by_id(db, id=manga.id, values={"cover": desired})
    return True


def convert_covers(db: Session, storage: MangaStorage = manga_storage) -> Tuple[int, int]:
    """Convert every cover. Returns ``(converted, skipped)``."""
    converted = skipped = 0
    for manga in crud_manga.get_all(db):
        if convert_cover(db, manga, storage):
            converted += 1
        else:
            skipped += 1
    return converted, skipped
