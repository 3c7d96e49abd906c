import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from mangashelf.crud.base import CRUDBase
from mangashelf.crud.comment import crud_comment
from mangashelf.models.chapter import Chapter
from mangashelf.models.manga import RATING_ADULT, Manga
from mangashelf.schemas.manga import MangaCreate, MangaUpdate
from mangashelf.schemas.social import TargetType
from mangashelf.utils.text import replace_prefix

logger = logging.getLogger(__name__)


def _escape_like(text: str) -> str:
    """Make LIKE wildcards in user input match literally."""
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class CRUDManga(CRUDBase[Manga, MangaCreate, MangaUpdate]):
    def get_by_slug(self, db: Session, *, slug: str) -> Optional[Manga]:
        return db.query(Manga).filter(Manga.slug == slug).first()

    def get_all(self, db: Session) -> List[Manga]:
        """Every manga, alphabetical by title."""
        return db.query(Manga).order_by(func.lower(Manga.title), Manga.id).all()

    def search(
        self, db: Session, *, query: Optional[str] = None, family_safe: bool = True
    ) -> List[Manga]:
        """
        Title / alternative-title substring search (case-insensitive).
        Family-safe viewers never get adult titles back.
        """
        q = db.query(Manga)
        if query:
            pattern = f"%{_escape_like(query.strip())}%"
            q = q.filter(
                or_(
                    Manga.title.ilike(pattern, escape="\\"),
                    Manga.other_title.ilike(pattern, escape="\\"),
                )
            )
        if family_safe:
            q = q.filter(Manga.rating != RATING_ADULT)
        return q.order_by(func.lower(Manga.title), Manga.id).all()

    def get_genre_strings(self, db: Session) -> List[str]:
        rows = db.query(Manga.genre).all()
        return [row[0] or "" for row in rows]

    def get_newest_ids(self, db: Session, *, limit: int) -> List[int]:
        rows = db.query(Manga.id).order_by(Manga.id.desc()).limit(limit).all()
        return [row[0] for row in rows]

    def get_chapter_counts(
        self, db: Session, *, manga_ids: Optional[List[int]] = None
    ) -> Dict[int, int]:
        q = db.query(Chapter.manga_id, func.count(Chapter.id)).group_by(
            Chapter.manga_id
        )
        if manga_ids is not None:
            if not manga_ids:
                return {}
            q = q.filter(Chapter.manga_id.in_(manga_ids))
        return {manga_id: count for manga_id, count in q.all()}

    def create_with_slug(
        self,
        db: Session,
        *,
        obj_in: MangaCreate,
        slug: str,
        cover: Optional[str] = None,
    ) -> Manga:
        db_obj = Manga(**obj_in.model_dump(), slug=slug, cover=cover)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        logger.info(f"Created manga: {db_obj.slug} (ID: {db_obj.id})")
        return db_obj

    def update_by_id(
        self,
        db: Session,
        *,
        id: int,
        values: Dict[str, Any],
        old_prefix: Optional[str] = None,
        new_prefix: Optional[str] = None,
    ) -> int:
        """
        Update one manga row and return the number of rows affected.

        When the media prefix changes (rename), the stored cover path and every
        chapter page path are rewritten in the same transaction.
        """
        if not values:
            return db.query(Manga).filter(Manga.id == id).count()
        try:
            affected = (
                db.query(Manga)
                .filter(Manga.id == id)
                .update(values, synchronize_session=False)
            )
            if affected and old_prefix and new_prefix and old_prefix != new_prefix:
                manga = db.get(Manga, id)
                db.refresh(manga)
                manga.cover = replace_prefix(manga.cover, old_prefix, new_prefix)
                for chapter in db.query(Chapter).filter(Chapter.manga_id == id):
                    chapter.pages = [
                        replace_prefix(page, old_prefix, new_prefix)
                        for page in chapter.pages or []
                    ]
            db.commit()
        except Exception:
            db.rollback()
            raise
        return affected

    def remove(self, db: Session, *, id: int) -> Optional[Manga]:
        """
        Delete a manga. Chapters, bookmarks and reading progress cascade in the
        database. Comments and reactions on the manga and its chapters have no
        foreign key, so they are removed here in the same transaction.
        """
        manga = db.get(Manga, id)
        if manga is None:
            return None

        chapter_ids = [
            row[0] for row in db.query(Chapter.id).filter(Chapter.manga_id == id)
        ]
        try:
            crud_comment.remove_for_targets(
                db, target_type=TargetType.MANGA, target_ids=[id]
            )
            crud_comment.remove_for_targets(
                db, target_type=TargetType.CHAPTER, target_ids=chapter_ids
            )
            db.delete(manga)
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(f"Deleted manga: {manga.slug} (ID: {id})")
        return manga


crud_manga = CRUDManga(Manga)
