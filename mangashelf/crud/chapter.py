import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from mangashelf.crud.base import CRUDBase
from mangashelf.crud.comment import crud_comment
from mangashelf.models.chapter import Chapter
from mangashelf.schemas.chapter import ChapterCreate, ChapterUpdate
from mangashelf.schemas.social import TargetType

logger = logging.getLogger(__name__)


class CRUDChapter(CRUDBase[Chapter, ChapterCreate, ChapterUpdate]):
    def get_by_manga(self, db: Session, *, manga_id: int) -> List[Chapter]:
        """Chapters in reading order: oldest first, id breaks timestamp ties."""
        return (
            db.query(Chapter)
            .filter(Chapter.manga_id == manga_id)
            .order_by(Chapter.created_at.asc(), Chapter.id.asc())
            .all()
        )

    def get_by_slug(
        self, db: Session, *, manga_id: int, slug: str
    ) -> Optional[Chapter]:
        return (
            db.query(Chapter)
            .filter(Chapter.manga_id == manga_id, Chapter.slug == slug)
            .first()
        )

    def get_latest_by_manga(
        self, db: Session, *, manga_ids: List[int], per_manga: int
    ) -> Dict[int, List[Chapter]]:
        """Most recent chapters per manga, newest first."""
        if not manga_ids or per_manga <= 0:
            return {}
        rows = (
            db.query(Chapter)
            .filter(Chapter.manga_id.in_(manga_ids))
            .order_by(Chapter.created_at.desc(), Chapter.id.desc())
            .all()
        )
        latest: Dict[int, List[Chapter]] = {}
        for chapter in rows:
            bucket = latest.setdefault(chapter.manga_id, [])
            if len(bucket) < per_manga:
                bucket.append(chapter)
        return latest

    def create_for_manga(
        self,
        db: Session,
        *,
        manga_id: int,
        title: str,
        slug: str,
        volume: str,
        pages: List[str],
    ) -> Chapter:
        db_obj = Chapter(
            manga_id=manga_id, title=title, slug=slug, volume=volume, pages=pages
        )
        db.add(db_obj)
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(db_obj)
        logger.info(f"Created chapter: {slug} for manga {manga_id} (ID: {db_obj.id})")
        return db_obj

    def update_by_id(self, db: Session, *, id: int, values: Dict[str, Any]) -> int:
        if not values:
            return db.query(Chapter).filter(Chapter.id == id).count()
        try:
            affected = (
                db.query(Chapter)
                .filter(Chapter.id == id)
                .update(values, synchronize_session=False)
            )
            db.commit()
        except Exception:
            db.rollback()
            raise
        return affected

    def remove(self, db: Session, *, id: int) -> Optional[Chapter]:
        chapter = db.get(Chapter, id)
        if chapter is None:
            return None
        try:
            crud_comment.remove_for_targets(
                db, target_type=TargetType.CHAPTER, target_ids=[id]
            )
            db.delete(chapter)
            db.commit()
        except Exception:
            db.rollback()
            raise
        logger.info(f"Deleted chapter: {chapter.slug} (ID: {id})")
        return chapter


crud_chapter = CRUDChapter(Chapter)
