from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from mangashelf.crud.base import dialect_insert
from mangashelf.models.reading_progress import ReadingProgress


class CRUDReadingProgress:
    def upsert(
        self, db: Session, *, user_id: int, manga_id: int, chapter_id: int
    ) -> None:
        """Record the last chapter opened; one row per (user, manga)."""
        stmt = dialect_insert(db, ReadingProgress).values(
            user_id=user_id,
            manga_id=manga_id,
            chapter_id=chapter_id,
            updated_at=func.now(),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "manga_id"],
            set_={"chapter_id": stmt.excluded.chapter_id, "updated_at": func.now()},
        )
        try:
            db.execute(stmt)
            db.commit()
        except Exception:
            db.rollback()
            raise

    def get(
        self, db: Session, *, user_id: int, manga_id: int
    ) -> Optional[ReadingProgress]:
        return db.get(ReadingProgress, (user_id, manga_id))

    def get_by_user_with_details(
        self, db: Session, *, user_id: int
    ) -> List[ReadingProgress]:
        return (
            db.query(ReadingProgress)
            .options(
                joinedload(ReadingProgress.manga), joinedload(ReadingProgress.chapter)
            )
            .filter(ReadingProgress.user_id == user_id)
            .order_by(ReadingProgress.updated_at.desc())
            .all()
        )

crud_reading_progress = CRUDReadingProgress()
