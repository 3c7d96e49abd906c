from typing import List

from sqlalchemy.orm import Session, joinedload

from mangashelf.crud.base import dialect_insert
from mangashelf.models.bookmark import Bookmark


class CRUDBookmark:
    def set(self, db: Session, *, user_id: int, manga_id: int) -> None:
        """Bookmark a manga. Bookmarking twice is a no-op."""
        stmt = (
            dialect_insert(db, Bookmark)
            .values(user_id=user_id, manga_id=manga_id)
            .on_conflict_do_nothing(index_elements=["user_id", "manga_id"])
        )
        try:
            db.execute(stmt)
            db.commit()
        except Exception:
            db.rollback()
            raise

    def clear(self, db: Session, *, user_id: int, manga_id: int) -> int:
        """Remove a bookmark. Clearing a missing bookmark returns 0."""
        try:
            removed = (
                db.query(Bookmark)
                .filter(Bookmark.user_id == user_id, Bookmark.manga_id == manga_id)
                .delete(synchronize_session=False)
            )
            db.commit()
        except Exception:
            db.rollback()
            raise
        return removed

    def is_bookmarked(self, db: Session, *, user_id: int, manga_id: int) -> bool:
        return (
            db.query(Bookmark.id)
            .filter(Bookmark.user_id == user_id, Bookmark.manga_id == manga_id)
            .first()
            is not None
        )

    def get_by_user_with_details(self, db: Session, *, user_id: int) -> List[Bookmark]:
        return (
            db.query(Bookmark)
            .options(joinedload(Bookmark.manga))
            .filter(Bookmark.user_id == user_id)
            .order_by(Bookmark.id.desc())
            .all()
        )


crud_bookmark = CRUDBookmark()
