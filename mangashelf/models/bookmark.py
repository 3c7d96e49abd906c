from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from mangashelf.core.database import Base


class Bookmark(Base):
    __tablename__ = "bookmarks"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    manga_id = Column(
        Integer, ForeignKey("manga.id", ondelete="CASCADE"), nullable=False, index=True
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="bookmarks")
    manga = relationship("Manga", back_populates="bookmarks")

    # Constraints - One bookmark per user per manga
    __table_args__ = (
        UniqueConstraint("user_id", "manga_id", name="unique_user_manga_bookmark"),
    )

    def __repr__(self):
        return f"<Bookmark(user_id={self.user_id}, manga_id={self.manga_id})>"
