from sqlalchemy import Column, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from mangashelf.core.database import Base


class ReadingProgress(Base):
    __tablename__ = "reading_progress"

    # One row per (user, manga)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    manga_id = Column(
        Integer, ForeignKey("manga.id", ondelete="CASCADE"), primary_key=True
    )
    chapter_id = Column(
        Integer, ForeignKey("chapters.id", ondelete="CASCADE"), nullable=False
    )

    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    user = relationship("User", back_populates="reading_progress")
    manga = relationship("Manga", back_populates="reading_progress")
    chapter = relationship("Chapter")

    def __repr__(self):
        return (
            f"<ReadingProgress(user_id={self.user_id}, manga_id={self.manga_id}, "
            f"chapter_id={self.chapter_id})>"
        )
