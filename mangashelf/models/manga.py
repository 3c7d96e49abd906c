from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from mangashelf.core.database import Base

RATING_ADULT = "18+"
RATING_NONE = ""
VALID_RATINGS = (RATING_ADULT, RATING_NONE)


class Manga(Base):
    __tablename__ = "manga"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    slug = Column(String, nullable=False, unique=True, index=True)
    other_title = Column(String, nullable=True)
    author = Column(String, nullable=True)
    artist = Column(String, nullable=True)
    genre = Column(String, nullable=False, default="")
    status = Column(String, nullable=True)
    type = Column(String, nullable=True)
    synopsis = Column(Text, nullable=True)
    cover = Column(String, nullable=True)
    rating = Column(String, nullable=False, default=RATING_NONE)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    chapters = relationship(
        "Chapter",
        back_populates="manga",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="[Chapter.created_at, Chapter.id]",
    )
    bookmarks = relationship(
        "Bookmark",
        back_populates="manga",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    reading_progress = relationship(
        "ReadingProgress",
        back_populates="manga",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_adult(self) -> bool:
        return self.rating == RATING_ADULT

    def __repr__(self):
        return f"<Manga(id={self.id}, slug='{self.slug}')>"
