from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from mangashelf.core.database import Base

UNKNOWN_VOLUME = "Unknown Volume"


class Chapter(Base):
    __tablename__ = "chapters"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    slug = Column(String, nullable=False, index=True)
    pages = Column(JSON, nullable=False, default=list)
    volume = Column(String, nullable=False, default=UNKNOWN_VOLUME)

    # Foreign Keys with proper cascade deletion
    manga_id = Column(
        Integer, ForeignKey("manga.id", ondelete="CASCADE"), nullable=False, index=True
    )

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    manga = relationship("Manga", back_populates="chapters")

    # Constraints - slugs are only unique inside one manga
    __table_args__ = (
        UniqueConstraint("manga_id", "slug", name="unique_chapter_slug_per_manga"),
    )

    def __repr__(self):
        return f"<Chapter(id={self.id}, manga_id={self.manga_id}, slug='{self.slug}')>"
