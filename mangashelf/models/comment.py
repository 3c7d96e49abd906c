from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from mangashelf.core.database import Base


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    # Polymorphic target, validated by the application before every write
    target_type = Column(String, nullable=False)
    target_id = Column(Integer, nullable=False)

    parent_id = Column(
        Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True
    )
    body = Column(Text, nullable=False)

    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    user = relationship("User")

    __table_args__ = (Index("ix_comments_target", "target_type", "target_id"),)

    def __repr__(self):
        return (
            f"<Comment(id={self.id}, target={self.target_type}:{self.target_id}, "
            f"parent_id={self.parent_id})>"
        )
