from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.sql import func

from mangashelf.core.database import Base


class Reaction(Base):
    __tablename__ = "reactions"

    # A user holds at most one reaction per target
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    target_type = Column(String, primary_key=True)
    target_id = Column(Integer, primary_key=True)

    emoji = Column(String, nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (Index("ix_reactions_target", "target_type", "target_id"),)

    def __repr__(self):
        return (
            f"<Reaction(user_id={self.user_id}, target={self.target_type}:"
            f"{self.target_id}, emoji='{self.emoji}')>"
        )
