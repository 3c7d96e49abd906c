from typing import Dict, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from mangashelf.crud.base import dialect_insert
from mangashelf.models.reaction import Reaction
from mangashelf.schemas.social import TargetType


class CRUDReaction:
    def upsert(
        self,
        db: Session,
        *,
        user_id: int,
        target_type: TargetType,
        target_id: int,
        emoji: str,
    ) -> None:
        """Insert or overwrite the user's reaction in one statement."""
        stmt = dialect_insert(db, Reaction).values(
            user_id=user_id,
            target_type=target_type.value,
            target_id=target_id,
            emoji=emoji,
            updated_at=func.now(),
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id", "target_type", "target_id"],
            set_={"emoji": stmt.excluded.emoji, "updated_at": func.now()},
        )
        try:
            db.execute(stmt)
            db.commit()
        except Exception:
            db.rollback()
            raise

    def get_counts(
        self, db: Session, *, target_type: TargetType, target_id: int
    ) -> Dict[str, int]:
        rows = (
            db.query(Reaction.emoji, func.count())
            .filter(
                Reaction.target_type == target_type.value,
                Reaction.target_id == target_id,
            )
            .group_by(Reaction.emoji)
            .all()
        )
        return {emoji: count for emoji, count in rows}

    def get_counts_bulk(
        self, db: Session, *, target_type: TargetType, target_ids: List[int]
    ) -> Dict[int, Dict[str, int]]:
        """
        Emoji counts for many targets in one query. Every requested id is in
        the result, with an empty mapping when nobody reacted.
        """
        ids = list(dict.fromkeys(target_ids))
        if not ids:
            return {}
        rows = (
            db.query(Reaction.target_id, Reaction.emoji, func.count())
            .filter(
                Reaction.target_type == target_type.value,
                Reaction.target_id.in_(ids),
            )
            .group_by(Reaction.target_id, Reaction.emoji)
            .all()
        )
        counts: Dict[int, Dict[str, int]] = {target_id: {} for target_id in ids}
        for target_id, emoji, count in rows:
            counts[target_id][emoji] = count
        return counts

    def get_user_reaction(
        self, db: Session, *, user_id: int, target_type: TargetType, target_id: int
    ):
        return db.get(Reaction, (user_id, target_type.value, target_id))


crud_reaction = CRUDReaction()
