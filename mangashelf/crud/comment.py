import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from mangashelf.crud.base import CRUDBase
from mangashelf.models.comment import Comment
from mangashelf.models.reaction import Reaction
from mangashelf.models.user import User
from mangashelf.schemas.comment import CommentCreate
from mangashelf.schemas.social import TargetType

logger = logging.getLogger(__name__)


class CRUDComment(CRUDBase[Comment, CommentCreate, CommentCreate]):
    def create_for_target(
        self,
        db: Session,
        *,
        user_id: int,
        target_type: TargetType,
        target_id: int,
        body: str,
        parent_id: Optional[int] = None,
    ) -> Comment:
        db_obj = Comment(
            user_id=user_id,
            target_type=target_type.value,
            target_id=target_id,
            parent_id=parent_id,
            body=body,
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_by_target(
        self, db: Session, *, target_type: TargetType, target_id: int
    ) -> List[Tuple[Comment, User]]:
        """All comments on a target (roots and replies) joined with their author."""
        return (
            db.query(Comment, User)
            .join(User, User.id == Comment.user_id)
            .filter(
                Comment.target_type == target_type.value,
                Comment.target_id == target_id,
            )
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .all()
        )

    def remove_for_targets(
        self, db: Session, *, target_type: TargetType, target_ids: List[int]
    ) -> int:
        """
        Delete comments and reactions attached to the given targets, plus the
        reactions on those comments. Does not commit.
        """
        if not target_ids:
            return 0
        comment_ids = [
            row[0]
            for row in db.query(Comment.id).filter(
                Comment.target_type == target_type.value,
                Comment.target_id.in_(target_ids),
            )
        ]
        if comment_ids:
            db.query(Reaction).filter(
                Reaction.target_type == TargetType.COMMENT.value,
                Reaction.target_id.in_(comment_ids),
            ).delete(synchronize_session=False)
            db.query(Comment).filter(Comment.id.in_(comment_ids)).delete(
                synchronize_session=False
            )
        db.query(Reaction).filter(
            Reaction.target_type == target_type.value,
            Reaction.target_id.in_(target_ids),
        ).delete(synchronize_session=False)
        if comment_ids:
            logger.info(
                f"Removed {len(comment_ids)} comments on {target_type.value} {target_ids}"
            )
        return len(comment_ids)


crud_comment = CRUDComment(Comment)
