from typing import Any, Dict

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mangashelf.core.auth import get_current_user
from mangashelf.core.database import get_db
from mangashelf.models.user import User
from mangashelf.schemas.reaction import ReactionCreate, ReactionResponse
from mangashelf.schemas.response import Messages, SuccessResponse
from mangashelf.schemas.social import TargetType
from mangashelf.services import social_service

router = APIRouter()


@router.post("/{target_type}/{target_id}", response_model=SuccessResponse[ReactionResponse])
def set_reaction(
    *,
    db: Session = Depends(get_db),
    target_type: TargetType,
    target_id: int,
    reaction_in: ReactionCreate,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    React to a manga, chapter or comment. Reacting again replaces the
    previous emoji.
    """
    reaction = social_service.set_reaction(
        db,
        user=current_user,
        target_type=target_type,
        target_id=target_id,
        emoji=reaction_in.emoji,
    )
    return SuccessResponse(message=Messages.REACTION_SET, data=reaction)


@router.get("/{target_type}/{target_id}", response_model=SuccessResponse[Dict[str, int]])
def read_reactions(
    *,
    db: Session = Depends(get_db),
    target_type: TargetType,
    target_id: int,
) -> Any:
    """
    Emoji counts for a target.
    """
    social_service.resolve_target(db, target_type, target_id)
    counts = social_service.get_reaction_counts(
        db, target_type=target_type, target_id=target_id
    )
    return SuccessResponse(message=Messages.REACTIONS_RETRIEVED, data=counts)
