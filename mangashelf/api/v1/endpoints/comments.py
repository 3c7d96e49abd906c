from typing import Any

from fastapi import APIRouter, Depends, Query
from fastapi import status as http_status
from sqlalchemy.orm import Session

from mangashelf.core.auth import get_current_user
from mangashelf.core.database import get_db
from mangashelf.models.user import User
from mangashelf.schemas.comment import CommentCreate, CommentNode
from mangashelf.schemas.response import CreateResponse, ListResponse, Messages
from mangashelf.schemas.social import CommentSort, TargetType
from mangashelf.services import social_service

router = APIRouter()


@router.get("/{target_type}/{target_id}", response_model=ListResponse[CommentNode])
def read_comments(
    *,
    db: Session = Depends(get_db),
    target_type: TargetType,
    target_id: int,
    sort: CommentSort = Query(CommentSort.NEW, description="new, old or best"),
) -> Any:
    """
    Threaded comments on a manga, chapter or comment.
    """
    social_service.resolve_target(db, target_type, target_id)
    comments = social_service.list_comments(
        db, target_type=target_type, target_id=target_id, sort=sort
    )
    return ListResponse(
        message=Messages.COMMENTS_RETRIEVED,
        data=comments,
        meta={"total": len(comments), "sort": sort.value},
    )


@router.post(
    "/{target_type}/{target_id}",
    response_model=CreateResponse[CommentNode],
    status_code=http_status.HTTP_201_CREATED,
)
def add_comment(
    *,
    db: Session = Depends(get_db),
    target_type: TargetType,
    target_id: int,
    comment_in: CommentCreate,
    current_user: User = Depends(get_current_user),
) -> Any:
    comment = social_service.add_comment(
        db,
        author=current_user,
        target_type=target_type,
        target_id=target_id,
        obj_in=comment_in,
    )
    return CreateResponse(message=Messages.COMMENT_ADDED, data=comment)
