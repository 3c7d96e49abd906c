from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mangashelf.core.auth import get_current_user
from mangashelf.core.database import get_db
from mangashelf.crud.reading_progress import crud_reading_progress
from mangashelf.models.user import User
from mangashelf.schemas.reading_progress import ReadingProgressWithDetails
from mangashelf.schemas.response import ListResponse, Messages

router = APIRouter()


@router.get("/", response_model=ListResponse[ReadingProgressWithDetails])
def read_my_reading_progress(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Last chapter opened for every manga the user has started, most recent first.
    """
    progress = crud_reading_progress.get_by_user_with_details(
        db, user_id=current_user.id
    )
    return ListResponse(
        message=Messages.READING_PROGRESS_RETRIEVED,
        data=progress,
        meta={"total": len(progress)},
    )
