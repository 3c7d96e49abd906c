from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from mangashelf.core.auth import get_current_user
from mangashelf.core.database import get_db
from mangashelf.core.storage import manga_storage
from mangashelf.crud.user import crud_user
from mangashelf.models.user import User
from mangashelf.schemas.response import Messages, SuccessResponse, UpdateResponse
from mangashelf.schemas.user import FamilySafeState, UserResponse
from mangashelf.services.content_service import read_image

router = APIRouter()


@router.put("/me", response_model=UpdateResponse[UserResponse])
def update_user_me(
    *,
    db: Session = Depends(get_db),
    nickname: Optional[str] = Form(None),
    avatar: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Update own nickname and/or avatar image.
    """
    avatar_path = None
    if avatar is not None and avatar.filename:
        avatar_path = manga_storage.save_avatar(read_image(avatar), avatar.filename)

    try:
        user, replaced_avatar = crud_user.update_profile(
            db, db_obj=current_user, nickname=nickname, avatar=avatar_path
        )
    except Exception:
        manga_storage.delete_public_file(avatar_path)
        raise

    if replaced_avatar:
        manga_storage.delete_public_file(replaced_avatar)
    return UpdateResponse(message=Messages.USER_UPDATED, data=user)


@router.post("/me/family-safe", response_model=SuccessResponse[FamilySafeState])
def toggle_family_safe(
    *,
    db: Session = Depends(get_db),
    return_to: str = Form("/"),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Flip family-safe mode. ``return_to`` is echoed back so the client can
    send the user to the page they came from.
    """
    family_safe = crud_user.toggle_family_safe(db, db_obj=current_user)
    if not return_to.startswith("/") or return_to.startswith("//"):
        return_to = "/"
    return SuccessResponse(
        message=Messages.FAMILY_SAFE_UPDATED,
        data=FamilySafeState(family_safe=family_safe, return_to=return_to),
    )
