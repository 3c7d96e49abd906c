import logging
from datetime import timedelta
from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from mangashelf.core.auth import create_access_token, get_current_user
from mangashelf.core.config import settings
from mangashelf.core.database import get_db
from mangashelf.core.exceptions import DuplicateUsername, InvalidCredentials
from mangashelf.crud.user import crud_user
from mangashelf.models.user import User
from mangashelf.schemas.response import CreateResponse, Messages, SuccessResponse
from mangashelf.schemas.token import Token
from mangashelf.schemas.user import UserCreate, UserLogin, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/register",
    response_model=CreateResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
)
def register(
    *,
    db: Session = Depends(get_db),
    user_in: UserCreate,
) -> Any:
    """
    Create new user. New accounts start in family-safe mode.
    """
    user_in.username = user_in.username.strip()
    if crud_user.get_by_username(db, username=user_in.username):
        raise DuplicateUsername()

    user = crud_user.create(db, obj_in=user_in)
    return CreateResponse(message=Messages.REGISTER_SUCCESS, data=user)


@router.post("/login", response_model=SuccessResponse[Token])
def login(user_in: UserLogin, db: Session = Depends(get_db)) -> Any:
    """
    Exchange username and password for a bearer token.
    """
    user = crud_user.authenticate(
        db, username=user_in.username.strip(), password=user_in.password
    )
    if not user:
        logger.info(f"Failed login for {user_in.username!r}")
        raise InvalidCredentials()

    expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(user.id, expires_delta=expires_delta)
    return SuccessResponse(
        message=Messages.LOGIN_SUCCESSFUL,
        data=Token(
            access_token=access_token,
            expires_in=int(expires_delta.total_seconds()),
        ),
    )


@router.get("/me", response_model=SuccessResponse[UserResponse])
def read_users_me(
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Get current user.
    """
    return SuccessResponse(message=Messages.DATA_RETRIEVED, data=current_user)
