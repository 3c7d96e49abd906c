from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mangashelf.core.auth import get_current_user_optional
from mangashelf.core.database import get_db
from mangashelf.crud.manga import crud_manga
from mangashelf.models.user import User
from mangashelf.schemas.library import LibraryPage
from mangashelf.schemas.response import ListResponse, Messages, SuccessResponse
from mangashelf.services import library_service

router = APIRouter()


@router.get("/", response_model=SuccessResponse[LibraryPage])
def read_library(
    db: Session = Depends(get_db),
    q: Optional[str] = Query(None, description="Search title or other title"),
    genre: Optional[str] = Query(None, description="Filter by a single genre"),
    page: int = Query(1, description="1-indexed page number"),
    current_user: Optional[User] = Depends(get_current_user_optional),
) -> Any:
    """
    Search and browse the library, one page at a time.
    """
    library_page = library_service.build_library_page(
        db, viewer=current_user, q=q, genre=genre, page=page
    )
    return SuccessResponse(message=Messages.LIBRARY_RETRIEVED, data=library_page)


@router.get("/genres", response_model=ListResponse[str])
def read_genres(db: Session = Depends(get_db)) -> Any:
    genres: List[str] = library_service.genre_universe(crud_manga.get_genre_strings(db))
    return ListResponse(
        message=Messages.GENRES_RETRIEVED, data=genres, meta={"total": len(genres)}
    )
