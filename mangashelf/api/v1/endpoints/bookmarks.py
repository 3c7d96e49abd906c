from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from mangashelf.core.auth import get_current_user
from mangashelf.core.database import get_db
from mangashelf.crud.bookmark import crud_bookmark
from mangashelf.models.user import User
from mangashelf.schemas.bookmark import BookmarkState, BookmarkWithDetails
from mangashelf.schemas.response import ListResponse, Messages, SuccessResponse
from mangashelf.services import content_service, library_service

router = APIRouter()


@router.get("/", response_model=ListResponse[BookmarkWithDetails])
def read_my_bookmarks(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Current user's bookmarks, most recent first.
    """
    bookmarks = crud_bookmark.get_by_user_with_details(db, user_id=current_user.id)
    return ListResponse(
        message=Messages.BOOKMARKS_RETRIEVED,
        data=bookmarks,
        meta={"total": len(bookmarks)},
    )


@router.post("/{slug}", response_model=SuccessResponse[BookmarkState])
def add_bookmark(
    *,
    db: Session = Depends(get_db),
    slug: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    """
    Bookmark a manga. Bookmarking twice keeps a single bookmark.
    """
    manga = library_service.get_manga_or_404(db, slug)
    manga_id = manga.id
    content_service.set_bookmark(db, user=current_user, manga=manga)
    return SuccessResponse(
        message=Messages.BOOKMARK_ADDED,
        data=BookmarkState(manga_id=manga_id, bookmarked=True),
    )


@router.delete("/{slug}", response_model=SuccessResponse[BookmarkState])
def remove_bookmark(
    *,
    db: Session = Depends(get_db),
    slug: str,
    current_user: User = Depends(get_current_user),
) -> Any:
    manga = library_service.get_manga_or_404(db, slug)
    manga_id = manga.id
    content_service.clear_bookmark(db, user=current_user, manga=manga)
    return SuccessResponse(
        message=Messages.BOOKMARK_REMOVED,
        data=BookmarkState(manga_id=manga_id, bookmarked=False),
    )
