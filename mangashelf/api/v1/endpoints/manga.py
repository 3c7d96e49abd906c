import logging
from typing import Any, List, Optional, Type, TypeVar

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi import status as http_status
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from mangashelf.core.auth import get_current_admin_user, get_current_user_optional
from mangashelf.core.database import get_db
from mangashelf.crud.chapter import crud_chapter
from mangashelf.crud.manga import crud_manga
from mangashelf.models.user import User
from mangashelf.schemas.chapter import ChapterCreate, ChapterResponse, ChapterUpdate
from mangashelf.schemas.library import ChapterView, MangaDetail
from mangashelf.schemas.manga import MangaCreate, MangaResponse, MangaUpdate
from mangashelf.schemas.response import (
    CreateResponse,
    DeleteResponse,
    Messages,
    SuccessResponse,
    UpdateResponse,
)
from mangashelf.schemas.social import CommentSort
from mangashelf.services import content_service, library_service

logger = logging.getLogger(__name__)

router = APIRouter()

SchemaType = TypeVar("SchemaType", bound=BaseModel)


def _from_form(schema: Type[SchemaType], **fields: Any) -> SchemaType:
    """Build a schema from form fields, skipping the ones not sent."""
    try:
        return schema(**{k: v for k, v in fields.items() if v is not None})
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))


# ===============================
# MANGA
# ===============================
@router.post(
    "/",
    response_model=CreateResponse[MangaResponse],
    status_code=http_status.HTTP_201_CREATED,
)
def create_manga(
    *,
    db: Session = Depends(get_db),
    title: str = Form(...),
    other_title: Optional[str] = Form(None),
    author: Optional[str] = Form(None),
    artist: Optional[str] = Form(None),
    genre: Optional[str] = Form(None),
    status: Optional[str] = Form(None),
    type: Optional[str] = Form(None),
    synopsis: Optional[str] = Form(None),
    rating: Optional[str] = Form(None),
    cover: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_admin_user),
) -> Any:
    """
    Create a manga with an optional cover image (Admin only).
    """
    manga_in = _from_form(
        MangaCreate,
        title=title,
        other_title=other_title,
        author=author,
        artist=artist,
        genre=genre,
        status=status,
        type=type,
        synopsis=synopsis,
        rating=rating,
    )
    if cover is not None and not cover.filename:
        cover = None
    manga = content_service.create_manga(db, obj_in=manga_in, cover=cover)
    return CreateResponse(message=Messages.MANGA_CREATED, data=manga)


@router.get("/{slug}", response_model=SuccessResponse[MangaDetail])
def read_manga(
    *,
    db: Session = Depends(get_db),
    slug: str,
    sort: CommentSort = Query(CommentSort.NEW, description="Comment order"),
    current_user: Optional[User] = Depends(get_current_user_optional),
) -> Any:
    """
    Manga detail: chapters grouped by volume, related titles, the viewer's
    bookmark and progress, reactions and comments.
    """
    detail = library_service.build_manga_detail(
        db, slug=slug, viewer=current_user, sort=sort
    )
    return SuccessResponse(message=Messages.MANGA_RETRIEVED, data=detail)


@router.put("/{slug}", response_model=UpdateResponse[MangaResponse])
def update_manga(
    *,
    db: Session = Depends(get_db),
    slug: str,
    title: Optional[str] = Form(None),
    other_title: Optional[str] = Form(None),
    author: Optional[str] = Form(None),
    artist: Optional[str] = Form(None),
    genre: Optional[str] = Form(None),
    status: Optional[str] = Form(None),
    type: Optional[str] = Form(None),
    synopsis: Optional[str] = Form(None),
    rating: Optional[str] = Form(None),
    cover: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_admin_user),
) -> Any:
    """
    Update a manga (Admin only). Changing the title changes the slug.
    """
    manga = library_service.get_manga_or_404(db, slug)
    manga_in = _from_form(
        MangaUpdate,
        title=title,
        other_title=other_title,
        author=author,
        artist=artist,
        genre=genre,
        status=status,
        type=type,
        synopsis=synopsis,
        rating=rating,
    )
    if cover is not None and not cover.filename:
        cover = None
    manga_id = manga.id
    content_service.update_manga(db, manga=manga, obj_in=manga_in, cover=cover)
    return UpdateResponse(
        message=Messages.MANGA_UPDATED, data=crud_manga.get(db, manga_id)
    )


@router.delete("/{slug}", response_model=DeleteResponse)
def delete_manga(
    *,
    db: Session = Depends(get_db),
    slug: str,
    current_user: User = Depends(get_current_admin_user),
) -> Any:
    """
    Delete a manga with all its chapters and files (Admin only).
    """
    manga = library_service.get_manga_or_404(db, slug)
    content_service.delete_manga(db, manga=manga)
    return DeleteResponse(message=Messages.MANGA_DELETED)


# ===============================
# CHAPTERS
# ===============================
@router.post(
    "/{slug}/chapters",
    response_model=CreateResponse[ChapterResponse],
    status_code=http_status.HTTP_201_CREATED,
)
def create_chapter(
    *,
    db: Session = Depends(get_db),
    slug: str,
    title: str = Form(...),
    volume: Optional[str] = Form(None),
    pages: List[UploadFile] = File(...),
    current_user: User = Depends(get_current_admin_user),
) -> Any:
    """
    Upload a chapter as individual page images, kept in upload order (Admin only).
    """
    manga = library_service.get_manga_or_404(db, slug)
    chapter_in = _from_form(ChapterCreate, title=title, volume=volume)
    chapter = content_service.create_chapter(
        db, manga=manga, obj_in=chapter_in, pages=pages
    )
    return CreateResponse(message=Messages.CHAPTER_CREATED, data=chapter)


@router.post(
    "/{slug}/chapters/archive",
    response_model=CreateResponse[ChapterResponse],
    status_code=http_status.HTTP_201_CREATED,
)
def create_chapter_from_archive(
    *,
    db: Session = Depends(get_db),
    slug: str,
    title: str = Form(...),
    volume: Optional[str] = Form(None),
    archive: UploadFile = File(...),
    current_user: User = Depends(get_current_admin_user),
) -> Any:
    """
    Upload a chapter as a zip of page images, ordered by file name (Admin only).
    """
    manga = library_service.get_manga_or_404(db, slug)
    chapter_in = _from_form(ChapterCreate, title=title, volume=volume)
    chapter = content_service.create_chapter_from_archive(
        db, manga=manga, obj_in=chapter_in, archive=archive
    )
    return CreateResponse(message=Messages.CHAPTER_CREATED, data=chapter)


@router.get("/{slug}/{chapter_slug}", response_model=SuccessResponse[ChapterView])
def read_chapter(
    *,
    db: Session = Depends(get_db),
    slug: str,
    chapter_slug: str,
    sort: CommentSort = Query(CommentSort.NEW, description="Comment order"),
    current_user: Optional[User] = Depends(get_current_user_optional),
) -> Any:
    """
    Read a chapter. Signed-in readers have their progress recorded.
    """
    view = library_service.build_chapter_view(
        db, slug=slug, chapter_slug=chapter_slug, viewer=current_user, sort=sort
    )
    return SuccessResponse(message=Messages.CHAPTER_RETRIEVED, data=view)


@router.put("/{slug}/{chapter_slug}", response_model=UpdateResponse[ChapterResponse])
def update_chapter(
    *,
    db: Session = Depends(get_db),
    slug: str,
    chapter_slug: str,
    title: Optional[str] = Form(None),
    volume: Optional[str] = Form(None),
    current_user: User = Depends(get_current_admin_user),
) -> Any:
    """
    Rename a chapter or move it to another volume (Admin only).
    """
    manga = library_service.get_manga_or_404(db, slug)
    chapter = library_service.get_chapter_or_404(db, manga, chapter_slug)
    chapter_in = _from_form(ChapterUpdate, title=title, volume=volume)
    chapter_id = chapter.id
    content_service.update_chapter(db, manga=manga, chapter=chapter, obj_in=chapter_in)
    return UpdateResponse(
        message=Messages.CHAPTER_UPDATED, data=crud_chapter.get(db, chapter_id)
    )


@router.delete("/{slug}/{chapter_slug}", response_model=DeleteResponse)
def delete_chapter(
    *,
    db: Session = Depends(get_db),
    slug: str,
    chapter_slug: str,
    current_user: User = Depends(get_current_admin_user),
) -> Any:
    """
    Delete a chapter and its page folder (Admin only).
    """
    manga = library_service.get_manga_or_404(db, slug)
    chapter = library_service.get_chapter_or_404(db, manga, chapter_slug)
    content_service.delete_chapter(db, manga=manga, chapter=chapter)
    return DeleteResponse(message=Messages.CHAPTER_DELETED)
