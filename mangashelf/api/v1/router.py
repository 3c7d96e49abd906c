from fastapi import APIRouter

from mangashelf.api.v1.endpoints import (
    auth,
    bookmarks,
    comments,
    library,
    manga,
    reactions,
    reading_progress,
    users,
)

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["authentication"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(library.router, prefix="/library", tags=["library"])
api_router.include_router(manga.router, prefix="/manga", tags=["manga"])
api_router.include_router(bookmarks.router, prefix="/bookmarks", tags=["bookmarks"])
api_router.include_router(
    reading_progress.router, prefix="/reading-progress", tags=["reading-progress"]
)
api_router.include_router(comments.router, prefix="/comments", tags=["comments"])
api_router.include_router(reactions.router, prefix="/reactions", tags=["reactions"])
