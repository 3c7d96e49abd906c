from fastapi import HTTPException, status


class MangaNotFound(HTTPException):
    def __init__(self, slug: str):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Manga '{slug}' not found",
        )


class ChapterNotFound(HTTPException):
    def __init__(self, manga_slug: str, chapter_slug: str):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Chapter '{chapter_slug}' of manga '{manga_slug}' not found",
        )


class TargetNotFound(HTTPException):
    def __init__(self, target_type: str, target_id: int):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{target_type.capitalize()} with id {target_id} not found",
        )


class DuplicateManga(HTTPException):
    def __init__(self, slug: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Manga with slug '{slug}' already exists",
        )


class DuplicateChapter(HTTPException):
    def __init__(self, manga_slug: str, chapter_slug: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Chapter '{chapter_slug}' already exists for manga '{manga_slug}'",
        )


class DuplicateUsername(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already registered",
        )


class EmptyField(HTTPException):
    def __init__(self, field: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Field '{field}' must not be empty",
        )


class InvalidTitle(HTTPException):
    def __init__(self, title: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Title '{title}' cannot be used as a folder name",
        )


class InvalidParentComment(HTTPException):
    def __init__(self, parent_id: int):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Parent comment {parent_id} does not belong to this thread",
        )


class InvalidUpload(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class InvalidCredentials(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials"
        )


class NotAuthenticated(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )


class InsufficientPermissions(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions"
        )


class StorageUnavailable(Exception):
    """Raised when the media folder cannot be written, read or renamed."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
