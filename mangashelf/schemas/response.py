from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel

# Generic type for data payload
T = TypeVar("T")


class APIResponse(BaseModel, Generic[T]):
    """Standard API response schema with message support"""

    success: bool = True
    message: str
    data: Optional[T] = None
    errors: Optional[List[str]] = None
    meta: Optional[Dict[str, Any]] = None


class SuccessResponse(APIResponse[T]):
    """Success response with data"""

    success: bool = True
    message: str = "Operation completed successfully"
    data: Optional[T] = None
    meta: Optional[Dict[str, Any]] = None


class ErrorResponse(APIResponse[None]):
    """Error response with error details"""

    success: bool = False
    message: str = "An error occurred"
    data: None = None
    errors: Optional[List[str]] = None


class CreateResponse(APIResponse[T]):
    """Response for create operations"""

    success: bool = True
    message: str = "Created successfully"
    data: Optional[T] = None


class UpdateResponse(APIResponse[T]):
    """Response for update operations"""

    success: bool = True
    message: str = "Updated successfully"
    data: Optional[T] = None


class DeleteResponse(APIResponse[None]):
    """Response for delete operations"""

    success: bool = True
    message: str = "Deleted successfully"
    data: None = None


class ListResponse(APIResponse[List[T]]):
    """Response for list operations"""

    success: bool = True
    message: str = "Data retrieved successfully"
    data: Optional[List[T]] = None
    meta: Optional[Dict[str, Any]] = None


class Messages:
    # User messages
    USER_UPDATED = "Profile updated successfully"
    FAMILY_SAFE_UPDATED = "Family-safe mode updated"

    # Library messages
    LIBRARY_RETRIEVED = "Library retrieved successfully"
    GENRES_RETRIEVED = "Genres retrieved successfully"

    # Manga messages
    MANGA_CREATED = "Manga created successfully"
    MANGA_UPDATED = "Manga updated successfully"
    MANGA_DELETED = "Manga deleted successfully"
    MANGA_RETRIEVED = "Manga retrieved successfully"

    # Chapter messages
    CHAPTER_CREATED = "Chapter created successfully"
    CHAPTER_UPDATED = "Chapter updated successfully"
    CHAPTER_DELETED = "Chapter deleted successfully"
    CHAPTER_RETRIEVED = "Chapter retrieved successfully"

    # Bookmark messages
    BOOKMARK_ADDED = "Manga bookmarked successfully"
    BOOKMARK_REMOVED = "Bookmark removed successfully"
    BOOKMARKS_RETRIEVED = "Bookmarks retrieved successfully"

    # Reading Progress messages
    READING_PROGRESS_RETRIEVED = "Reading progress retrieved successfully"

    # Social messages
    COMMENT_ADDED = "Comment added successfully"
    COMMENTS_RETRIEVED = "Comments retrieved successfully"
    REACTION_SET = "Reaction saved"
    REACTIONS_RETRIEVED = "Reactions retrieved successfully"

    # Authentication messages
    LOGIN_SUCCESSFUL = "Login successful"
    REGISTER_SUCCESS = "Registration successful"

    # General messages
    DATA_RETRIEVED = "Data retrieved successfully"
    STORAGE_UNAVAILABLE = "Storage unavailable"
    INVALID_REQUEST = "Invalid request data"
