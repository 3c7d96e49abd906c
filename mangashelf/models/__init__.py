from .bookmark import Bookmark
from .chapter import Chapter
from .comment import Comment
from .manga import Manga
from .reaction import Reaction
from .reading_progress import ReadingProgress
from .user import User

__all__ = [
    "User",
    "Manga",
    "Chapter",
    "Bookmark",
    "ReadingProgress",
    "Comment",
    "Reaction",
]
