from .bookmark import crud_bookmark
from .chapter import crud_chapter
from .comment import crud_comment
from .manga import crud_manga
from .reaction import crud_reaction
from .reading_progress import crud_reading_progress
from .user import crud_user

__all__ = [
    "crud_user",
    "crud_manga",
    "crud_chapter",
    "crud_bookmark",
    "crud_reading_progress",
    "crud_comment",
    "crud_reaction",
]
