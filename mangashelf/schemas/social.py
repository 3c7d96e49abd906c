from enum import Enum


class TargetType(str, Enum):
    MANGA = "manga"
    CHAPTER = "chapter"
    COMMENT = "comment"


class CommentSort(str, Enum):
    NEW = "new"
    OLD = "old"
    BEST = "best"
