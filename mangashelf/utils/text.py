"""
String helpers shared by the library index, the upload pipeline and the
admin scripts.
"""

import re
from typing import List, Optional, Tuple, Union

_WHITESPACE = re.compile(r"\s+")
_DIGITS = re.compile(r"(\d+)")
_NUMERIC_VOLUME = re.compile(r"^\d+(\.\d+)?$")


def slugify_title(title: str) -> str:
    """
    Derive the public identifier of a manga or chapter from its title.

    Lowercase, each whitespace run becomes a single hyphen. Punctuation is
    kept so existing folder names and URLs stay stable.

    >>> slugify_title("  One  Piece ")
    'one-piece'
    """
    return _WHITESPACE.sub("-", title.strip()).lower()


def is_safe_slug(slug: str) -> bool:
    """A slug doubles as a folder name, so it may not escape the media root."""
    if not slug or slug in (".", ".."):
        return False
    return "/" not in slug and "\\" not in slug and "\x00" not in slug


def title_from_slug(slug: str) -> str:
    """'my_hero-academia' -> 'My Hero Academia'"""
    words = re.sub(r"[-_]+", " ", slug).strip()
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), words)


def natural_key(name: str) -> Tuple[Union[int, str], ...]:
    """Sort key that orders 'page2.jpg' before 'page10.jpg'."""
    parts: List[Union[int, str]] = []
    for chunk in _DIGITS.split(name.lower()):
        if not chunk:
            continue
        parts.append(int(chunk) if chunk.isdigit() else chunk)
    # Keep ints and strings from being compared against each other
    return tuple((0, p) if isinstance(p, int) else (1, p) for p in parts)


def split_genres(genre: str) -> List[str]:
    """Split a comma-joined genre string into trimmed, non-empty tokens."""
    if not genre:
        return []
    return [token.strip() for token in genre.split(",") if token.strip()]


def join_genres(genres: List[str]) -> str:
    return ", ".join(split_genres(",".join(genres)))


def is_numeric_volume(volume: str) -> bool:
    return bool(_NUMERIC_VOLUME.match(volume.strip()))


def replace_prefix(path: Optional[str], old_prefix: str, new_prefix: str) -> Optional[str]:
    """Swap a leading path prefix, leaving other paths untouched."""
    if path and path.startswith(old_prefix):
        return new_prefix + path[len(old_prefix):]
    return path
