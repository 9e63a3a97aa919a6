"""
Extension-based classification and filtering of source files.
"""

from pathlib import PurePath
from typing import FrozenSet, Iterable, Optional

from .constants import ALL_EXTENSIONS, GIF_EXTENSIONS, PICTURE_EXTENSIONS, VIDEO_EXTENSIONS
from .models import Category


def classify(file_name: str) -> Category:
    """Map a file name to its media category by case-insensitive suffix."""
    name = file_name.lower()
    if name.endswith(PICTURE_EXTENSIONS):
        return Category.PICTURE
    if name.endswith(VIDEO_EXTENSIONS):
        return Category.VIDEO
    if name.endswith(GIF_EXTENSIONS):
        return Category.GIF
    return Category.UNCATEGORIZED


def normalize_extension(ext: str) -> str:
    """Lower-case an extension and give it a leading dot ('JPG' -> '.jpg')."""
    ext = ext.strip().lower()
    if ext and ext != ALL_EXTENSIONS and not ext.startswith("."):
        ext = "." + ext
    return ext


def parse_extensions(value: Optional[str]) -> Optional[FrozenSet[str]]:
    """Parse a comma separated extension list.

    Returns None when every file should be sorted: the list is empty,
    or one of its items is the '*' wildcard.
    """
    if value is None:
        return None
    return normalize_extensions(value.split(","))


def normalize_extensions(items: Iterable[str]) -> Optional[FrozenSet[str]]:
    extensions = {normalize_extension(item) for item in items}
    extensions.discard("")
    if not extensions or ALL_EXTENSIONS in extensions:
        return None
    return frozenset(extensions)


def is_allowed(file_name: str, extensions: Optional[FrozenSet[str]]) -> bool:
    """Check a file name against the allow-list (None accepts everything)."""
    if extensions is None:
        return True
    return PurePath(file_name).suffix.lower() in extensions
