"""
Exception types raised while sorting.
"""

from pathlib import Path
from typing import Optional


class SortError(Exception):
    """Base class for photosorter errors."""


class StartupError(SortError):
    """A precondition failed before any file was processed."""


class FileOperationError(SortError):
    """Copying a single file, or preparing its destination, failed."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class TimestampError(SortError):
    """The resolved date could not be stamped onto a copied file."""
