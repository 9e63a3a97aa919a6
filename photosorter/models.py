"""
Data types passed between the sorting stages.
"""

import os
import sys
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional

from .constants import GIFS_DIR_NAME, PICTURES_DIR_NAME, VIDEOS_DIR_NAME


class Category(Enum):
    """Media category derived from the file extension."""
    PICTURE = PICTURES_DIR_NAME
    VIDEO = VIDEOS_DIR_NAME
    GIF = GIFS_DIR_NAME
    UNCATEGORIZED = None

    @property
    def dir_name(self) -> Optional[str]:
        return self.value


class DateSource(Enum):
    """Which resolution strategy produced a date."""
    METADATA = "metadata"
    FILENAME = "filename"
    FILESYSTEM = "filesystem"


def creation_time(st: os.stat_result, platform: str = sys.platform) -> Optional[float]:
    """Return the true creation time from a stat result, if the platform has one."""
    birthtime = getattr(st, "st_birthtime", None)
    if birthtime:
        return birthtime

    # Windows reports creation time as st_ctime on older interpreters
    if platform == "win32":
        return st.st_ctime

    return None


@dataclass(frozen=True)
class SourceFile:
    """Snapshot of one source directory entry taken at enumeration time."""
    path: Path
    size: int
    modified: datetime
    created: Optional[datetime] = None

    @property
    def name(self) -> str:
        return self.path.name

    @classmethod
    def from_stat(cls, path: Path, st: os.stat_result) -> "SourceFile":
        created = creation_time(st)
        return cls(
            path=path,
            size=st.st_size,
            modified=datetime.fromtimestamp(st.st_mtime),
            created=datetime.fromtimestamp(created) if created else None,
        )

    @classmethod
    def from_path(cls, path: Path) -> "SourceFile":
        return cls.from_stat(path, path.stat())

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


@dataclass(frozen=True)
class ResolvedDate:
    """The single "taken" moment chosen for a file."""
    moment: datetime
    source: DateSource

    @property
    def year(self) -> int:
        return self.moment.year

    @property
    def month(self) -> int:
        return self.moment.month

    @property
    def month_dir(self) -> str:
        """Month directory name in YYYY-MM format."""
        return f"{self.year:04d}-{self.month:02d}"

    def __str__(self) -> str:
        return f"{self.moment:%Y-%m-%d %H:%M:%S} ({self.source.value})"
