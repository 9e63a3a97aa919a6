"""
File extension constants, shared console and logger for photo sorting.
"""

import logging
from typing import Optional

from rich.console import Console


PROGRAM = "photosorter"

# Category directory names
PICTURES_DIR_NAME = "pictures"
VIDEOS_DIR_NAME = "videos"
GIFS_DIR_NAME = "gifs"

# File extension constants
PICTURE_EXTENSIONS = (".jpg", ".png", ".heic", ".jpeg", ".dng", ".arw")
VIDEO_EXTENSIONS = (".mp4", ".mov", ".webp")
GIF_EXTENSIONS = (".gif",)

# Formats exifread can pull an embedded capture date from
METADATA_EXTENSIONS = (
    ".jpg", ".jpeg", ".png", ".heic", ".dng", ".arw", ".tif", ".tiff", ".webp",
)

# EXIF tags holding the capture date, in priority order
EXIF_DATE_TAGS = (
    "EXIF DateTimeOriginal",
    "EXIF DateTimeDigitized",
    "Image DateTime",
)

# Filename date formats, tried against the file stem in this order. The stem
# must match the fixed-width pattern before its strptime format is applied.
FILENAME_DATE_FORMATS = (
    (r"\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}", "%Y-%m-%d_%H-%M-%S"),
    (r"\d{4}-\d{2}-\d{2}", "%Y-%m-%d"),
    (r"\d{8}", "%Y%m%d"),
    (r"\d{8}_\d{6}", "%Y%m%d_%H%M%S"),
    (r"PXL_\d{8}_\d{6}", "PXL_%Y%m%d_%H%M%S"),
    (r"PXL_\d{8}_\d{7,12}", "PXL_%Y%m%d_%H%M%S%f"),
    (r"IMG_\d{8}_\d{6}", "IMG_%Y%m%d_%H%M%S"),
    (r"VID_\d{8}_\d{6}", "VID_%Y%m%d_%H%M%S"),
)

# Wildcard accepted by --ext
ALL_EXTENSIONS = "*"

_console: Optional[Console] = None


def get_console() -> Console:
    """Return the console shared by logging, progress and summary output."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the program logger, or a child logger when a name is given."""
    return logging.getLogger(name or PROGRAM)
