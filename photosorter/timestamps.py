"""Resolve the "taken" date of a source file.

Strategies are tried in order and the first one that yields a date wins:

1. the capture date embedded in the file's EXIF block,
2. a date encoded in the file name (e.g. ``PXL_20220203_100000.jpg``),
3. the filesystem creation time where the platform records one, else the
   modification time.

The last strategy always produces a value, so resolution never fails.
"""

import re
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Tuple

import exifread

from .constants import EXIF_DATE_TAGS, FILENAME_DATE_FORMATS, METADATA_EXTENSIONS, get_logger
from .models import DateSource, ResolvedDate, SourceFile


logger = get_logger("photosorter.timestamps")

# ISO 8601 (dash dates, T separator) or raw EXIF (colon dates, space separator)
EXIF_DATETIME_PATTERN = re.compile(
    r'(\d{4}[-:]\d{2}[-:]\d{2})[T ](\d{2}:\d{2}:\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:?\d{2})?'
)

FILENAME_DATE_PATTERNS = tuple(
    (re.compile(pattern), date_format) for pattern, date_format in FILENAME_DATE_FORMATS
)


def parse_exif_datetime(timestamp_str: str) -> Optional[datetime]:
    """Parse an EXIF or ISO 8601 date-time string into a naive datetime.

    Handles both raw EXIF (2022:01:05 10:00:00.123) and ISO 8601
    (2022-01-05T10:00:00+01:00) forms. The wall clock time is kept as
    written; any UTC offset is dropped. Zeroed or out-of-range values
    such as ``0000:00:00 00:00:00`` return None.
    """
    match = EXIF_DATETIME_PATTERN.match(timestamp_str.strip())
    if not match:
        return None

    # Normalize colon-separated dates (EXIF format) to dash-separated
    date_part = match.group(1).replace(':', '-')
    time_part = match.group(2)
    fractional_part = match.group(3)

    datetime_str = f"{date_part} {time_part}"
    try:
        if fractional_part:
            microseconds = fractional_part.ljust(6, '0')[:6]
            return datetime.strptime(f"{datetime_str}.{microseconds}", "%Y-%m-%d %H:%M:%S.%f")
        return datetime.strptime(datetime_str, "%Y-%m-%d %H:%M:%S")
    except ValueError:
        return None


def has_metadata_support(path: Path) -> bool:
    """Check whether the file format can carry an EXIF capture date."""
    return path.suffix.lower() in METADATA_EXTENSIONS


def read_metadata_date(path: Path) -> Optional[datetime]:
    """Get the capture date embedded in an image file, if any."""
    if not has_metadata_support(path):
        return None

    try:
        with open(path, 'rb') as f:
            tags = exifread.process_file(f, details=False)
    except Exception as e:
        logger.debug(f"Could not read EXIF data from {path}: {e}")
        return None

    # Parse date tags in priority order
    for tag in EXIF_DATE_TAGS:
        if tag not in tags:
            continue

        taken = parse_exif_datetime(str(tags[tag]))
        if taken:
            logger.debug(f"EXIF date: {path.name}[{tag}] = {taken}")
            return taken

    return None


def parse_filename_date(file_name: str) -> Optional[datetime]:
    """Parse a date out of a file name using the known camera formats.

    Only the stem is considered, so ``20230615_143000.jpg`` matches
    ``%Y%m%d_%H%M%S``. Fields are fixed width, so ``2023-6-5`` is not a
    date. The first format that matches the whole stem wins.
    """
    stem = Path(file_name).stem
    for pattern, date_format in FILENAME_DATE_PATTERNS:
        if not pattern.fullmatch(stem):
            continue
        try:
            taken = datetime.strptime(stem, date_format)
        except ValueError:
            continue

        logger.debug(f"Parsed date {taken} from file name {file_name}")
        return taken

    return None


def filesystem_date(source_file: SourceFile) -> datetime:
    """Creation time if the filesystem records one, else modification time."""
    if source_file.created is not None:
        return source_file.created
    return source_file.modified


class DateResolver:
    """Chooses the best available "taken" date for a source file."""

    def __init__(self):
        self.strategies: Tuple[Tuple[DateSource, Callable[[SourceFile], Optional[datetime]]], ...] = (
            (DateSource.METADATA, lambda source_file: read_metadata_date(source_file.path)),
            (DateSource.FILENAME, lambda source_file: parse_filename_date(source_file.name)),
        )

    def resolve(self, source_file: SourceFile) -> ResolvedDate:
        """Resolve a date for the file. Never raises."""
        for date_source, strategy in self.strategies:
            moment = strategy(source_file)
            if moment is not None:
                return ResolvedDate(moment=moment, source=date_source)

        # Most likely the time the file was copied to this disk, not when it was taken
        return ResolvedDate(moment=filesystem_date(source_file), source=DateSource.FILESYSTEM)
