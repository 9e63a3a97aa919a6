"""
Copying sorted files and stamping their resolved dates.
"""

from pathlib import Path
from typing import Optional

from .constants import get_logger
from .exceptions import FileOperationError, TimestampError
from .models import ResolvedDate, SourceFile
from .stamping import TimestampStamper, select_stamper


class FileOperations:
    """Copies source files to their destination and stamps the resolved date."""

    def __init__(self, stamper: Optional[TimestampStamper] = None, dry_run: bool = False):
        self.stamper = stamper or select_stamper()
        self.dry_run = dry_run
        self.logger = get_logger("photosorter.file_operations")

    def copy_bytes(self, source_file: SourceFile, dest: Path) -> None:
        """Read the whole source file and write it to dest, replacing any file there."""
        try:
            content = source_file.read_bytes()
        except OSError as e:
            raise FileOperationError(f"read file {source_file.name}: {e}", source_file.path) from e

        try:
            dest.write_bytes(content)
        except OSError as e:
            raise FileOperationError(f"write file {dest}: {e}", dest) from e

    def stamp(self, dest: Path, resolved: ResolvedDate) -> bool:
        """Stamp dest with the resolved date. Returns False if stamping failed."""
        try:
            self.stamper.stamp(dest, resolved.moment)
        except TimestampError as e:
            self.logger.warning(f"Could not preserve date on {dest.name}: {e}")
            return False
        return True

    def transfer(self, source_file: SourceFile, dest: Path, resolved: ResolvedDate) -> bool:
        """Copy source_file to dest and stamp it.

        Raises FileOperationError if the copy fails. Returns False when the
        copy succeeded but the timestamp could not be set; the copy is kept
        with its copy-time timestamp in that case.
        """
        if self.dry_run:
            return True

        self.copy_bytes(source_file, dest)
        return self.stamp(dest, resolved)
