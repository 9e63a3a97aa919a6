"""
Destination path construction for sorted files.
"""

from pathlib import Path

from .exceptions import FileOperationError
from .models import Category, ResolvedDate


def ensure_directory(directory: Path) -> None:
    """Create directory and parents if needed.

    An existing directory, including one created concurrently by another
    worker, is not an error. An existing non-directory at the path is.
    """
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except FileExistsError:
        raise FileOperationError(f"path {directory} exists but is not a directory", directory)
    except OSError as e:
        raise FileOperationError(f"create directory {directory}: {e}", directory) from e


def destination_for(out_root: Path, resolved: ResolvedDate, file_name: str,
                    category: Category, categorize: bool) -> Path:
    """Compute <out>/<YYYY-MM>/[<category>/]<file_name> without touching disk."""
    dest_dir = out_root / resolved.month_dir
    if categorize and category.dir_name:
        dest_dir = dest_dir / category.dir_name
    return dest_dir / file_name


def build_destination(out_root: Path, resolved: ResolvedDate, file_name: str,
                      category: Category, categorize: bool) -> Path:
    """Compute the destination path and create its month/category directories."""
    dest_path = destination_for(out_root, resolved, file_name, category, categorize)
    ensure_directory(dest_path.parent)
    return dest_path
