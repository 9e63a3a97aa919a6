"""
photosorter - Sort photos, videos and gifs into YYYY-MM folders.

Copies every file of a flat source directory into a dated folder tree,
using the EXIF capture date, a date in the file name, or the filesystem
timestamp, and stamps that date onto the copy. MIT License.
"""

__version__ = "1.0.0"


# Public API
from .cli import main
from .config import SortConfig
from .core import PhotoSorter
from .file_operations import FileOperations
from .timestamps import DateResolver

__all__ = [ "main", "SortConfig", "PhotoSorter", "FileOperations", "DateResolver" ]
