"""
Timestamp stampers that copy the resolved date onto sorted files.
"""

import os
import sys
from datetime import datetime
from pathlib import Path

from .constants import get_logger
from .exceptions import TimestampError


# Windows file API constants
FILE_WRITE_ATTRIBUTES = 0x0100
FILE_SHARE_WRITE = 0x0002
OPEN_EXISTING = 3
FILE_ATTRIBUTE_NORMAL = 0x0080

# 100ns intervals between 1601-01-01 and the Unix epoch
EPOCH_AS_FILETIME = 116444736000000000
HUNDREDS_OF_NANOSECONDS = 10_000_000


class TimestampStamper:
    """Sets a file's filesystem timestamps to a given moment."""

    def stamp(self, path: Path, moment: datetime) -> None:
        raise NotImplementedError


class PortableStamper(TimestampStamper):
    """Sets access and modification times with os.utime."""

    def stamp(self, path: Path, moment: datetime) -> None:
        try:
            ts = moment.timestamp()
            os.utime(path, (ts, ts))
        except (OSError, OverflowError, ValueError) as e:
            raise TimestampError(f"set modification time of {path.name}: {e}") from e


def to_filetime(moment: datetime) -> int:
    """Convert a datetime to a Windows FILETIME value."""
    return EPOCH_AS_FILETIME + int(moment.timestamp() * HUNDREDS_OF_NANOSECONDS)


class WindowsStamper(PortableStamper):
    """Also sets the NTFS creation time through the Win32 file API."""

    def stamp(self, path: Path, moment: datetime) -> None:
        super().stamp(path, moment)
        self.set_creation_time(path, moment)

    def set_creation_time(self, path: Path, moment: datetime) -> None:
        import ctypes
        from ctypes import wintypes

        kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)
        kernel32.CreateFileW.argtypes = [
            wintypes.LPCWSTR, wintypes.DWORD, wintypes.DWORD, wintypes.LPVOID,
            wintypes.DWORD, wintypes.DWORD, wintypes.HANDLE,
        ]
        kernel32.CreateFileW.restype = wintypes.HANDLE
        kernel32.SetFileTime.argtypes = [
            wintypes.HANDLE, ctypes.POINTER(wintypes.FILETIME),
            ctypes.POINTER(wintypes.FILETIME), ctypes.POINTER(wintypes.FILETIME),
        ]
        kernel32.SetFileTime.restype = wintypes.BOOL
        kernel32.CloseHandle.argtypes = [wintypes.HANDLE]
        kernel32.CloseHandle.restype = wintypes.BOOL

        # Dates before 1601 or beyond the platform clock have no FILETIME
        try:
            value = to_filetime(moment)
        except (OSError, OverflowError, ValueError) as e:
            raise TimestampError(f"set creation time of {path.name}: {e}") from e
        if value < 0:
            raise TimestampError(f"set creation time of {path.name}: {moment} predates 1601")

        # Open the file with just enough access to modify its times
        handle = kernel32.CreateFileW(str(path), FILE_WRITE_ATTRIBUTES, FILE_SHARE_WRITE, None,
                                      OPEN_EXISTING, FILE_ATTRIBUTE_NORMAL, None)
        if handle is None or handle == wintypes.HANDLE(-1).value:
            raise TimestampError(f"open {path.name}: {ctypes.WinError(ctypes.get_last_error())}")

        try:
            filetime = wintypes.FILETIME(value & 0xFFFFFFFF, value >> 32)

            # Null access and write times leave them untouched
            if not kernel32.SetFileTime(handle, ctypes.byref(filetime), None, None):
                raise TimestampError(
                    f"set creation time of {path.name}: {ctypes.WinError(ctypes.get_last_error())}"
                )
        finally:
            if not kernel32.CloseHandle(handle):
                get_logger("photosorter.stamping").warning(f"Could not close file handle for {path}")


def select_stamper(platform: str = sys.platform) -> TimestampStamper:
    """Pick the stamper for the running platform."""
    if platform == "win32":
        return WindowsStamper()
    return PortableStamper()
