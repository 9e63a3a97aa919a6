"""
Statistics tracking for sorting runs.
"""

import threading
from typing import Dict

from .models import Category


class StatsManager:
    """Thread-safe counters shared by all sorting workers."""

    def __init__(self):
        self._lock = threading.Lock()
        self._stats = {
            'pictures': 0,
            'videos': 0,
            'gifs': 0,
            'other': 0,
            'skipped': 0,
            'failed': 0,
            'unstamped': 0,
            'total_size': 0,
        }

    def _add(self, key: str, amount: int = 1) -> None:
        with self._lock:
            self._stats[key] += amount

    def record_sorted_file(self, category: Category, file_size: int, stamped: bool = True) -> None:
        """Record a file that reached its destination."""
        key = category.dir_name or 'other'
        with self._lock:
            self._stats[key] += 1
            self._stats['total_size'] += file_size
            if not stamped:
                self._stats['unstamped'] += 1

    def increment_skipped(self, count: int = 1) -> None:
        """Count files left out by the extension filter."""
        self._add('skipped', count)

    def increment_failed(self) -> None:
        """Count a file whose pipeline raised an error."""
        self._add('failed')

    def get_stats(self) -> Dict[str, int]:
        """Get a copy of current statistics."""
        with self._lock:
            return self._stats.copy()

    def get_sorted(self) -> int:
        """Total count of files copied to the destination."""
        stats = self.get_stats()
        return stats['pictures'] + stats['videos'] + stats['gifs'] + stats['other']

    def get_failed(self) -> int:
        return self.get_stats()['failed']

    def get_skipped(self) -> int:
        return self.get_stats()['skipped']

    def get_unstamped(self) -> int:
        return self.get_stats()['unstamped']

    def get_total_size_mb(self) -> float:
        return self.get_stats()['total_size'] / (1024 * 1024)

    def has_errors(self) -> bool:
        """Check if any file failed to sort."""
        return self.get_failed() > 0
