"""Progress tracking context for sorting runs."""

import threading
from typing import Optional

from rich.progress import Progress, TaskID


class ProgressContext:
    """Progress bar handle that worker threads can report to."""

    def __init__(self, progress: Optional[Progress] = None, task: Optional[TaskID] = None):
        self.progress = progress
        self.task = task
        self._lock = threading.Lock()

    @property
    def is_active(self) -> bool:
        return self.progress is not None and self.task is not None

    def complete(self, description: str) -> None:
        """Mark one file as done and show its outcome as the task description."""
        if not self.is_active:
            return
        with self._lock:
            self.progress.update(self.task, description=description, advance=1)
