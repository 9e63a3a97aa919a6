"""
Core photo sorting functionality.
"""

import os
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional

from rich.progress import Progress
from rich.table import Table

from .classifier import classify, is_allowed
from .config import SortConfig
from .constants import get_console, get_logger
from .exceptions import SortError, StartupError
from .file_operations import FileOperations
from .models import SourceFile
from .paths import build_destination, destination_for
from .progress import ProgressContext
from .stamping import TimestampStamper
from .stats import StatsManager
from .timestamps import DateResolver


class PhotoSorter:
    """Sorts the files of a source directory into dated output folders."""

    def __init__(self, config: SortConfig, stamper: Optional[TimestampStamper] = None):
        self.config = config
        self.console = get_console()
        self.logger = get_logger()
        self.stats_manager = StatsManager()
        self.resolver = DateResolver()
        self.file_ops = FileOperations(stamper=stamper, dry_run=config.dry_run)

    def find_source_files(self) -> List[SourceFile]:
        """Snapshot the direct file entries of the source directory that pass the filter."""
        source_files = []
        try:
            with os.scandir(self.config.source) as listing:
                entries = sorted(listing, key=lambda entry: entry.name)
        except OSError as e:
            raise StartupError(f"read source dir {self.config.source}: {e}") from e

        for entry in entries:
            try:
                if entry.is_dir():
                    continue
                if not is_allowed(entry.name, self.config.extensions):
                    self.logger.debug(f"{entry.name} does not match allowed extensions, skipping")
                    self.stats_manager.increment_skipped()
                    continue
                source_files.append(SourceFile.from_stat(Path(entry.path), entry.stat()))
            except OSError as e:
                self.logger.error(f"Could not get file info for {entry.name}: {e}")
                self.stats_manager.increment_failed()

        return source_files

    def run(self) -> StatsManager:
        """Sort every file in the source directory and return the run statistics."""
        mode = "DRY RUN" if self.config.dry_run else "COPY"
        self.logger.info(f"Starting sort: {self.config.source} -> {self.config.dest} ({mode})")

        files = self.find_source_files()
        if files:
            self.process_files(files)
        else:
            self.logger.info("No files to sort in source directory")

        return self.stats_manager

    def process_files(self, files: List[SourceFile],
                      progress_ctx: Optional[ProgressContext] = None) -> None:
        """Process all files on a pool of workers, blocking until every file is done."""
        self.logger.info(f"Sorting {len(files)} files with {self.config.workers} workers")

        # If no progress context provided, create our own
        if progress_ctx is None:
            with Progress(console=self.console, transient=True) as progress:
                task = progress.add_task("Sorting files...", total=len(files))
                self._process_files_with_progress(files, ProgressContext(progress, task))
        else:
            self._process_files_with_progress(files, progress_ctx)

    def _process_files_with_progress(self, files: List[SourceFile],
                                     progress_ctx: ProgressContext) -> None:
        with ThreadPoolExecutor(max_workers=self.config.workers,
                                thread_name_prefix="sorter") as executor:
            for source_file in files:
                executor.submit(self._process_guarded, source_file, progress_ctx)

    def _process_guarded(self, source_file: SourceFile, progress_ctx: ProgressContext) -> None:
        """Run one file's pipeline, containing its errors to that file."""
        try:
            self._process_single_file(source_file)
        except (SortError, OSError) as e:
            self.logger.error(f"Failed to sort {source_file.name}: {e}")
            self.stats_manager.increment_failed()
            progress_ctx.complete(f"Failed: {source_file.name}")
        except Exception:
            self.logger.exception(f"Unexpected error sorting {source_file.name}")
            self.stats_manager.increment_failed()
            progress_ctx.complete(f"Failed: {source_file.name}")
        else:
            progress_ctx.complete(f"Sorted: {source_file.name}")

    def _process_single_file(self, source_file: SourceFile) -> None:
        """Resolve, place and copy a single file."""
        # Resolved once, used for both the path and the stamp
        resolved = self.resolver.resolve(source_file)
        category = classify(source_file.name)

        if self.config.dry_run:
            dest_path = destination_for(self.config.dest, resolved, source_file.name,
                                        category, self.config.categorize)
            self.logger.info(f"[dry run] {source_file.name} -> {dest_path} [{resolved}]")
            self.stats_manager.record_sorted_file(category, source_file.size)
            return

        dest_path = build_destination(self.config.dest, resolved, source_file.name,
                                      category, self.config.categorize)
        stamped = self.file_ops.transfer(source_file, dest_path, resolved)
        self.stats_manager.record_sorted_file(category, source_file.size, stamped=stamped)
        self.logger.info(f"{source_file.name} -> {dest_path} [{resolved}]")

    def print_summary(self) -> None:
        """Print processing summary."""
        stats = self.stats_manager.get_stats()

        table = Table(title="Sorting Summary")
        table.add_column("Category", style="cyan")
        table.add_column("Count", style="green")

        table.add_row("Pictures", str(stats['pictures']))
        table.add_row("Videos", str(stats['videos']))
        table.add_row("Gifs", str(stats['gifs']))
        table.add_row("Other", str(stats['other']))
        table.add_row("Skipped", str(stats['skipped']))
        table.add_row("Failed", str(stats['failed']))
        table.add_row("Date Not Preserved", str(stats['unstamped']))

        # Format total size
        size_mb = self.stats_manager.get_total_size_mb()
        if size_mb > 1024:
            size_str = f"{size_mb/1024:.1f} GB"
        else:
            size_str = f"{size_mb:.1f} MB"
        table.add_row("Total Size", size_str)

        self.console.print(table)
