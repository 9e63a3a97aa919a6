"""
Command-line interface for photosorter.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.logging import RichHandler

from .classifier import normalize_extensions, parse_extensions
from .config import SortConfig, default_workers, load_config_file
from .constants import ALL_EXTENSIONS, PROGRAM, get_console, get_logger
from .core import PhotoSorter
from .exceptions import StartupError
from .stamping import select_stamper


TRUE_VALUES = ('true', 'yes', 'y', '1', 'on')
FALSE_VALUES = ('false', 'no', 'n', '0', 'off')


def parse_bool(value: Any) -> bool:
    """Convert a flag or config value such as 'false' or 'yes' to a bool."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(f"Invalid boolean value: {value}")


def parse_workers(value: Any) -> int:
    """Convert a worker count to a positive int."""
    try:
        workers = int(value)
    except (TypeError, ValueError):
        raise argparse.ArgumentTypeError(f"Invalid worker count: {value}")
    if workers < 1:
        raise argparse.ArgumentTypeError(f"Worker count must be at least 1: {value}")
    return workers


def setup_logging(console: Console, verbose: bool = False) -> logging.Logger:
    """Route the program logger through a rich console handler."""
    logger = get_logger()
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    console_handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
    console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(console_handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    logger.propagate = False

    # exifread reports every file without an EXIF header
    logging.getLogger("exifread").setLevel(logging.DEBUG if verbose else logging.ERROR)
    return logger


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog=PROGRAM,
        description="Sort photos, videos and gifs into YYYY-MM folders by the date they were taken",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  {PROGRAM} --source ~/Downloads/Camera --out ~/Pictures/Sorted
  {PROGRAM} -s ./dump -o ./sorted --ext .jpg,.heic --categories=false
  {PROGRAM} -s ./dump -o ./sorted --dry-run
        """
    )

    parser.add_argument(
        "--source", "-s", required=True,
        help="Source directory with the files to sort (not searched recursively)"
    )
    parser.add_argument(
        "--out", "-o", required=True,
        help="Output directory, created if missing"
    )
    parser.add_argument(
        "--ext", default=None,
        help="File extensions to sort, comma separated: '.jpg,.png'. "
             f"Leave empty or '{ALL_EXTENSIONS}' to sort all files (default: {ALL_EXTENSIONS})"
    )
    parser.add_argument(
        "--categories", type=parse_bool, nargs="?", const=True, default=None, metavar="BOOL",
        help="Sort files into pictures/videos/gifs subfolders (default: true)"
    )
    parser.add_argument(
        "--no-categories", dest="categories", action="store_false", default=None,
        help="Same as --categories=false"
    )
    parser.add_argument(
        "--workers", "-j", type=parse_workers, default=None, metavar="N",
        help=f"Number of parallel workers (default: CPU count, {default_workers()})"
    )
    parser.add_argument(
        "--dry-run", "-n", action="store_true",
        help="Show where files would go without copying anything"
    )
    parser.add_argument(
        "--config", "-c", type=Path, default=None, metavar="FILE",
        help="YAML file with defaults for ext, categories and workers"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable verbose logging"
    )
    parser.add_argument(
        "--version", "-V", action="version",
        version=f"%(prog)s {_version()}",
        help=f"Display the version number of {PROGRAM} and exit"
    )

    return parser


def _version() -> str:
    from . import __version__
    return __version__


def build_config(args: argparse.Namespace, defaults: Dict[str, Any]) -> SortConfig:
    """Merge parsed flags over config file defaults into a SortConfig."""
    ext = args.ext if args.ext is not None else defaults.get('ext', ALL_EXTENSIONS)
    if isinstance(ext, (list, tuple)):
        extensions = normalize_extensions(str(item) for item in ext)
    else:
        extensions = parse_extensions(str(ext))

    try:
        categorize = args.categories if args.categories is not None else \
            parse_bool(defaults.get('categories', True))
        workers = args.workers if args.workers is not None else \
            parse_workers(defaults.get('workers', default_workers()))
    except argparse.ArgumentTypeError as e:
        raise StartupError(f"Invalid config value: {e}") from e

    return SortConfig(
        source=Path(args.source).expanduser().resolve(),
        dest=Path(args.out).expanduser().resolve(),
        extensions=extensions,
        categorize=categorize,
        workers=workers,
        dry_run=args.dry_run,
    )


def prepare_output_dir(dest: Path, dry_run: bool) -> None:
    """Create the output root, failing if it cannot be a directory."""
    if dest.exists() and not dest.is_dir():
        raise StartupError(f"Output path exists but is not a directory: {dest}")
    if dry_run:
        return
    try:
        dest.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StartupError(f"Failed to create output directory {dest}: {e}") from e


def show_processing_plan(config: SortConfig, console: Console) -> None:
    """Display the processing plan before execution."""
    mode = "DRY RUN" if config.dry_run else "COPY"
    extensions = ", ".join(sorted(config.extensions)) if config.extensions else "all files"

    console.print("\n[bold]Processing Plan:[/bold]")
    console.print(f"  Source:          [blue]{config.source}[/blue]")
    console.print(f"  Destination:     [blue]{config.dest}[/blue]")
    console.print(f"  Processing Mode: [cyan]{mode}[/cyan]")
    console.print(f"  Extensions:      [cyan]{extensions}[/cyan]")
    console.print(f"  Categories:      [cyan]{'Yes' if config.categorize else 'No'}[/cyan]")
    console.print(f"  Workers:         [cyan]{config.workers}[/cyan]")
    console.print()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:])
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    console = get_console()
    setup_logging(console, verbose=args.verbose)

    try:
        defaults = load_config_file(args.config) if args.config else {}
        config = build_config(args, defaults)
    except StartupError as e:
        print(f"Error: {e}")
        return 1

    # Validate paths
    if not config.source.exists():
        print(f"Error: Source directory does not exist: {config.source}")
        return 1

    if not config.source.is_dir():
        print(f"Error: Source is not a directory: {config.source}")
        return 1

    try:
        prepare_output_dir(config.dest, config.dry_run)
    except StartupError as e:
        print(f"Error: {e}")
        return 1

    show_processing_plan(config, console)

    sorter = PhotoSorter(config, stamper=select_stamper())
    try:
        stats = sorter.run()
    except StartupError as e:
        print(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        console.print("\n[red]Operation cancelled by user[/red]")
        return 1

    sorter.print_summary()

    failed = stats.get_failed()
    if stats.has_errors():
        console.print(f"\n[green]✓ Sorting completed[/green] [yellow]({failed} files failed, see log)[/yellow]")
    else:
        console.print("\n[green]✓ Sorting completed successfully![/green]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
