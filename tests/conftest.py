"""
pytest configuration and fixtures for photosorter tests.
"""

import io
import logging
import os
import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import pytest
from PIL import Image

# EXIF IFD0 DateTime tag
EXIF_DATETIME_TAG = 0x0132


@dataclass
class CliResult:
    """Result from running CLI command."""
    exit_code: int
    output: str
    error: str


def set_mtime(path: Path, moment: datetime) -> None:
    ts = moment.timestamp()
    os.utime(path, (ts, ts))


@pytest.fixture
def cli_runner():
    """Create a CLI runner that captures output."""

    def run_cli(*args):
        """Run photosorter CLI with given arguments.

        Returns:
            CliResult with exit_code, output, and error
        """
        from photosorter.cli import main
        from photosorter.constants import get_logger

        old_stdout = sys.stdout
        old_stderr = sys.stderr
        stdout = io.StringIO()
        stderr = io.StringIO()

        try:
            sys.stdout = stdout
            sys.stderr = stderr

            exit_code = main([str(a) for a in args])

            return CliResult(
                exit_code=exit_code,
                output=stdout.getvalue(),
                error=stderr.getvalue()
            )
        except SystemExit as e:
            # argparse exits on usage errors, --help and --version
            return CliResult(
                exit_code=e.code if e.code is not None else 0,
                output=stdout.getvalue(),
                error=stderr.getvalue()
            )
        finally:
            sys.stdout = old_stdout
            sys.stderr = old_stderr

            # Hand the program logger back to pytest's log capture
            logger = get_logger()
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
            logger.setLevel(logging.NOTSET)
            logger.propagate = True

    return run_cli


@pytest.fixture
def make_jpeg():
    """Helper to write a small real JPEG, optionally with an EXIF date."""

    def write_jpeg(path: Path, taken: Optional[datetime] = None,
                   mtime: Optional[datetime] = None) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        image = Image.new("RGB", (16, 16), (180, 90, 40))
        if taken is not None:
            exif = Image.Exif()
            exif[EXIF_DATETIME_TAG] = taken.strftime("%Y:%m:%d %H:%M:%S")
            image.save(path, "JPEG", exif=exif)
        else:
            image.save(path, "JPEG")

        if mtime is not None:
            set_mtime(path, mtime)
        return path

    return write_jpeg


@pytest.fixture
def create_test_files(tmp_path):
    """Helper to create test files with specific properties."""

    def create_files(file_specs: List[dict], directory: str = "source") -> Path:
        """Create test files based on specifications.

        Args:
            file_specs: List of dicts with keys:
                - name: filename
                - content: file content (optional)
                - mtime: modification time as datetime (optional)

        Returns:
            Path to directory containing created files
        """
        test_dir = tmp_path / directory
        test_dir.mkdir(exist_ok=True)

        for spec in file_specs:
            file_path = test_dir / spec['name']
            file_path.parent.mkdir(parents=True, exist_ok=True)

            content = spec.get('content', b'test file content')
            if isinstance(content, str):
                file_path.write_text(content)
            else:
                file_path.write_bytes(content)

            if 'mtime' in spec:
                set_mtime(file_path, spec['mtime'])

        return test_dir

    return create_files


@pytest.fixture
def assert_file_structure():
    """Helper to assert expected file structure."""

    def check_structure(base_path: Path, expected_structure: dict):
        """Assert that directory has expected structure.

        Args:
            base_path: Root directory to check
            expected_structure: Dict describing expected structure
                e.g., {
                    "2022-01": {
                        "pictures": ["IMG_001.jpg"],
                    },
                    "2021-12": ["note.txt"],
                }
        """
        def check_level(path: Path, structure: dict):
            for name, value in structure.items():
                item_path = path / name
                assert item_path.is_dir(), f"Expected {item_path} to be a directory"

                if isinstance(value, dict):
                    check_level(item_path, value)
                elif isinstance(value, list):
                    actual_files = sorted([f.name for f in item_path.iterdir() if f.is_file()])
                    expected_files = sorted(value)
                    assert actual_files == expected_files, \
                        f"Expected files {expected_files} in {item_path}, got {actual_files}"

        check_level(base_path, expected_structure)

    return check_structure
