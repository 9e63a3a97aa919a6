"""
Run configuration for photosorter.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Optional

import yaml

from .constants import get_logger
from .exceptions import StartupError


CONFIG_KEYS = ('ext', 'categories', 'workers')


def default_workers() -> int:
    """One worker per available CPU core."""
    return os.cpu_count() or 1


@dataclass(frozen=True)
class SortConfig:
    """Immutable settings for one sorting run, shared read-only by all workers."""
    source: Path
    dest: Path
    extensions: Optional[FrozenSet[str]] = None  # None sorts every file
    categorize: bool = True
    workers: int = field(default_factory=default_workers)
    dry_run: bool = False

    def __post_init__(self):
        if self.workers < 1:
            raise ValueError(f"workers must be at least 1, got {self.workers}")


def load_config_file(config_path: Path) -> Dict[str, Any]:
    """Load run defaults from a YAML file.

    Recognized keys are ``ext``, ``categories`` and ``workers``; other keys
    are ignored with a warning. The file is only ever read.
    """
    config_path = Path(config_path).expanduser()
    if not config_path.is_file():
        raise StartupError(f"Config file does not exist: {config_path}")

    try:
        with open(config_path, 'r') as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise StartupError(f"Could not load config {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise StartupError(f"Config {config_path} must be a mapping of settings")

    logger = get_logger()
    for key in sorted(set(data) - set(CONFIG_KEYS)):
        logger.warning(f"Ignoring unknown config key '{key}' in {config_path}")

    return {key: data[key] for key in CONFIG_KEYS if key in data}
