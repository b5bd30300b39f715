"""Logging setup for yarnsite.

The file log keeps the full record of every rebuild. The console shows
only the messages, so ``serve`` prints lines like ``File added at: ...``
followed by ``\\tdone!`` as each rebuild runs.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from yarnsite.config import ConfigError
from yarnsite.watcher import WatchRoot, is_within

if TYPE_CHECKING:
    from yarnsite.config import PathConfig

ROOT_LOGGER = "yarnsite"

DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_FILE = "yarnsite.log"
DEFAULT_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_BACKUP_COUNT = 5
DEFAULT_LOG_LEVEL = "INFO"

FILE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
CONSOLE_FORMAT = "%(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _check_not_watched(log_dir: Path, paths: PathConfig) -> None:
    """Refuse a log directory whose writes would trigger source rebuilds."""
    source = WatchRoot.for_source(paths)
    if is_within(log_dir, source.path) and not source.classifier.is_ignored(log_dir):
        raise ConfigError(
            f"Log directory {log_dir} is inside the watched source {source.path}; "
            "every log line would trigger a rebuild"
        )


def _file_handler(log_path: Path, max_bytes: int, backup_count: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        log_path,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    log_dir: str | Path | None = None,
    level: str | None = None,
    *,
    paths: PathConfig | None = None,
    log_file: str = DEFAULT_LOG_FILE,
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    console: bool = True,
) -> logging.Logger:
    """Configure the ``yarnsite`` logger.

    Args:
        log_dir: Directory for log files. Falls back to YARNSITE_LOG_DIR,
                 then 'logs' under the current directory.
        level: DEBUG, INFO, WARNING or ERROR. Falls back to
               YARNSITE_LOG_LEVEL, then INFO.
        paths: Site paths being watched. When given, a log directory
               inside the watched source tree is rejected.
        log_file: Log file name.
        max_bytes: Size at which the log file rotates.
        backup_count: Rotated files to keep.
        console: Also print bare messages to stderr.

    Returns:
        The ``yarnsite`` logger.

    Raises:
        ConfigError: If the log directory would be watched for rebuilds.
    """
    log_dir = Path(log_dir or os.environ.get("YARNSITE_LOG_DIR", DEFAULT_LOG_DIR)).absolute()
    if paths is not None:
        _check_not_watched(log_dir, paths)
    log_dir.mkdir(parents=True, exist_ok=True)

    level = (level or os.environ.get("YARNSITE_LOG_LEVEL", DEFAULT_LOG_LEVEL)).upper()
    log_level = logging.getLevelName(level)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(log_level)
    # Repeated setup replaces handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    log_path = log_dir / log_file
    logger.addHandler(_file_handler(log_path, max_bytes, backup_count))

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
        logger.addHandler(console_handler)

    logger.debug("Logging to %s at level %s", log_path, level)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a component logger, e.g. ``get_logger("watcher")``."""
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
