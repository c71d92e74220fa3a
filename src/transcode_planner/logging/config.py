"""Root logger setup for the tplan CLI."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from transcode_planner.logging.handlers import JSONFormatter, TextFormatter

if TYPE_CHECKING:
    from transcode_planner.config.models import LoggingConfig


def _build_formatter(log_format: str) -> logging.Formatter:
    """Return the formatter for a ``text`` or ``json`` log format."""
    if log_format.casefold() == "json":
        return JSONFormatter()
    return TextFormatter()


def _open_log_file(
    path: Path, max_bytes: int, backup_count: int
) -> RotatingFileHandler | None:
    """Open a rotating log file, or return None if it cannot be opened."""
    path = path.expanduser()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return RotatingFileHandler(
            path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
    except OSError as e:
        sys.stderr.write(f"Warning: Could not open log file {path}: {e}\n")
        return None


def configure_logging(config: LoggingConfig) -> None:
    """Replace the root logger's handlers according to ``config``.

    Logs go to a rotating file when one is configured and can be opened,
    and to stderr when no file is in use or ``include_stderr`` is set.
    """
    level = getattr(logging, config.level.upper())

    handlers: list[logging.Handler] = []
    if config.file is not None:
        file_handler = _open_log_file(
            Path(config.file), config.max_bytes, config.backup_count
        )
        if file_handler is not None:
            handlers.append(file_handler)
    if config.include_stderr or not handlers:
        handlers.append(logging.StreamHandler(sys.stderr))

    root_logger = logging.getLogger()
    for old in list(root_logger.handlers):
        root_logger.removeHandler(old)
        if isinstance(old, logging.FileHandler):
            old.close()

    formatter = _build_formatter(config.format)
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    root_logger.setLevel(level)
