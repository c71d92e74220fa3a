"""Logging setup for Transcode Planner.

Text or JSON output, an optional rotating log file, and formatters that
report which evaluator and media file a record belongs to.
"""

from transcode_planner.logging.config import configure_logging
from transcode_planner.logging.handlers import JSONFormatter, TextFormatter

__all__ = [
    "JSONFormatter",
    "TextFormatter",
    "configure_logging",
]
