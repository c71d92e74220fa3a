"""Environment variable reader with dependency injection support.

This module provides the EnvReader class for reading and parsing environment
variables with type conversion and validation. It supports dependency injection
for testing by accepting an optional env mapping.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path


class EnvReader:
    """Environment variable reader with type conversion and validation.

    Example:
        # Production usage (reads from os.environ)
        reader = EnvReader()
        level = reader.get_str("TPLAN_LOG_LEVEL", "warning")

        # Testing usage (inject custom env)
        reader = EnvReader(env={"TPLAN_LOG_LEVEL": "debug"})
        level = reader.get_str("TPLAN_LOG_LEVEL", "warning")  # Returns "debug"
    """

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        """Initialize the environment reader.

        Args:
            env: Optional mapping to use instead of os.environ.
        """
        self._env: Mapping[str, str] = env if env is not None else os.environ

    def get_str(self, var: str, default: str | None = None) -> str | None:
        """Get a string from environment variable (blank counts as unset)."""
        value = self._env.get(var)
        if value is None or not value.strip():
            return default
        return value.strip()

    def get_bool(self, var: str, default: bool | None = None) -> bool | None:
        """Get a boolean from environment variable.

        Recognizes "true", "1", "yes", "on" (case-insensitive) as true; all
        other non-empty values are false.
        """
        value = self._env.get(var)
        if value is None:
            return default
        return value.lower() in ("true", "1", "yes", "on")

    def get_path(self, var: str, default: Path | None = None) -> Path | None:
        """Get a path from environment variable, with tilde expansion."""
        value = self.get_str(var)
        if value is None:
            return default
        return Path(value).expanduser()
