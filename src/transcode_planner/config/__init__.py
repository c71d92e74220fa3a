"""Configuration management for Transcode Planner.

This module provides configuration loading with precedence handling:
1. CLI flags (highest priority)
2. Environment variables (TPLAN_*)
3. Config file (~/.tplan/config.toml)
4. Default values (lowest priority)
"""

from transcode_planner.config.env import EnvReader
from transcode_planner.config.loader import (
    get_config,
    get_default_config_path,
    load_config_file,
)
from transcode_planner.config.logging_factory import (
    build_logging_config,
    configure_logging_from_cli,
)
from transcode_planner.config.models import (
    DefaultsConfig,
    LoggingConfig,
    PlannerConfig,
)

__all__ = [
    # Models
    "DefaultsConfig",
    "LoggingConfig",
    "PlannerConfig",
    # Loader
    "EnvReader",
    "get_config",
    "get_default_config_path",
    "load_config_file",
    # Logging factory
    "build_logging_config",
    "configure_logging_from_cli",
]
