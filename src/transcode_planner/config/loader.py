"""Configuration loader with precedence handling.

Configuration is loaded with the following precedence (highest to lowest):
1. CLI arguments (applied by the caller, see logging_factory)
2. Environment variables (TPLAN_*)
3. Config file (~/.tplan/config.toml)
4. Default values

Environment variables:
- TPLAN_CONFIG_PATH: Path to config file (overrides default location)
- TPLAN_LOG_LEVEL: Log level (debug, info, warning, error)
- TPLAN_LOG_FILE: Log file path
- TPLAN_LOG_FORMAT: Log format (text, json)
- TPLAN_DEFAULT_POLICY: Policy file used when --policy is omitted
"""

import logging
import tomllib
from pathlib import Path
from typing import Any

from transcode_planner.config.env import EnvReader
from transcode_planner.config.models import (
    DefaultsConfig,
    LoggingConfig,
    PlannerConfig,
)

logger = logging.getLogger(__name__)

# Default config location
DEFAULT_CONFIG_DIR = Path.home() / ".tplan"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.toml"


def get_default_config_path(env: EnvReader | None = None) -> Path:
    """Get the default config file path.

    Can be overridden by the TPLAN_CONFIG_PATH environment variable.
    """
    reader = env or EnvReader()
    return reader.get_path("TPLAN_CONFIG_PATH") or DEFAULT_CONFIG_FILE


def load_config_file(path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        path: Path to config file. If None, uses default location.

    Returns:
        Parsed configuration dict. Empty dict if the file doesn't exist or
        cannot be parsed.
    """
    if path is None:
        path = get_default_config_path()

    if not path.exists():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        config = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Failed to load config file %s: %s", path, e)
        return {}

    logger.debug("Loaded config from %s", path)
    return config


def _optional_path(value: Any) -> Path | None:
    if not value:
        return None
    return Path(str(value)).expanduser()


def get_config(
    config_path: Path | None = None,
    env: EnvReader | None = None,
) -> PlannerConfig:
    """Get configuration with full precedence handling.

    Args:
        config_path: Path to config file (overrides TPLAN_CONFIG_PATH).
        env: Environment reader (defaults to os.environ).

    Returns:
        PlannerConfig with merged configuration.

    Raises:
        ValueError: If a configured value is invalid.
    """
    reader = env or EnvReader()
    file_config = load_config_file(config_path or get_default_config_path(reader))

    logging_file = file_config.get("logging", {})
    logging_config = LoggingConfig(
        level=reader.get_str("TPLAN_LOG_LEVEL", logging_file.get("level", "warning")),
        file=(
            reader.get_path("TPLAN_LOG_FILE")
            or _optional_path(logging_file.get("file"))
        ),
        format=reader.get_str("TPLAN_LOG_FORMAT", logging_file.get("format", "text")),
        include_stderr=reader.get_bool(
            "TPLAN_LOG_INCLUDE_STDERR", logging_file.get("include_stderr", False)
        ),
        max_bytes=logging_file.get("max_bytes", 10_485_760),
        backup_count=logging_file.get("backup_count", 5),
    )

    defaults_file = file_config.get("defaults", {})
    defaults = DefaultsConfig(
        policy=(
            reader.get_path("TPLAN_DEFAULT_POLICY")
            or _optional_path(defaults_file.get("policy"))
        ),
        output_format=defaults_file.get("output_format", "human"),
    )

    return PlannerConfig(logging=logging_config, defaults=defaults)
