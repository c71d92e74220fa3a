"""CLI module for Transcode Planner."""

import logging
from pathlib import Path

import click

from transcode_planner.cli.exit_codes import ExitCode
from transcode_planner.cli.output import error_exit

logger = logging.getLogger(__name__)


def _load_config(config_path: Path | None):
    """Load configuration, exiting with CONFIG_ERROR on invalid values."""
    from transcode_planner.config import get_config

    try:
        return get_config(config_path=config_path)
    except (TypeError, ValueError) as e:
        error_exit(f"Invalid configuration: {e}", ExitCode.CONFIG_ERROR)


@click.group()
@click.version_option(package_name="transcode-planner")
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: warning).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Config file (default: ~/.tplan/config.toml).",
)
@click.pass_context
def main(
    ctx: click.Context,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
    config_path: Path | None,
) -> None:
    """Transcode Planner - Plan audio and video transcodes from ffprobe data."""
    from transcode_planner.config import configure_logging_from_cli

    ctx.ensure_object(dict)

    # Preserve a config passed in by tests
    if "config" not in ctx.obj:
        ctx.obj["config"] = _load_config(config_path)

    configure_logging_from_cli(
        ctx.obj["config"].logging,
        level=log_level,
        file=log_file,
        format="json" if log_json else None,
    )
    logger.debug("tplan starting: subcommand=%s", ctx.invoked_subcommand)


# Defer import to avoid circular dependency
def _register_commands():
    from transcode_planner.cli.plan import plan_command
    from transcode_planner.cli.policy import policy_group

    main.add_command(plan_command)
    main.add_command(policy_group)


_register_commands()
