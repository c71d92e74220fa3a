"""CLI plan command for Transcode Planner.

Evaluates an ffprobe JSON document against a policy and prints the
resulting plans. Nothing is executed: the output describes what a
transcoder would be asked to do.
"""

import json
import logging
from pathlib import Path

import click

from transcode_planner.cli.exit_codes import ExitCode
from transcode_planner.cli.output import error_exit
from transcode_planner.cli.plan_formatter import (
    format_human,
    results_to_dict,
    results_to_plugin_responses,
)
from transcode_planner.config import PlannerConfig
from transcode_planner.domain import FileMedium
from transcode_planner.introspector import ProbeDataError, load_probe_file
from transcode_planner.policy import (
    PolicyValidationError,
    evaluate_file,
    load_policy,
)

logger = logging.getLogger(__name__)


@click.command("plan")
@click.argument("probe_json", type=click.Path(exists=False, path_type=Path))
@click.option(
    "--policy",
    "-p",
    "policy_path",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Policy YAML file (default: [defaults] policy from the config file).",
)
@click.option(
    "--resolution",
    default=None,
    help="Resolution label override (e.g. 1080p, 4KUHD).",
)
@click.option(
    "--medium",
    type=click.Choice([m.value for m in FileMedium]),
    default=None,
    help="File medium override.",
)
@click.option(
    "--container",
    default=None,
    help="Container extension override (e.g. mkv).",
)
@click.option(
    "--media-path",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Path of the probed media file (default: format.filename).",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["human", "json", "plugin"]),
    default=None,
    help="Output format (default: human).",
)
@click.pass_context
def plan_command(
    ctx: click.Context,
    probe_json: Path,
    policy_path: Path | None,
    resolution: str | None,
    medium: str | None,
    container: str | None,
    media_path: Path | None,
    output_format: str | None,
) -> None:
    """Plan transcodes for a probed media file.

    PROBE_JSON is the output of
    `ffprobe -show_streams -show_format -of json FILE`.

    Exit codes:
        0: Plans printed
        10: Policy validation failed
        20: Probe file not found
        23: Probe file is not valid ffprobe JSON

    Examples:

        # Evaluate a probe against a policy
        tplan plan movie.json --policy default.yaml

        # Emit plugin host responses
        tplan plan movie.json -p default.yaml --format plugin
    """
    config: PlannerConfig = ctx.obj["config"]
    output_format = output_format or config.defaults.output_format
    json_output = output_format != "human"

    policy_path = policy_path or config.defaults.policy
    if policy_path is None:
        error_exit(
            "No policy given. Pass --policy or set [defaults] policy in the "
            "config file.",
            ExitCode.POLICY_VALIDATION_ERROR,
            json_output,
        )

    try:
        policy = load_policy(policy_path)
    except FileNotFoundError as e:
        error_exit(str(e), ExitCode.POLICY_VALIDATION_ERROR, json_output)
    except PolicyValidationError as e:
        error_exit(e.message, ExitCode.POLICY_VALIDATION_ERROR, json_output)
    except OSError as e:
        error_exit(f"Cannot read policy: {e}", ExitCode.GENERAL_ERROR, json_output)

    try:
        media = load_probe_file(
            probe_json,
            media_path=media_path,
            video_resolution=resolution,
            file_medium=FileMedium(medium) if medium else None,
            container=container,
        )
    except FileNotFoundError as e:
        error_exit(str(e), ExitCode.TARGET_NOT_FOUND, json_output)
    except ProbeDataError as e:
        error_exit(str(e), ExitCode.PROBE_DATA_INVALID, json_output)
    except OSError as e:
        error_exit(
            f"Cannot read probe file: {e}", ExitCode.GENERAL_ERROR, json_output
        )

    logger.debug(
        "Planning with policy %s (%d streams)",
        policy_path,
        len(media.streams),
        extra={"media_path": str(media.path or probe_json)},
    )
    results = evaluate_file(media, policy)

    if output_format == "json":
        click.echo(json.dumps(results_to_dict(media, results), indent=2))
    elif output_format == "plugin":
        responses = results_to_plugin_responses(results)
        click.echo(json.dumps(responses, indent=2, ensure_ascii=False))
    else:
        click.echo(format_human(media, results))
