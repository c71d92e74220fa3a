"""FFmpeg argument serialization for transcode plans.

This module is the only place where plan directives become strings. It
converts the typed directives of a TranscodePlan into:

- ffmpeg argument tokens (input-side and output-side)
- a complete ffmpeg command line (built, never executed)
- the preset string and response mapping expected by plugin hosts
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from transcode_planner.domain import StreamType
from transcode_planner.policy.types import (
    AssignBitrate,
    AssignCodec,
    Directive,
    DisableStreams,
    MapStream,
    SetOption,
    TranscodePlan,
)

# Host preset separator between input and output arguments
IO_SEPARATOR = "<io>"

ACCEPT_MARK = "☑"  # ballot box with check
REJECT_MARK = "☒"  # ballot box with x


def _type_letter(stream_type: StreamType) -> str:
    letter = stream_type.specifier
    if letter is None:
        raise ValueError(f"Stream type {stream_type.value!r} has no ffmpeg specifier")
    return letter


def stream_specifier(directive: MapStream) -> str:
    """Build the ``-map`` argument for a MapStream directive.

    Examples:
        MapStream() -> "0"
        MapStream(stream_index=3) -> "0:3"
        MapStream(stream_type=StreamType.SUBTITLE, optional=True) -> "0:s?"
        MapStream(stream_type=StreamType.VIDEO, type_index=0) -> "0:v:0"
    """
    spec = str(directive.input_index)
    if directive.stream_index is not None:
        spec += f":{directive.stream_index}"
    elif directive.stream_type is not None:
        spec += f":{_type_letter(directive.stream_type)}"
        if directive.type_index is not None:
            spec += f":{directive.type_index}"
    if directive.optional:
        spec += "?"
    return spec


def _per_stream_flag(flag: str, stream_type: StreamType, type_index: int | None) -> str:
    option = f"-{flag}:{_type_letter(stream_type)}"
    if type_index is not None:
        option += f":{type_index}"
    return option


def directive_to_args(directive: Directive) -> list[str]:
    """Convert a single output directive to ffmpeg tokens."""
    if isinstance(directive, MapStream):
        return ["-map", stream_specifier(directive)]
    if isinstance(directive, AssignCodec):
        return [
            _per_stream_flag("c", directive.stream_type, directive.type_index),
            directive.codec,
        ]
    if isinstance(directive, AssignBitrate):
        return [
            _per_stream_flag("b", directive.stream_type, directive.type_index),
            directive.bitrate,
        ]
    if isinstance(directive, DisableStreams):
        return [f"-{_type_letter(directive.stream_type)}n"]
    if isinstance(directive, SetOption):
        args = [f"-{directive.name}"]
        if directive.value is not None:
            args.append(directive.value)
        return args
    raise TypeError(f"Unsupported directive: {directive!r}")


def build_input_args(plan: TranscodePlan) -> list[str]:
    """Build decoder-side arguments (placed before ``-i``)."""
    args: list[str] = []
    for option in plan.input_directives:
        args.append(f"-{option.name}")
        if option.value is not None:
            args.append(option.value)
    return args


def build_output_args(plan: TranscodePlan) -> list[str]:
    """Build output-side arguments in directive order."""
    args: list[str] = []
    for directive in plan.directives:
        args.extend(directive_to_args(directive))
    return args


def build_ffmpeg_command(
    plan: TranscodePlan,
    input_path: Path,
    output_path: Path,
    ffmpeg_path: str | Path = "ffmpeg",
) -> list[str]:
    """Build the full ffmpeg command line for a plan.

    Args:
        plan: Plan to serialize. Must have ``should_process`` set.
        input_path: Source media file.
        output_path: Destination file.
        ffmpeg_path: ffmpeg executable.

    Returns:
        List of command arguments.

    Raises:
        ValueError: If the plan does not process the file.
    """
    if not plan.should_process:
        raise ValueError("Cannot build a command for a plan that skips the file")

    cmd = [str(ffmpeg_path), "-y", "-hide_banner"]
    cmd.extend(build_input_args(plan))
    cmd.extend(["-i", str(input_path)])
    cmd.extend(build_output_args(plan))
    cmd.append(str(output_path))
    return cmd


def format_preset(plan: TranscodePlan) -> str:
    """Format the plan as a plugin host preset string.

    Plans without decoder arguments use the ``<io>`` prefix; plans with
    decoder arguments use ``input,output``. Skipped plans yield "".
    """
    if not plan.should_process:
        return ""
    output = " ".join(build_output_args(plan))
    input_args = build_input_args(plan)
    if input_args:
        return f"{' '.join(input_args)},{output}"
    return f"{IO_SEPARATOR}{output}"


def format_info_log(plan: TranscodePlan) -> str:
    """Render the rationale as marked lines, one per entry."""
    return "".join(
        f"{ACCEPT_MARK if entry.ok else REJECT_MARK}{entry.message}\n"
        for entry in plan.rationale
    )


def to_plugin_response(plan: TranscodePlan) -> dict[str, Any]:
    """Convert a plan to the response mapping expected by plugin hosts."""
    preset = format_preset(plan)
    info_log = format_info_log(plan)
    if plan.should_process:
        info_log += f"\nFFmpeg command: {preset}\n"
    return {
        "processFile": plan.should_process,
        "preset": preset,
        "container": plan.container,
        "handBrakeMode": False,
        "FFmpegMode": plan.should_process,
        "reQueueAfter": plan.requires_requeue,
        "infoLog": info_log,
    }
