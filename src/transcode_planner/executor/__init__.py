"""Executor package: turns transcode plans into transcoder arguments.

Plans are serialized here and never executed; invoking ffmpeg is the
caller's responsibility.

Usage:
    from transcode_planner.executor import build_ffmpeg_command, to_plugin_response
"""

from .ffmpeg_args import (
    build_ffmpeg_command,
    build_input_args,
    build_output_args,
    directive_to_args,
    format_info_log,
    format_preset,
    stream_specifier,
    to_plugin_response,
)

__all__ = [
    "build_ffmpeg_command",
    "build_input_args",
    "build_output_args",
    "directive_to_args",
    "format_info_log",
    "format_preset",
    "stream_specifier",
    "to_plugin_response",
]
