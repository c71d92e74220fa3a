"""Formatters for evaluation results.

Shared by ``tplan plan`` for its three output formats: a human-readable
report, a JSON document describing every plan, and the host plugin
response objects keyed by evaluator.
"""

import shlex
from pathlib import Path
from typing import Any

from transcode_planner.domain import MediaFile
from transcode_planner.executor import (
    build_ffmpeg_command,
    build_input_args,
    build_output_args,
    to_plugin_response,
)
from transcode_planner.executor.ffmpeg_args import ACCEPT_MARK, REJECT_MARK
from transcode_planner.policy import EvaluationResult, TranscodePlan

DEFAULT_INPUT_NAME = "input"


def output_path_for(media: MediaFile, plan: TranscodePlan) -> Path:
    """Suggest an output path next to the input for a processing plan."""
    source = media.path or Path(DEFAULT_INPUT_NAME)
    suffix = plan.container or source.suffix
    return source.with_name(f"{source.stem}.transcoded{suffix}")


def format_human(media: MediaFile, results: list[EvaluationResult]) -> str:
    """Format evaluation results for terminal output.

    Args:
        media: The evaluated probe snapshot.
        results: One result per evaluator.

    Returns:
        Formatted string for terminal output.
    """
    lines: list[str] = []

    lines.append(f"File: {media.path or '(unknown)'}")
    lines.append(
        f"Medium: {media.file_medium.value}  "
        f"Resolution: {media.video_resolution or '-'}  "
        f"Container: {media.container or '-'}"
    )
    lines.append(
        f"Streams: {len(media.video_streams)} video, "
        f"{len(media.audio_streams)} audio, "
        f"{len(media.subtitle_streams)} subtitle"
    )

    for result in results:
        plan = result.plan
        lines.append("")
        status = "process" if plan.should_process else "skip"
        if plan.requires_requeue:
            status += " (requeue)"
        lines.append(f"[{result.evaluator.value}] {status}")

        for entry in plan.rationale:
            mark = ACCEPT_MARK if entry.ok else REJECT_MARK
            lines.append(f"  {mark} {entry.message}")

        if plan.should_process:
            command = build_ffmpeg_command(
                plan,
                media.path or Path(DEFAULT_INPUT_NAME),
                output_path_for(media, plan),
            )
            lines.append(f"  Container: {plan.container or '(unchanged)'}")
            lines.append(f"  Command: {shlex.join(command)}")

    if not results:
        lines.append("")
        lines.append("(no evaluators configured)")

    return "\n".join(lines)


def plan_to_dict(plan: TranscodePlan) -> dict[str, Any]:
    """Convert a plan to a JSON-serializable dict."""
    return {
        "should_process": plan.should_process,
        "container": plan.container,
        "requires_requeue": plan.requires_requeue,
        "input_args": build_input_args(plan),
        "output_args": build_output_args(plan),
        "rationale": [
            {"ok": entry.ok, "message": entry.message} for entry in plan.rationale
        ],
    }


def results_to_dict(
    media: MediaFile, results: list[EvaluationResult]
) -> dict[str, Any]:
    """Convert evaluation results to a JSON-serializable dict."""
    return {
        "file": str(media.path) if media.path else None,
        "file_medium": media.file_medium.value,
        "video_resolution": media.video_resolution,
        "container": media.container,
        "plans": [
            {"evaluator": result.evaluator.value, **plan_to_dict(result.plan)}
            for result in results
        ],
    }


def results_to_plugin_responses(
    results: list[EvaluationResult],
) -> dict[str, dict[str, Any]]:
    """Host plugin responses keyed by evaluator name."""
    return {
        result.evaluator.value: to_plugin_response(result.plan) for result in results
    }
