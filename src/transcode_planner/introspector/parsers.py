"""Pure parsing functions for ffprobe JSON output.

These functions transform ffprobe JSON data (``-show_streams -show_format
-of json``) into Transcode Planner domain objects. All functions except
:func:`load_probe_file` are pure (no I/O, no side effects) for easy testing.

ffprobe reports most numbers as strings; malformed or negative values become
None with a logged warning rather than failing the whole document.
"""

import json
import logging
from pathlib import Path
from typing import Any

from transcode_planner.domain import (
    FileMedium,
    MediaFile,
    ProbeFormat,
    ProbeStream,
    StreamType,
)
from transcode_planner.introspector.interface import ProbeDataError
from transcode_planner.introspector.mappings import (
    classify_resolution,
    map_container,
    map_stream_type,
)
from transcode_planner.policy.video_analysis import (
    is_embedded_image,
    select_primary_video_stream,
)

logger = logging.getLogger(__name__)


def _log_validation_warning(
    message: str,
    field_name: str,
    file_path: str | None,
    *args: object,
) -> None:
    """Log a validation warning with optional file context."""
    context = f" in {file_path}" if file_path else ""
    logger.warning(f"{message}%s", field_name, *args, context)


def parse_int(
    value: Any,
    field_name: str,
    file_path: str | None = None,
) -> int | None:
    """Parse an ffprobe integer field (int or numeric string).

    Args:
        value: Raw value from ffprobe JSON.
        field_name: Field name for warning messages.
        file_path: File path context for warnings.

    Returns:
        Non-negative integer, or None if absent or invalid.
    """
    if value is None or value == "" or value == "N/A":
        return None
    if isinstance(value, bool):
        _log_validation_warning("Expected int for %s, got bool", field_name, file_path)
        return None
    try:
        parsed = int(value) if isinstance(value, int) else int(float(value))
    except (TypeError, ValueError):
        _log_validation_warning(
            "Invalid value for %s: %r", field_name, file_path, value
        )
        return None
    if parsed < 0:
        _log_validation_warning(
            "Invalid negative %s: %d", field_name, file_path, parsed
        )
        return None
    return parsed


def parse_float(
    value: Any,
    field_name: str,
    file_path: str | None = None,
) -> float | None:
    """Parse an ffprobe float field (number or numeric string).

    Args:
        value: Raw value from ffprobe JSON (e.g., "3600.000").
        field_name: Field name for warning messages.
        file_path: File path context for warnings.

    Returns:
        Non-negative float, or None if absent or invalid.
    """
    if value is None or value == "" or value == "N/A":
        return None
    if isinstance(value, bool):
        _log_validation_warning(
            "Expected float for %s, got bool", field_name, file_path
        )
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        _log_validation_warning(
            "Invalid value for %s: %r", field_name, file_path, value
        )
        return None
    if parsed < 0:
        _log_validation_warning(
            "Invalid negative %s: %s", field_name, file_path, parsed
        )
        return None
    return parsed


def parse_str(
    value: Any,
    field_name: str,
    file_path: str | None = None,
) -> str | None:
    """Parse an ffprobe string field, discarding values of any other type."""
    if value is None:
        return None
    if not isinstance(value, str):
        _log_validation_warning(
            "Expected string for %s, got %s",
            field_name,
            file_path,
            type(value).__name__,
        )
        return None
    return value


def parse_mapping(
    value: Any,
    field_name: str,
    file_path: str | None = None,
) -> dict[str, Any]:
    """Parse an ffprobe object field such as ``tags`` or ``disposition``."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        _log_validation_warning(
            "Expected object for %s, got %s",
            field_name,
            file_path,
            type(value).__name__,
        )
        return {}
    return value


def parse_stream(
    stream: dict[str, Any],
    position: int,
    file_path: str | None = None,
) -> ProbeStream:
    """Parse a single ffprobe stream dict into a ProbeStream.

    Args:
        stream: Stream dictionary from ffprobe JSON.
        position: Position in the stream list, used when ``index`` is absent.
        file_path: Optional file path for context in warning messages.

    Returns:
        ProbeStream domain object.
    """
    index = stream.get("index")
    if not isinstance(index, int) or isinstance(index, bool) or index < 0:
        index = position

    tags = parse_mapping(stream.get("tags"), "tags", file_path)
    disposition = parse_mapping(stream.get("disposition"), "disposition", file_path)
    stream_type = map_stream_type(
        parse_str(stream.get("codec_type"), "codec_type", file_path)
    )

    return ProbeStream(
        index=index,
        stream_type=stream_type,
        codec_name=parse_str(stream.get("codec_name"), "codec_name", file_path),
        language=parse_str(tags.get("language"), "language", file_path) or "",
        profile=parse_str(stream.get("profile"), "profile", file_path),
        sample_rate=parse_int(stream.get("sample_rate"), "sample_rate", file_path),
        bit_rate=parse_int(stream.get("bit_rate"), "bit_rate", file_path),
        width=(
            parse_int(stream.get("width"), "width", file_path)
            if stream_type is StreamType.VIDEO
            else None
        ),
        height=(
            parse_int(stream.get("height"), "height", file_path)
            if stream_type is StreamType.VIDEO
            else None
        ),
        attached_pic=disposition.get("attached_pic", 0) == 1,
    )


def parse_format(
    format_data: dict[str, Any] | None,
    file_path: str | None = None,
) -> ProbeFormat:
    """Parse the ffprobe ``format`` object into a ProbeFormat."""
    if not format_data:
        return ProbeFormat()
    return ProbeFormat(
        duration_seconds=parse_float(
            format_data.get("duration"), "duration", file_path
        ),
        size_bytes=parse_int(format_data.get("size"), "size", file_path),
        bit_rate=parse_int(format_data.get("bit_rate"), "bit_rate", file_path),
        format_name=parse_str(
            format_data.get("format_name"), "format_name", file_path
        ),
    )


def classify_file_medium(streams: tuple[ProbeStream, ...]) -> FileMedium:
    """Classify a file by the streams it contains.

    Returns:
        VIDEO when a non-image video stream exists, AUDIO when audio exists,
        otherwise OTHER.
    """
    if any(s.is_video and not is_embedded_image(s) for s in streams):
        return FileMedium.VIDEO
    if any(s.is_audio for s in streams):
        return FileMedium.AUDIO
    return FileMedium.OTHER


def parse_probe_data(
    data: Any,
    path: Path | None = None,
    video_resolution: str | None = None,
    file_medium: FileMedium | None = None,
    container: str | None = None,
) -> MediaFile:
    """Parse an ffprobe JSON document into a MediaFile.

    Classifications supplied by the caller take precedence; anything left
    out is derived from the probe data.

    Args:
        data: Parsed ffprobe JSON document.
        path: Path of the probed media file, if known.
        video_resolution: Resolution label override (e.g., "1080p").
        file_medium: File medium override.
        container: Container extension override (without the dot).

    Returns:
        MediaFile snapshot.

    Raises:
        ProbeDataError: If the document is not an ffprobe mapping.
    """
    if not isinstance(data, dict):
        raise ProbeDataError("Probe data must be a JSON object")

    raw_streams = data.get("streams")
    if raw_streams is None:
        raw_streams = []
    if not isinstance(raw_streams, list):
        raise ProbeDataError("Probe data 'streams' must be a list")

    file_path = str(path) if path else None
    streams = tuple(
        parse_stream(s, position, file_path)
        for position, s in enumerate(raw_streams)
        if isinstance(s, dict)
    )
    if len({s.index for s in streams}) != len(streams):
        raise ProbeDataError("Probe data contains duplicate stream indices")

    raw_format = data.get("format")
    probe_format = parse_format(
        raw_format if isinstance(raw_format, dict) else None, file_path
    )

    primary = select_primary_video_stream(streams)
    if video_resolution is None and primary is not None:
        video_resolution = classify_resolution(primary.width, primary.height)

    if container is None:
        if path is not None and path.suffix:
            container = path.suffix.lstrip(".").lower()
        else:
            container = map_container(probe_format.format_name)

    return MediaFile(
        streams=streams,
        format=probe_format,
        container=container.lstrip(".") if container else None,
        file_medium=file_medium or classify_file_medium(streams),
        video_resolution=video_resolution,
        video_codec_name=primary.codec_name if primary is not None else None,
        path=path,
    )


def load_probe_file(
    probe_path: Path,
    media_path: Path | None = None,
    **overrides: Any,
) -> MediaFile:
    """Read an ffprobe JSON file and parse it into a MediaFile.

    Args:
        probe_path: Path to the JSON file written by ffprobe.
        media_path: Path of the probed media file (defaults to the
            ``format.filename`` entry when present).
        **overrides: Passed to :func:`parse_probe_data`.

    Returns:
        MediaFile snapshot.

    Raises:
        FileNotFoundError: If the probe file does not exist.
        ProbeDataError: If the file is not valid ffprobe JSON.
    """
    if not probe_path.exists():
        raise FileNotFoundError(f"Probe file not found: {probe_path}")

    try:
        data = json.loads(probe_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ProbeDataError(f"Invalid JSON in {probe_path}: {e}") from e

    if media_path is None and isinstance(data, dict):
        raw_format = data.get("format")
        if isinstance(raw_format, dict):
            filename = parse_str(raw_format.get("filename"), "filename")
            if filename:
                media_path = Path(filename)

    return parse_probe_data(data, path=media_path, **overrides)
