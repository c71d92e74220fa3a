"""Video stream analysis utilities for policy evaluation.

This module provides pure functions for the facts the video planner derives
from probe data before applying policy rules:

- select_primary_video_stream: Pick the real video stream over cover art
- resolve_effective_bitrate: Best available bitrate estimate for a stream
"""

import logging
from dataclasses import dataclass
from enum import Enum

from transcode_planner.core.codecs import is_image_codec
from transcode_planner.domain import ProbeFormat, ProbeStream

logger = logging.getLogger(__name__)


class BitrateSource(Enum):
    """Where an effective bitrate came from."""

    STREAM = "stream"
    """Reported by the video stream itself."""

    FORMAT = "format"
    """Reported by the container format."""

    ESTIMATED = "estimated"
    """Derived from file size and duration."""

    UNKNOWN = "unknown"
    """No source available; treated as zero."""


@dataclass(frozen=True)
class EffectiveBitrate:
    """Result of effective bitrate resolution."""

    bits_per_second: float
    """Bitrate in bits/second (0 when unknown)."""

    source: BitrateSource

    @property
    def is_estimated(self) -> bool:
        return self.source is BitrateSource.ESTIMATED

    @property
    def is_known(self) -> bool:
        return self.source is not BitrateSource.UNKNOWN


def is_embedded_image(stream: ProbeStream) -> bool:
    """Return True if a video-typed stream is a still image (cover art)."""
    if not stream.is_video:
        return False
    return stream.attached_pic or is_image_codec(stream.codec_name)


def select_primary_video_stream(
    streams: tuple[ProbeStream, ...] | list[ProbeStream],
) -> ProbeStream | None:
    """Select the primary video stream.

    The first video stream that is not an embedded image wins. If every
    video stream is an image, the first video stream is returned.

    Args:
        streams: All streams of the file in original order.

    Returns:
        The primary video stream, or None if the file has no video streams.
    """
    video = [s for s in streams if s.is_video]
    if not video:
        return None
    for stream in video:
        if not is_embedded_image(stream):
            return stream
    logger.debug(
        "Only embedded image video streams found, using index %d", video[0].index
    )
    return video[0]


def resolve_effective_bitrate(
    stream: ProbeStream, probe_format: ProbeFormat
) -> EffectiveBitrate:
    """Resolve the best available bitrate for a video stream.

    Preference order:
    1. The stream's own bit rate (if nonzero)
    2. The container format's bit rate (if nonzero)
    3. ``size_bytes * 8 / duration_seconds`` when both are present and nonzero

    When none is available the bitrate is unknown and reported as zero, so a
    caller comparing against a ceiling takes the non-destructive branch.

    Args:
        stream: Primary video stream.
        probe_format: Container-level facts.

    Returns:
        EffectiveBitrate with value and source.
    """
    if stream.bit_rate:
        return EffectiveBitrate(float(stream.bit_rate), BitrateSource.STREAM)

    if probe_format.bit_rate:
        return EffectiveBitrate(float(probe_format.bit_rate), BitrateSource.FORMAT)

    duration = probe_format.duration_seconds
    size = probe_format.size_bytes
    if duration and size and duration > 0:
        # Includes every stream, so it is an upper bound for the video stream
        estimated = (size * 8) / duration
        return EffectiveBitrate(estimated, BitrateSource.ESTIMATED)

    logger.debug(
        "Bitrate unknown for stream %d (size=%s, duration=%s)",
        stream.index,
        size,
        duration,
    )
    return EffectiveBitrate(0.0, BitrateSource.UNKNOWN)
