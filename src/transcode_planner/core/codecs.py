"""Centralized codec registry and utilities.

This module is the single source of truth for codec knowledge used by the
policy evaluators:
- Codec alias groups for matching/normalization
- Codecs that identify embedded images posing as video streams
- Subtitle codecs the Matroska output cannot carry by stream copy
- Audio signatures that need a larger muxing queue
"""

from __future__ import annotations

# =============================================================================
# Codec Alias Groups
# =============================================================================
# Groups of equivalent codec identifiers that are treated as matching.

VIDEO_CODEC_ALIASES: dict[str, frozenset[str]] = {
    "hevc": frozenset({"hevc", "h265", "h.265", "x265", "hvc1", "hev1"}),
    "h265": frozenset({"hevc", "h265", "h.265", "x265", "hvc1", "hev1"}),
    "h264": frozenset({"h264", "h.264", "avc", "avc1", "x264"}),
    "avc": frozenset({"h264", "h.264", "avc", "avc1", "x264"}),
    "vp9": frozenset({"vp9", "vp09"}),
    "av1": frozenset({"av1", "av01", "libaom-av1"}),
    "mpeg4": frozenset({"mpeg4", "mp4v"}),
}

# Video-typed streams with these codecs are cover art / thumbnails.
IMAGE_VIDEO_CODECS: frozenset[str] = frozenset({"png", "bmp", "mjpeg"})

# Closed-caption style subtitles that must be converted to a text codec.
CONVERT_TO_TEXT_SUBTITLE_CODECS: frozenset[str] = frozenset({"mov_text"})

# Lossless / high-rate audio with timestamps that overrun the default queue.
QUEUE_SENSITIVE_AUDIO_CODECS: frozenset[str] = frozenset({"truehd"})
QUEUE_SENSITIVE_DTS_PROFILE = "dts-hd ma"
QUEUE_SENSITIVE_AAC_SAMPLE_RATE = 44100


# =============================================================================
# Normalization and Matching
# =============================================================================


def normalize_codec(codec: str | None) -> str:
    """Normalize a codec name for comparison.

    Args:
        codec: Codec name from ffprobe or policy.

    Returns:
        Normalized lowercase codec name, or empty string for None.
    """
    if codec is None:
        return ""
    return codec.strip().casefold()


def video_codec_matches(current_codec: str | None, target: str) -> bool:
    """Check if current video codec matches target (case-insensitive, alias-aware).

    Args:
        current_codec: Current video codec from ffprobe.
        target: Target codec to match against.

    Returns:
        True if codec matches.
    """
    if current_codec is None:
        return False

    current = normalize_codec(current_codec)
    wanted = normalize_codec(target)

    if current == wanted:
        return True

    if current in VIDEO_CODEC_ALIASES.get(wanted, frozenset()):
        return True

    return wanted in VIDEO_CODEC_ALIASES.get(current, frozenset())


def is_image_codec(codec: str | None) -> bool:
    """Return True if a video-typed stream with this codec is a still image."""
    return normalize_codec(codec) in IMAGE_VIDEO_CODECS


def is_queue_sensitive_audio(
    codec: str | None, profile: str | None, sample_rate: int | None
) -> bool:
    """Check whether an audio stream needs an enlarged muxing queue.

    Matches TrueHD, DTS with the DTS-HD MA profile, and 44.1 kHz AAC.

    Args:
        codec: Audio codec name.
        profile: Codec profile (e.g., "DTS-HD MA").
        sample_rate: Sample rate in Hz.

    Returns:
        True if the stream matches a known queue-timing signature.
    """
    name = normalize_codec(codec)
    if name in QUEUE_SENSITIVE_AUDIO_CODECS:
        return True
    if name == "dts" and normalize_codec(profile) == QUEUE_SENSITIVE_DTS_PROFILE:
        return True
    return name == "aac" and sample_rate == QUEUE_SENSITIVE_AAC_SAMPLE_RATE
