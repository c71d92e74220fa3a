"""Domain enums for Transcode Planner.

This module contains the stream and file classifications shared by the
introspector, the policy evaluators and the plan serializer.
"""

from enum import Enum


class StreamType(Enum):
    """Elementary stream type as reported by ffprobe ``codec_type``."""

    VIDEO = "video"
    AUDIO = "audio"
    SUBTITLE = "subtitle"
    DATA = "data"
    ATTACHMENT = "attachment"
    OTHER = "other"

    @property
    def specifier(self) -> str | None:
        """FFmpeg stream specifier letter for this type, if any."""
        return _SPECIFIERS.get(self)


_SPECIFIERS: dict[StreamType, str] = {
    StreamType.VIDEO: "v",
    StreamType.AUDIO: "a",
    StreamType.SUBTITLE: "s",
    StreamType.DATA: "d",
    StreamType.ATTACHMENT: "t",
}


class FileMedium(Enum):
    """Coarse classification of what a file contains."""

    VIDEO = "video"  # At least one real (non-image) video stream
    AUDIO = "audio"  # Audio streams only
    OTHER = "other"  # Anything else (images, data-only containers)
