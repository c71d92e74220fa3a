"""Domain models for Transcode Planner.

These models are immutable snapshots of probe data for a single file. They
are constructed fresh for every evaluation and never mutated by the policy
evaluators.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .enums import FileMedium, StreamType

UNDEFINED_LANGUAGE = "und"


@dataclass(frozen=True)
class ProbeStream:
    """One elementary stream of a media file.

    ``index`` is the stream's absolute position within the file and is the
    address used by stream-mapping directives; it is never renumbered.
    """

    index: int
    stream_type: StreamType
    codec_name: str | None = None
    language: str = UNDEFINED_LANGUAGE
    profile: str | None = None
    sample_rate: int | None = None
    bit_rate: int | None = None
    width: int | None = None
    height: int | None = None
    # True when ffprobe flags the stream as cover art (disposition.attached_pic)
    attached_pic: bool = False

    def __post_init__(self) -> None:
        # Normalize once so every comparison downstream is case-insensitive.
        if self.codec_name is not None:
            object.__setattr__(self, "codec_name", self.codec_name.strip().casefold())
        language = (self.language or "").strip().casefold()
        object.__setattr__(self, "language", language or UNDEFINED_LANGUAGE)
        if self.profile is not None:
            object.__setattr__(self, "profile", self.profile.strip().casefold())

    @property
    def is_video(self) -> bool:
        return self.stream_type is StreamType.VIDEO

    @property
    def is_audio(self) -> bool:
        return self.stream_type is StreamType.AUDIO

    @property
    def is_subtitle(self) -> bool:
        return self.stream_type is StreamType.SUBTITLE


@dataclass(frozen=True)
class ProbeFormat:
    """Container-level facts, used as a bitrate fallback."""

    duration_seconds: float | None = None
    size_bytes: int | None = None
    bit_rate: int | None = None
    format_name: str | None = None


@dataclass(frozen=True)
class MediaFile:
    """Probe snapshot of one media file, as handed to the evaluators."""

    streams: tuple[ProbeStream, ...]
    format: ProbeFormat = field(default_factory=ProbeFormat)
    container: str | None = None
    file_medium: FileMedium = FileMedium.VIDEO
    video_resolution: str | None = None
    video_codec_name: str | None = None
    path: Path | None = None

    @property
    def video_streams(self) -> tuple[ProbeStream, ...]:
        return tuple(s for s in self.streams if s.is_video)

    @property
    def audio_streams(self) -> tuple[ProbeStream, ...]:
        return tuple(s for s in self.streams if s.is_audio)

    @property
    def subtitle_streams(self) -> tuple[ProbeStream, ...]:
        return tuple(s for s in self.streams if s.is_subtitle)

    def has_stream_index(self, index: int) -> bool:
        """Return True if a stream with the given absolute index exists."""
        return any(s.index == index for s in self.streams)
