"""Policy types: configuration, directives and transcode plans.

This module defines the immutable value types exchanged between the policy
evaluators and the plan serializer:

- Policy configuration dataclasses with named defaults
  (AudioNormalizerConfig, VideoPlannerConfig)
- Resolution tiers used to select video quality
- Typed plan directives (MapStream, AssignCodec, AssignBitrate, SetOption,
  DisableStreams, InputOption)
- TranscodePlan, the result of a single evaluation
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from transcode_planner.core.codecs import normalize_codec
from transcode_planner.domain import StreamType

# =============================================================================
# Named Defaults
# =============================================================================

DEFAULT_AUDIO_SOURCE_CODECS: frozenset[str] = frozenset({"truehd"})
DEFAULT_AUDIO_TARGET_CODEC = "eac3"

DEFAULT_ENCODER_PRESET = "medium"
DEFAULT_B_FRAMES = 3
DEFAULT_BITRATE_CEILING = 30_000_000  # 30 Mbps
DEFAULT_VIDEO_TARGET_CODEC = "hevc"
DEFAULT_VIDEO_ENCODER = "hevc_nvenc"
DEFAULT_VIDEO_CONTAINER = "mkv"
DEFAULT_RC_LOOKAHEAD = 16
DEFAULT_SUBTITLE_TEXT_CODEC = "srt"
DEFAULT_HWACCEL = "cuda"

MUXING_QUEUE_OPTION = "max_muxing_queue_size"
MUXING_QUEUE_SIZE = "9999"

COPY_CODEC = "copy"


class QualityTier(Enum):
    """Quality buckets selectable per resolution."""

    SD = "sd"  # 480p / 576p
    HD = "hd"  # 720p
    FULLHD = "fullhd"  # 1080p
    UHD = "uhd"  # 4K / 2160p


# Resolution labels (as produced by the introspector) mapped to tiers.
# Labels absent from this table have no quality value and are never planned.
RESOLUTION_TIERS: dict[str, QualityTier] = {
    "480p": QualityTier.SD,
    "576p": QualityTier.SD,
    "720p": QualityTier.HD,
    "1080p": QualityTier.FULLHD,
    "4KUHD": QualityTier.UHD,
}

_RESOLUTION_TIERS_FOLDED: dict[str, QualityTier] = {
    label.casefold(): tier for label, tier in RESOLUTION_TIERS.items()
}

DEFAULT_QUALITY_BY_TIER: dict[QualityTier, int] = {
    QualityTier.SD: 21,
    QualityTier.HD: 23,
    QualityTier.FULLHD: 25,
    QualityTier.UHD: 28,
}


def resolution_tier(label: str | None) -> QualityTier | None:
    """Return the quality tier for a resolution label, or None if unmapped."""
    if not label:
        return None
    return _RESOLUTION_TIERS_FOLDED.get(label.strip().casefold())


def parse_bitrate(bitrate_str: str) -> int | None:
    """Parse a bitrate string like '10M' or '5000k' to bits per second.

    Args:
        bitrate_str: Bitrate string with M/m (megabits) or K/k (kilobits) suffix.

    Returns:
        Bitrate in bits per second, or None if parsing fails.

    Examples:
        parse_bitrate("10M") -> 10_000_000
        parse_bitrate("640k") -> 640_000
        parse_bitrate("2500K") -> 2_500_000
    """
    if not bitrate_str:
        return None

    bitrate_str = bitrate_str.strip()
    try:
        if bitrate_str[-1].lower() == "m":
            value = int(float(bitrate_str[:-1]) * 1_000_000)
        elif bitrate_str[-1].lower() == "k":
            value = int(float(bitrate_str[:-1]) * 1_000)
        else:
            # Assume bits per second
            value = int(bitrate_str)
    except (ValueError, IndexError):
        return None
    return value if value >= 0 else None


def format_mbps(bits_per_second: float) -> str:
    """Format a bitrate in bits/s as megabits with two decimals."""
    return f"{bits_per_second / 1_000_000:.2f} Mbps"


# =============================================================================
# Policy Configuration
# =============================================================================


@dataclass(frozen=True)
class AudioNormalizerConfig:
    """Configuration for the language-aware audio codec normalizer.

    Attributes:
        source_codecs: Codec names eligible for normalization.
        target_codec: Codec every eligible stream is transcoded to.
        target_bitrate: Optional bitrate applied to every transcoded stream.
    """

    source_codecs: frozenset[str] = DEFAULT_AUDIO_SOURCE_CODECS
    target_codec: str = DEFAULT_AUDIO_TARGET_CODEC
    target_bitrate: str | None = None

    def __post_init__(self) -> None:
        """Normalize codec names and validate values.

        A plain string is read as a comma-separated codec list.
        """
        codecs = self.source_codecs
        if isinstance(codecs, str):
            codecs = codecs.split(",")
        sources = frozenset(normalize_codec(c) for c in codecs if normalize_codec(c))
        if not sources:
            raise ValueError("source_codecs requires at least one codec")
        object.__setattr__(self, "source_codecs", sources)

        target = normalize_codec(self.target_codec)
        if not target:
            raise ValueError("target_codec must not be empty")
        object.__setattr__(self, "target_codec", target)

        bitrate = (self.target_bitrate or "").strip() or None
        if bitrate is not None and parse_bitrate(bitrate) is None:
            raise ValueError(
                f"Invalid target_bitrate: {self.target_bitrate}. "
                "Must be a number optionally followed by M or k (e.g., '640k')."
            )
        object.__setattr__(self, "target_bitrate", bitrate)


@dataclass(frozen=True)
class VideoPlannerConfig:
    """Configuration for the resolution-tiered video transcode planner.

    ``bitrate_ceiling`` is the effective bitrate above which a file that is
    already in the target codec is still re-encoded.
    """

    quality_by_tier: Mapping[QualityTier, int] = field(
        default_factory=lambda: dict(DEFAULT_QUALITY_BY_TIER)
    )
    b_frames: int = DEFAULT_B_FRAMES
    encoder_preset: str = DEFAULT_ENCODER_PRESET
    bitrate_ceiling: int = DEFAULT_BITRATE_CEILING
    target_codec: str = DEFAULT_VIDEO_TARGET_CODEC
    encoder: str = DEFAULT_VIDEO_ENCODER
    output_container: str = DEFAULT_VIDEO_CONTAINER
    rc_lookahead: int = DEFAULT_RC_LOOKAHEAD
    subtitle_text_codec: str = DEFAULT_SUBTITLE_TEXT_CODEC
    hwaccel: str | None = DEFAULT_HWACCEL

    def __post_init__(self) -> None:
        """Validate values and substitute defaults for blank strings."""
        for tier, value in self.quality_by_tier.items():
            if not isinstance(tier, QualityTier):
                raise ValueError(f"Unknown quality tier: {tier!r}")
            if not 0 <= value <= 51:
                raise ValueError(
                    f"Quality for tier '{tier.value}' must be between 0 and 51, "
                    f"got {value}"
                )
        if not 0 <= self.b_frames <= 5:
            raise ValueError(f"b_frames must be between 0 and 5, got {self.b_frames}")
        if self.bitrate_ceiling <= 0:
            raise ValueError(
                f"bitrate_ceiling must be positive, got {self.bitrate_ceiling}"
            )
        if self.rc_lookahead < 0:
            raise ValueError(
                f"rc_lookahead must not be negative, got {self.rc_lookahead}"
            )

        preset = (self.encoder_preset or "").strip()
        object.__setattr__(self, "encoder_preset", preset or DEFAULT_ENCODER_PRESET)
        object.__setattr__(
            self,
            "target_codec",
            normalize_codec(self.target_codec) or DEFAULT_VIDEO_TARGET_CODEC,
        )
        object.__setattr__(
            self,
            "output_container",
            self.output_container.strip().lstrip(".") or DEFAULT_VIDEO_CONTAINER,
        )

    def quality_for_resolution(self, label: str | None) -> int | None:
        """Return the configured quality for a resolution label.

        Returns:
            The quality value, or None if the label has no tier or the tier
            has no configured value.
        """
        tier = resolution_tier(label)
        if tier is None:
            return None
        return self.quality_by_tier.get(tier)


# =============================================================================
# Plan Directives
# =============================================================================


@dataclass(frozen=True)
class MapStream:
    """Select input streams for the output.

    Either ``stream_index`` (absolute index) or ``stream_type`` (optionally
    with ``type_index``) addresses the streams; with neither, every stream of
    the input is selected. ``optional`` tolerates an absent stream type.
    """

    stream_index: int | None = None
    stream_type: StreamType | None = None
    type_index: int | None = None
    optional: bool = False
    input_index: int = 0

    def __post_init__(self) -> None:
        if self.stream_index is not None and self.stream_type is not None:
            raise ValueError("MapStream takes stream_index or stream_type, not both")
        if self.type_index is not None and self.stream_type is None:
            raise ValueError("type_index requires stream_type")


@dataclass(frozen=True)
class AssignCodec:
    """Set the codec for output streams of a type.

    ``type_index`` is the role-relative position (e.g. the second audio
    stream is audio index 1); None applies to every stream of the type.
    """

    stream_type: StreamType
    codec: str
    type_index: int | None = None

    @property
    def is_copy(self) -> bool:
        return self.codec == COPY_CODEC


@dataclass(frozen=True)
class AssignBitrate:
    """Set the bitrate for output streams of a type (role-relative)."""

    stream_type: StreamType
    bitrate: str
    type_index: int | None = None


@dataclass(frozen=True)
class SetOption:
    """An output option such as ``preset`` or ``max_muxing_queue_size``."""

    name: str
    value: str | None = None


@dataclass(frozen=True)
class DisableStreams:
    """Drop every stream of a type from the output (e.g. ``-dn``)."""

    stream_type: StreamType


@dataclass(frozen=True)
class InputOption:
    """A decoder-side option applied before the input (e.g. ``hwaccel``)."""

    name: str
    value: str | None = None


Directive = Union[MapStream, AssignCodec, AssignBitrate, SetOption, DisableStreams]


@dataclass(frozen=True)
class RationaleEntry:
    """One human-readable decision trace.

    ``ok`` marks a passing/accepting observation; False marks a finding that
    rejects the file or forces work.
    """

    ok: bool
    message: str


@dataclass(frozen=True)
class TranscodePlan:
    """Immutable result of one evaluation."""

    should_process: bool
    container: str
    directives: tuple[Directive, ...] = ()
    input_directives: tuple[InputOption, ...] = ()
    rationale: tuple[RationaleEntry, ...] = ()
    requires_requeue: bool = False

    @property
    def rationale_messages(self) -> list[str]:
        return [entry.message for entry in self.rationale]

    @property
    def mapped_stream_indices(self) -> list[int]:
        """Absolute stream indices mapped explicitly, in directive order."""
        return [
            d.stream_index
            for d in self.directives
            if isinstance(d, MapStream) and d.stream_index is not None
        ]

    def codec_assignments(self, stream_type: StreamType) -> list[AssignCodec]:
        """Return codec directives for one stream type, in directive order."""
        return [
            d
            for d in self.directives
            if isinstance(d, AssignCodec) and d.stream_type is stream_type
        ]


@dataclass
class PlanBuilder:
    """Mutable accumulator used by evaluators while deciding.

    Evaluators append directives and rationale in decision order, then call
    :meth:`build` once to produce the frozen plan.
    """

    container: str
    directives: list[Directive] = field(default_factory=list)
    input_directives: list[InputOption] = field(default_factory=list)
    rationale: list[RationaleEntry] = field(default_factory=list)

    def accept(self, message: str) -> None:
        self.rationale.append(RationaleEntry(ok=True, message=message))

    def reject(self, message: str) -> None:
        self.rationale.append(RationaleEntry(ok=False, message=message))

    def add(self, *directives: Directive) -> None:
        self.directives.extend(directives)

    def skip(self) -> TranscodePlan:
        """Build a plan that leaves the file untouched (rationale only)."""
        return TranscodePlan(
            should_process=False,
            container=self.container,
            rationale=tuple(self.rationale),
        )

    def build(self, *, requires_requeue: bool = True) -> TranscodePlan:
        """Build a plan that processes the file."""
        return TranscodePlan(
            should_process=True,
            container=self.container,
            directives=tuple(self.directives),
            input_directives=tuple(self.input_directives),
            rationale=tuple(self.rationale),
            requires_requeue=requires_requeue,
        )
