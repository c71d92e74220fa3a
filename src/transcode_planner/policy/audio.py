"""Language-aware audio codec normalization.

This module decides, per audio stream, whether to stream-copy it or
transcode it to the configured target codec:

- Streams in one of ``source_codecs`` are transcoded, unless an audio stream
  in the target codec already exists for the same language.
- Every other stream, and every non-audio stream, is copied unchanged.

Codec directives address audio streams by their audio-role index (position
among audio streams only), while map directives use the absolute stream
index, matching how ffmpeg addresses output streams.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from transcode_planner.domain import MediaFile, ProbeStream, StreamType
from transcode_planner.policy.types import (
    COPY_CODEC,
    MUXING_QUEUE_OPTION,
    MUXING_QUEUE_SIZE,
    AssignBitrate,
    AssignCodec,
    AudioNormalizerConfig,
    MapStream,
    PlanBuilder,
    SetOption,
    TranscodePlan,
)

logger = logging.getLogger(__name__)


class AudioAction(Enum):
    """Action to take for an audio stream."""

    COPY = "copy"  # Stream copy (preserve as-is)
    TRANSCODE = "transcode"  # Transcode to target codec


@dataclass(frozen=True)
class AudioStreamDecision:
    """Decision for a single audio stream."""

    stream_index: int  # Absolute index in the input
    type_index: int  # 0-based position among audio streams
    codec: str | None
    language: str
    action: AudioAction
    target_codec: str | None = None  # Only for TRANSCODE
    target_bitrate: str | None = None  # Only for TRANSCODE
    already_covered: bool = False  # Source codec skipped because of coverage


def covered_languages(
    streams: tuple[ProbeStream, ...] | list[ProbeStream], target_codec: str
) -> frozenset[str]:
    """Return languages that already have an audio stream in the target codec."""
    return frozenset(
        s.language for s in streams if s.is_audio and s.codec_name == target_codec
    )


def decide_audio_streams(
    streams: tuple[ProbeStream, ...] | list[ProbeStream],
    config: AudioNormalizerConfig,
) -> list[AudioStreamDecision]:
    """Decide copy/transcode for every audio stream, in original order.

    Coverage is computed from the input only: a language counts as covered
    when an audio stream already in the target codec carries that tag.
    Streams without a language tag share the ``und`` bucket.

    Args:
        streams: All streams of the file in original order.
        config: Audio normalizer configuration.

    Returns:
        One decision per audio stream.
    """
    covered = covered_languages(streams, config.target_codec)
    decisions: list[AudioStreamDecision] = []
    audio_index = 0

    for stream in streams:
        if not stream.is_audio:
            continue

        if stream.codec_name in config.source_codecs:
            if stream.language in covered:
                decision = AudioStreamDecision(
                    stream_index=stream.index,
                    type_index=audio_index,
                    codec=stream.codec_name,
                    language=stream.language,
                    action=AudioAction.COPY,
                    already_covered=True,
                )
            else:
                decision = AudioStreamDecision(
                    stream_index=stream.index,
                    type_index=audio_index,
                    codec=stream.codec_name,
                    language=stream.language,
                    action=AudioAction.TRANSCODE,
                    target_codec=config.target_codec,
                    target_bitrate=config.target_bitrate,
                )
        else:
            decision = AudioStreamDecision(
                stream_index=stream.index,
                type_index=audio_index,
                codec=stream.codec_name,
                language=stream.language,
                action=AudioAction.COPY,
            )

        decisions.append(decision)
        audio_index += 1

    return decisions


def evaluate_audio_normalization(
    media: MediaFile, config: AudioNormalizerConfig
) -> TranscodePlan:
    """Build the audio normalization plan for a file.

    Video, subtitle and data streams are passed through with optional
    wildcards. When no audio stream needs transcoding the plan is a skip,
    so the transcoder is never invoked for a copy of everything.

    Args:
        media: Probe snapshot of the file.
        config: Audio normalizer configuration.

    Returns:
        TranscodePlan for the file.
    """
    builder = PlanBuilder(container=f".{media.container}" if media.container else "")

    builder.add(
        MapStream(stream_type=StreamType.VIDEO, optional=True),
        AssignCodec(StreamType.VIDEO, COPY_CODEC),
        MapStream(stream_type=StreamType.SUBTITLE, optional=True),
        AssignCodec(StreamType.SUBTITLE, COPY_CODEC),
        MapStream(stream_type=StreamType.DATA, optional=True),
        AssignCodec(StreamType.DATA, COPY_CODEC),
    )

    changed = False
    for decision in decide_audio_streams(media.streams, config):
        builder.add(MapStream(stream_index=decision.stream_index))

        if decision.action is AudioAction.TRANSCODE:
            builder.reject(
                f"Transcoding {decision.codec} ({decision.language}) "
                f"to {decision.target_codec}"
            )
            builder.add(
                AssignCodec(
                    StreamType.AUDIO, config.target_codec, decision.type_index
                )
            )
            if decision.target_bitrate:
                builder.add(
                    AssignBitrate(
                        StreamType.AUDIO, decision.target_bitrate, decision.type_index
                    )
                )
            changed = True
        else:
            if decision.already_covered:
                builder.accept(
                    f"Skipping {decision.codec} ({decision.language}) since "
                    f"{config.target_codec} already exists for that language"
                )
            builder.add(AssignCodec(StreamType.AUDIO, COPY_CODEC, decision.type_index))

    builder.add(SetOption(MUXING_QUEUE_OPTION, MUXING_QUEUE_SIZE))

    if not changed:
        builder.accept("Nothing to transcode")
        logger.debug("Audio normalization: nothing to do for %s", media.path)
        return builder.skip()

    logger.debug("Audio normalization planned for %s", media.path)
    return builder.build(requires_requeue=True)
