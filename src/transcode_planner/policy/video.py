"""Resolution-tiered video transcode planning.

This module decides whether a video file needs re-encoding and, if so,
selects encoder quality from a per-resolution tier table:

- Files that are not video are rejected.
- Files already in the target codec are accepted as-is unless their
  effective bitrate exceeds the configured ceiling.
- Resolutions without a configured tier are left untouched.

While planning, the whole stream list is scanned once for auxiliary
normalizations (subtitle conversion, muxing queue, cover art exclusion).
"""

import logging
from dataclasses import dataclass

from transcode_planner.core.codecs import (
    CONVERT_TO_TEXT_SUBTITLE_CODECS,
    is_queue_sensitive_audio,
    video_codec_matches,
)
from transcode_planner.domain import FileMedium, MediaFile, ProbeStream, StreamType
from transcode_planner.policy.types import (
    COPY_CODEC,
    MUXING_QUEUE_OPTION,
    MUXING_QUEUE_SIZE,
    AssignCodec,
    DisableStreams,
    InputOption,
    MapStream,
    PlanBuilder,
    SetOption,
    TranscodePlan,
    VideoPlannerConfig,
    format_mbps,
)
from transcode_planner.policy.video_analysis import (
    is_embedded_image,
    resolve_effective_bitrate,
    select_primary_video_stream,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuxiliaryNormalizations:
    """Stream-level adjustments found by scanning every stream once."""

    subtitle_codec: str
    """Codec for all subtitles: ``copy`` or a text codec."""

    needs_muxing_queue: bool
    """True if an audio stream needs an enlarged muxing queue."""

    has_embedded_image: bool
    """True if a video-typed stream is cover art that must be excluded."""


def scan_auxiliary_streams(
    streams: tuple[ProbeStream, ...] | list[ProbeStream],
    config: VideoPlannerConfig,
) -> AuxiliaryNormalizations:
    """Scan all streams for subtitle, muxing queue and cover art adjustments.

    Args:
        streams: All streams of the file in original order.
        config: Video planner configuration.

    Returns:
        AuxiliaryNormalizations for the file.
    """
    subtitle_codec = COPY_CODEC
    needs_muxing_queue = False
    has_embedded_image = False

    for stream in streams:
        if stream.is_subtitle and stream.codec_name in CONVERT_TO_TEXT_SUBTITLE_CODECS:
            subtitle_codec = config.subtitle_text_codec
        if stream.is_audio and is_queue_sensitive_audio(
            stream.codec_name, stream.profile, stream.sample_rate
        ):
            needs_muxing_queue = True
        if is_embedded_image(stream):
            has_embedded_image = True

    return AuxiliaryNormalizations(
        subtitle_codec=subtitle_codec,
        needs_muxing_queue=needs_muxing_queue,
        has_embedded_image=has_embedded_image,
    )


def plan_video_transcode(
    media: MediaFile, config: VideoPlannerConfig
) -> TranscodePlan:
    """Build the tiered video transcode plan for a file.

    Args:
        media: Probe snapshot of the file.
        config: Video planner configuration.

    Returns:
        TranscodePlan for the file. ``should_process`` is False for every
        terminal accept or reject outcome.
    """
    builder = PlanBuilder(container=f".{config.output_container}")

    if media.file_medium is not FileMedium.VIDEO:
        builder.reject("File is not a video!")
        return builder.skip()
    builder.accept("File is a video!")

    primary = select_primary_video_stream(media.streams)
    if primary is None:
        builder.reject("File has no video stream")
        return builder.skip()

    target = config.target_codec.upper()
    if video_codec_matches(primary.codec_name, config.target_codec):
        bitrate = resolve_effective_bitrate(primary, media.format)
        if bitrate.is_estimated:
            builder.accept(
                "Estimated bitrate from file size: "
                f"{format_mbps(bitrate.bits_per_second)}"
            )
        builder.accept(f"Bitrate: {format_mbps(bitrate.bits_per_second)}")

        if bitrate.bits_per_second > config.bitrate_ceiling:
            builder.reject(
                f"File is {target} but exceeds bitrate threshold "
                f"({format_mbps(bitrate.bits_per_second)} > "
                f"{format_mbps(config.bitrate_ceiling)}), forcing re-encode"
            )
        else:
            builder.accept(
                f"File is already in {target} and bitrate acceptable, skipping"
            )
            return builder.skip()

    builder.accept(f"Preset set to {config.encoder_preset}")

    aux = scan_auxiliary_streams(media.streams, config)

    quality = config.quality_for_resolution(media.video_resolution)
    if quality is None:
        builder.reject(
            f"No quality configured for resolution {media.video_resolution}, "
            "leaving file untouched"
        )
        logger.debug(
            "Unmapped resolution %r for %s", media.video_resolution, media.path
        )
        return builder.skip()

    if config.hwaccel:
        builder.input_directives.extend(
            [
                InputOption("hwaccel", config.hwaccel),
                InputOption("hwaccel_output_format", config.hwaccel),
            ]
        )

    if aux.has_embedded_image:
        builder.add(
            MapStream(stream_index=primary.index),
            MapStream(stream_type=StreamType.AUDIO),
            MapStream(stream_type=StreamType.SUBTITLE, optional=True),
        )
    else:
        builder.add(MapStream())

    builder.add(
        DisableStreams(StreamType.DATA),
        AssignCodec(StreamType.VIDEO, config.encoder),
        SetOption("b:v", "0"),
        SetOption("preset", config.encoder_preset),
        SetOption("cq", str(quality)),
        SetOption("rc-lookahead", str(config.rc_lookahead)),
        SetOption("bf", str(config.b_frames)),
        SetOption("a53cc", "0"),
        AssignCodec(StreamType.AUDIO, COPY_CODEC),
        AssignCodec(StreamType.SUBTITLE, aux.subtitle_codec),
    )
    if aux.needs_muxing_queue:
        builder.add(SetOption(MUXING_QUEUE_OPTION, MUXING_QUEUE_SIZE))

    codec_label = media.video_codec_name or primary.codec_name or "unknown"
    builder.accept(
        f"File is {media.video_resolution} {codec_label}, using CQ:V {quality}"
    )
    builder.accept("File is being transcoded!")
    logger.debug(
        "Video transcode planned for %s: resolution=%s cq=%d preset=%s",
        media.path,
        media.video_resolution,
        quality,
        config.encoder_preset,
    )
    return builder.build(requires_requeue=True)
