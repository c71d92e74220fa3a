"""Tests for the resolution-tiered video transcode planner."""

from pathlib import Path

import pytest

from transcode_planner.domain import (
    FileMedium,
    MediaFile,
    ProbeFormat,
    ProbeStream,
    StreamType,
)
from transcode_planner.executor import build_input_args, build_output_args
from transcode_planner.policy import (
    MapStream,
    QualityTier,
    SetOption,
    TranscodePlan,
    VideoPlannerConfig,
    plan_video_transcode,
    scan_auxiliary_streams,
)


def _option_value(plan: TranscodePlan, name: str) -> str | None:
    for directive in plan.directives:
        if isinstance(directive, SetOption) and directive.name == name:
            return directive.value
    return None


def _video_media(
    codec: str = "h264",
    resolution: str | None = "1080p",
    bit_rate: int | None = None,
    probe_format: ProbeFormat | None = None,
    extra_streams: tuple[ProbeStream, ...] = (),
) -> MediaFile:
    video = ProbeStream(
        index=0, stream_type=StreamType.VIDEO, codec_name=codec, bit_rate=bit_rate
    )
    return MediaFile(
        streams=(video, *extra_streams),
        format=probe_format or ProbeFormat(),
        container="mkv",
        file_medium=FileMedium.VIDEO,
        video_resolution=resolution,
        video_codec_name=codec,
        path=Path("/media/video.mkv"),
    )


class TestPlanVideoTranscodeRejections:
    """Files the planner leaves untouched."""

    def test_non_video_file_is_skipped(self, video_config):
        media = MediaFile(
            streams=(
                ProbeStream(index=0, stream_type=StreamType.AUDIO, codec_name="flac"),
            ),
            file_medium=FileMedium.AUDIO,
        )

        plan = plan_video_transcode(media, video_config)

        assert plan.should_process is False
        assert plan.requires_requeue is False
        assert plan.container == ".mkv"
        assert plan.rationale_messages == ["File is not a video!"]
        assert plan.rationale[0].ok is False

    def test_video_medium_without_video_stream_is_skipped(self, video_config):
        media = MediaFile(streams=(), file_medium=FileMedium.VIDEO)

        plan = plan_video_transcode(media, video_config)

        assert plan.should_process is False
        assert plan.rationale_messages == [
            "File is a video!",
            "File has no video stream",
        ]

    def test_hevc_within_ceiling_is_skipped(self, video_config):
        media = _video_media(codec="hevc", bit_rate=10_000_000)

        plan = plan_video_transcode(media, video_config)

        assert plan.should_process is False
        assert plan.directives == ()
        assert plan.rationale_messages == [
            "File is a video!",
            "Bitrate: 10.00 Mbps",
            "File is already in HEVC and bitrate acceptable, skipping",
        ]

    def test_hevc_bitrate_estimated_from_size_and_duration(self, video_config):
        """9,000,000,000 bits over 3000 s is 3 Mbps, below the 30 Mbps ceiling."""
        media = _video_media(
            codec="hevc",
            probe_format=ProbeFormat(
                duration_seconds=3000.0, size_bytes=1_125_000_000
            ),
        )

        plan = plan_video_transcode(media, video_config)

        assert plan.should_process is False
        assert "Estimated bitrate from file size: 3.00 Mbps" in plan.rationale_messages
        assert "Bitrate: 3.00 Mbps" in plan.rationale_messages

    def test_hevc_with_unknown_bitrate_is_skipped(self, video_config):
        plan = plan_video_transcode(_video_media(codec="hevc"), video_config)

        assert plan.should_process is False
        assert "Bitrate: 0.00 Mbps" in plan.rationale_messages

    def test_h265_alias_counts_as_hevc(self, video_config):
        plan = plan_video_transcode(
            _video_media(codec="h265", bit_rate=5_000_000), video_config
        )

        assert plan.should_process is False

    @pytest.mark.parametrize("resolution", ["8KUHD", "DCI4K", "Other", "8K", None])
    def test_resolution_without_tier_is_skipped(self, video_config, resolution):
        plan = plan_video_transcode(_video_media(resolution=resolution), video_config)

        assert plan.should_process is False
        assert plan.requires_requeue is False
        assert plan.directives == ()
        assert plan.rationale_messages[-1] == (
            f"No quality configured for resolution {resolution}, "
            "leaving file untouched"
        )

    def test_alias_of_configured_target_codec_is_skipped(self):
        config = VideoPlannerConfig(target_codec="av1", encoder="av1_nvenc")
        media = _video_media(codec="av01", bit_rate=5_000_000)

        plan = plan_video_transcode(media, config)

        assert plan.should_process is False
        assert plan.rationale_messages[-1] == (
            "File is already in AV1 and bitrate acceptable, skipping"
        )

    def test_tier_without_configured_quality_is_skipped(self):
        config = VideoPlannerConfig(quality_by_tier={QualityTier.SD: 20})

        plan = plan_video_transcode(_video_media(resolution="1080p"), config)

        assert plan.should_process is False


class TestPlanVideoTranscode:
    """Files the planner re-encodes."""

    def test_h264_1080p_uses_fullhd_quality(self, video_config):
        plan = plan_video_transcode(_video_media(), video_config)

        assert plan.should_process is True
        assert plan.requires_requeue is True
        assert plan.container == ".mkv"
        assert build_input_args(plan) == [
            "-hwaccel", "cuda", "-hwaccel_output_format", "cuda",
        ]  # fmt: skip
        assert build_output_args(plan) == [
            "-map", "0", "-dn", "-c:v", "hevc_nvenc", "-b:v", "0",
            "-preset", "medium", "-cq", "25", "-rc-lookahead", "16",
            "-bf", "3", "-a53cc", "0", "-c:a", "copy", "-c:s", "copy",
        ]  # fmt: skip
        assert plan.rationale_messages == [
            "File is a video!",
            "Preset set to medium",
            "File is 1080p h264, using CQ:V 25",
            "File is being transcoded!",
        ]

    @pytest.mark.parametrize(
        ("resolution", "quality"),
        [
            ("480p", "21"),
            ("576p", "21"),
            ("720p", "23"),
            ("1080p", "25"),
            ("4KUHD", "28"),
        ],
    )
    def test_default_quality_per_tier(self, video_config, resolution, quality):
        plan = plan_video_transcode(_video_media(resolution=resolution), video_config)

        assert _option_value(plan, "cq") == quality

    def test_resolution_label_case_insensitive(self, video_config):
        plan = plan_video_transcode(_video_media(resolution="4kuhd"), video_config)

        assert _option_value(plan, "cq") == "28"

    def test_hevc_above_ceiling_is_reencoded(self, video_config):
        media = _video_media(
            codec="hevc",
            resolution="4KUHD",
            probe_format=ProbeFormat(duration_seconds=1000.0, size_bytes=5_000_000_000),
        )

        plan = plan_video_transcode(media, video_config)

        assert plan.should_process is True
        assert (
            "File is HEVC but exceeds bitrate threshold "
            "(40.00 Mbps > 30.00 Mbps), forcing re-encode"
        ) in plan.rationale_messages
        assert _option_value(plan, "cq") == "28"

    def test_custom_ceiling(self):
        config = VideoPlannerConfig(bitrate_ceiling=8_000_000)
        media = _video_media(codec="hevc", bit_rate=10_000_000)

        plan = plan_video_transcode(media, config)

        assert plan.should_process is True

    def test_blank_preset_falls_back_to_medium(self):
        config = VideoPlannerConfig(encoder_preset="")

        plan = plan_video_transcode(_video_media(), config)

        assert _option_value(plan, "preset") == "medium"
        assert "Preset set to medium" in plan.rationale_messages

    def test_custom_quality_and_b_frames(self):
        config = VideoPlannerConfig(
            quality_by_tier={QualityTier.FULLHD: 19},
            b_frames=0,
            encoder_preset="slow",
        )

        plan = plan_video_transcode(_video_media(), config)

        assert _option_value(plan, "cq") == "19"
        assert _option_value(plan, "bf") == "0"
        assert _option_value(plan, "preset") == "slow"

    def test_no_hwaccel_means_no_input_args(self):
        config = VideoPlannerConfig(hwaccel=None)

        plan = plan_video_transcode(_video_media(), config)

        assert build_input_args(plan) == []

    def test_mov_text_subtitles_converted(self, video_config):
        subtitle = ProbeStream(
            index=1, stream_type=StreamType.SUBTITLE, codec_name="mov_text"
        )

        plan = plan_video_transcode(
            _video_media(extra_streams=(subtitle,)), video_config
        )

        args = build_output_args(plan)
        assert args[args.index("-c:s") + 1] == "srt"

    def test_queue_sensitive_audio_adds_muxing_queue(self, video_config):
        audio = ProbeStream(index=1, stream_type=StreamType.AUDIO, codec_name="truehd")

        plan = plan_video_transcode(_video_media(extra_streams=(audio,)), video_config)

        assert build_output_args(plan)[-2:] == ["-max_muxing_queue_size", "9999"]

    def test_cover_art_excluded_from_mapping(self, video_config):
        cover = ProbeStream(
            index=0, stream_type=StreamType.VIDEO, codec_name="png", attached_pic=True
        )
        video = ProbeStream(index=1, stream_type=StreamType.VIDEO, codec_name="h264")
        audio = ProbeStream(index=2, stream_type=StreamType.AUDIO, codec_name="aac")
        media = MediaFile(
            streams=(cover, video, audio),
            file_medium=FileMedium.VIDEO,
            video_resolution="720p",
            video_codec_name="h264",
        )

        plan = plan_video_transcode(media, video_config)

        maps = [d for d in plan.directives if isinstance(d, MapStream)]
        assert maps == [
            MapStream(stream_index=1),
            MapStream(stream_type=StreamType.AUDIO),
            MapStream(stream_type=StreamType.SUBTITLE, optional=True),
        ]
        assert build_output_args(plan)[:6] == [
            "-map", "0:1", "-map", "0:a", "-map", "0:s?",
        ]  # fmt: skip


class TestScanAuxiliaryStreams:
    """Tests for scan_auxiliary_streams()."""

    def test_plain_streams_need_nothing(self, video_config):
        streams = [
            ProbeStream(index=0, stream_type=StreamType.VIDEO, codec_name="h264"),
            ProbeStream(
                index=1,
                stream_type=StreamType.AUDIO,
                codec_name="aac",
                sample_rate=48000,
            ),
            ProbeStream(index=2, stream_type=StreamType.SUBTITLE, codec_name="subrip"),
        ]

        aux = scan_auxiliary_streams(streams, video_config)

        assert aux.subtitle_codec == "copy"
        assert aux.needs_muxing_queue is False
        assert aux.has_embedded_image is False

    @pytest.mark.parametrize(
        ("codec", "profile", "sample_rate"),
        [
            ("truehd", None, 48000),
            ("dts", "DTS-HD MA", 48000),
            ("aac", None, 44100),
        ],
    )
    def test_queue_sensitive_audio(self, video_config, codec, profile, sample_rate):
        stream = ProbeStream(
            index=1,
            stream_type=StreamType.AUDIO,
            codec_name=codec,
            profile=profile,
            sample_rate=sample_rate,
        )

        assert scan_auxiliary_streams([stream], video_config).needs_muxing_queue

    def test_plain_dts_does_not_need_queue(self, video_config):
        stream = ProbeStream(
            index=1, stream_type=StreamType.AUDIO, codec_name="dts", profile="DTS"
        )

        assert not scan_auxiliary_streams([stream], video_config).needs_muxing_queue

    @pytest.mark.parametrize("codec", ["png", "bmp", "mjpeg"])
    def test_image_codecs_are_embedded_images(self, video_config, codec):
        stream = ProbeStream(index=0, stream_type=StreamType.VIDEO, codec_name=codec)

        assert scan_auxiliary_streams([stream], video_config).has_embedded_image

    def test_custom_subtitle_text_codec(self):
        config = VideoPlannerConfig(subtitle_text_codec="ass")
        stream = ProbeStream(
            index=2, stream_type=StreamType.SUBTITLE, codec_name="mov_text"
        )

        assert scan_auxiliary_streams([stream], config).subtitle_codec == "ass"
