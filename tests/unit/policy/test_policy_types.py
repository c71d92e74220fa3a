"""Tests for policy configuration types, directives and plans."""

import pytest

from transcode_planner.domain import StreamType
from transcode_planner.policy import (
    AssignCodec,
    AudioNormalizerConfig,
    MapStream,
    QualityTier,
    SetOption,
    VideoPlannerConfig,
    parse_bitrate,
    resolution_tier,
)
from transcode_planner.policy.types import PlanBuilder, format_mbps


class TestParseBitrate:
    """Tests for parse_bitrate()."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("10M", 10_000_000),
            ("640k", 640_000),
            ("2500K", 2_500_000),
            ("1.5m", 1_500_000),
            ("128000", 128_000),
            (" 30M ", 30_000_000),
        ],
    )
    def test_valid_values(self, value, expected):
        assert parse_bitrate(value) == expected

    @pytest.mark.parametrize("value", ["", "fast", "M", "-5M", "10G"])
    def test_invalid_values(self, value):
        assert parse_bitrate(value) is None


class TestFormatMbps:
    def test_two_decimals(self):
        assert format_mbps(30_000_000) == "30.00 Mbps"
        assert format_mbps(3_456_789) == "3.46 Mbps"


class TestResolutionTier:
    """Tests for resolution_tier()."""

    @pytest.mark.parametrize(
        ("label", "tier"),
        [
            ("480p", QualityTier.SD),
            ("576p", QualityTier.SD),
            ("720p", QualityTier.HD),
            ("1080p", QualityTier.FULLHD),
            ("4KUHD", QualityTier.UHD),
            ("4kuhd", QualityTier.UHD),
        ],
    )
    def test_known_labels(self, label, tier):
        assert resolution_tier(label) is tier

    @pytest.mark.parametrize("label", ["8K", "8KUHD", "DCI4K", "Other", "", None])
    def test_unknown_labels(self, label):
        assert resolution_tier(label) is None


class TestAudioNormalizerConfig:
    """Tests for AudioNormalizerConfig validation."""

    def test_defaults(self):
        config = AudioNormalizerConfig()

        assert config.source_codecs == frozenset({"truehd"})
        assert config.target_codec == "eac3"
        assert config.target_bitrate is None

    def test_normalizes_codec_names(self):
        config = AudioNormalizerConfig(
            source_codecs=frozenset({" TrueHD ", "DTS"}), target_codec="EAC3"
        )

        assert config.source_codecs == frozenset({"truehd", "dts"})
        assert config.target_codec == "eac3"

    def test_single_codec_string_is_not_split_into_characters(self):
        config = AudioNormalizerConfig(source_codecs="truehd")

        assert config.source_codecs == frozenset({"truehd"})

    def test_comma_separated_codec_string(self):
        config = AudioNormalizerConfig(source_codecs="truehd, DTS")

        assert config.source_codecs == frozenset({"truehd", "dts"})

    def test_free_text_target_codec(self):
        assert AudioNormalizerConfig(target_codec="alac").target_codec == "alac"

    def test_blank_bitrate_means_none(self):
        assert AudioNormalizerConfig(target_bitrate="  ").target_bitrate is None

    def test_empty_source_codecs_rejected(self):
        with pytest.raises(ValueError, match="source_codecs"):
            AudioNormalizerConfig(source_codecs=frozenset())

    def test_empty_target_rejected(self):
        with pytest.raises(ValueError, match="target_codec"):
            AudioNormalizerConfig(target_codec=" ")

    def test_invalid_bitrate_rejected(self):
        with pytest.raises(ValueError, match="Invalid target_bitrate"):
            AudioNormalizerConfig(target_bitrate="loud")


class TestVideoPlannerConfig:
    """Tests for VideoPlannerConfig validation."""

    def test_defaults(self):
        config = VideoPlannerConfig()

        assert config.quality_by_tier == {
            QualityTier.SD: 21,
            QualityTier.HD: 23,
            QualityTier.FULLHD: 25,
            QualityTier.UHD: 28,
        }
        assert config.b_frames == 3
        assert config.encoder_preset == "medium"
        assert config.bitrate_ceiling == 30_000_000
        assert config.output_container == "mkv"

    def test_quality_for_resolution(self):
        config = VideoPlannerConfig()

        assert config.quality_for_resolution("1080p") == 25
        assert config.quality_for_resolution("8K") is None

    def test_quality_out_of_range_rejected(self):
        with pytest.raises(ValueError, match="between 0 and 51"):
            VideoPlannerConfig(quality_by_tier={QualityTier.HD: 52})

    def test_b_frames_out_of_range_rejected(self):
        with pytest.raises(ValueError, match="b_frames"):
            VideoPlannerConfig(b_frames=6)

    def test_non_positive_ceiling_rejected(self):
        with pytest.raises(ValueError, match="bitrate_ceiling"):
            VideoPlannerConfig(bitrate_ceiling=0)

    def test_container_leading_dot_stripped(self):
        assert VideoPlannerConfig(output_container=".mp4").output_container == "mp4"


class TestDirectives:
    """Tests for directive invariants."""

    def test_map_stream_rejects_index_and_type(self):
        with pytest.raises(ValueError, match="not both"):
            MapStream(stream_index=1, stream_type=StreamType.AUDIO)

    def test_map_stream_type_index_requires_type(self):
        with pytest.raises(ValueError, match="type_index requires stream_type"):
            MapStream(type_index=0)

    def test_assign_codec_is_copy(self):
        assert AssignCodec(StreamType.AUDIO, "copy").is_copy is True
        assert AssignCodec(StreamType.AUDIO, "eac3").is_copy is False


class TestPlanBuilder:
    """Tests for PlanBuilder."""

    def test_skip_drops_directives(self):
        builder = PlanBuilder(container=".mkv")
        builder.add(MapStream())
        builder.reject("nope")

        plan = builder.skip()

        assert plan.should_process is False
        assert plan.requires_requeue is False
        assert plan.directives == ()
        assert plan.rationale_messages == ["nope"]

    def test_build_keeps_order(self):
        builder = PlanBuilder(container=".mkv")
        builder.add(MapStream(), SetOption("preset", "fast"))
        builder.accept("ok")

        plan = builder.build()

        assert plan.should_process is True
        assert plan.requires_requeue is True
        assert plan.directives == (MapStream(), SetOption("preset", "fast"))
