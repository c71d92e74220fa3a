"""Tests for the codec registry."""

import pytest

from transcode_planner.core.codecs import (
    is_image_codec,
    is_queue_sensitive_audio,
    normalize_codec,
    video_codec_matches,
)


class TestNormalizeCodec:
    def test_casefolds_and_strips(self):
        assert normalize_codec(" HEVC ") == "hevc"

    def test_none_is_empty(self):
        assert normalize_codec(None) == ""


class TestVideoCodecMatches:
    @pytest.mark.parametrize(
        ("current", "target"),
        [
            ("hevc", "hevc"),
            ("HEVC", "hevc"),
            ("h265", "hevc"),
            ("hevc", "h265"),
            ("avc", "h264"),
            ("av01", "av1"),
            ("vp09", "vp9"),
            ("mp4v", "mpeg4"),
        ],
    )
    def test_matches(self, current, target):
        assert video_codec_matches(current, target) is True

    @pytest.mark.parametrize(
        ("current", "target"),
        [("h264", "hevc"), (None, "hevc"), ("vp9", "av1")],
    )
    def test_does_not_match(self, current, target):
        assert video_codec_matches(current, target) is False


class TestIsImageCodec:
    @pytest.mark.parametrize("codec", ["png", "bmp", "mjpeg", "MJPEG"])
    def test_image_codecs(self, codec):
        assert is_image_codec(codec) is True

    @pytest.mark.parametrize("codec", ["h264", "gif", None])
    def test_other_codecs(self, codec):
        assert is_image_codec(codec) is False


class TestIsQueueSensitiveAudio:
    @pytest.mark.parametrize(
        ("codec", "profile", "sample_rate", "expected"),
        [
            ("truehd", None, None, True),
            ("dts", "DTS-HD MA", 48000, True),
            ("dts", "dts-hd ma", None, True),
            ("dts", "DTS", 48000, False),
            ("dts", None, None, False),
            ("aac", "LC", 44100, True),
            ("aac", "LC", 48000, False),
            ("eac3", None, 44100, False),
            (None, None, None, False),
        ],
    )
    def test_signatures(self, codec, profile, sample_rate, expected):
        assert is_queue_sensitive_audio(codec, profile, sample_rate) is expected
