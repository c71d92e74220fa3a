"""Shared test fixtures for Transcode Planner."""

import json
import logging
from pathlib import Path

import pytest

from transcode_planner.domain import (
    FileMedium,
    MediaFile,
    ProbeFormat,
    ProbeStream,
    StreamType,
)
from transcode_planner.policy import AudioNormalizerConfig, VideoPlannerConfig

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point config loading at an empty temp location for every test.

    Clears TPLAN_* variables so a developer's environment or
    ~/.tplan/config.toml never leaks into results.
    """
    for var in (
        "TPLAN_LOG_LEVEL",
        "TPLAN_LOG_FILE",
        "TPLAN_LOG_FORMAT",
        "TPLAN_LOG_INCLUDE_STDERR",
        "TPLAN_DEFAULT_POLICY",
    ):
        monkeypatch.delenv(var, raising=False)
    config_path = tmp_path / ".tplan" / "config.toml"
    monkeypatch.setenv("TPLAN_CONFIG_PATH", str(config_path))
    return config_path


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo handler changes made by configure_logging()."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler in handlers or type(handler).__module__.startswith("_pytest"):
            continue
        root.removeHandler(handler)
        handler.close()
    root.setLevel(level)


@pytest.fixture
def ffprobe_fixtures_dir() -> Path:
    """Return the path to the ffprobe fixtures directory."""
    return FIXTURES_DIR / "ffprobe"


@pytest.fixture
def policy_fixtures_dir() -> Path:
    """Return the path to the policy fixtures directory."""
    return FIXTURES_DIR / "policies"


def load_ffprobe_fixture(name: str) -> dict:
    """Load an ffprobe JSON fixture by name (without .json extension)."""
    fixture_path = FIXTURES_DIR / "ffprobe" / f"{name}.json"
    return json.loads(fixture_path.read_text())


@pytest.fixture
def movie_truehd_fixture() -> dict:
    """1080p H.264 movie with TrueHD, EAC3 and mov_text streams."""
    return load_ffprobe_fixture("movie_1080p_truehd")


@pytest.fixture
def hevc_high_bitrate_fixture() -> dict:
    """4K HEVC file without stream bit rates, above the default ceiling."""
    return load_ffprobe_fixture("hevc_4k_high_bitrate")


@pytest.fixture
def cover_art_fixture() -> dict:
    """720p MP4 with an embedded PNG cover and 44.1 kHz AAC."""
    return load_ffprobe_fixture("cover_art_720p")


@pytest.fixture
def audio_config() -> AudioNormalizerConfig:
    """Audio normalizer config with the plugin defaults."""
    return AudioNormalizerConfig()


@pytest.fixture
def video_config() -> VideoPlannerConfig:
    """Video planner config with the plugin defaults."""
    return VideoPlannerConfig()


@pytest.fixture
def truehd_eac3_media() -> MediaFile:
    """Video + eng TrueHD + eng EAC3 + fre TrueHD + eng subtitle."""
    return MediaFile(
        streams=(
            ProbeStream(index=0, stream_type=StreamType.VIDEO, codec_name="h264"),
            ProbeStream(
                index=1,
                stream_type=StreamType.AUDIO,
                codec_name="truehd",
                language="eng",
            ),
            ProbeStream(
                index=2,
                stream_type=StreamType.AUDIO,
                codec_name="eac3",
                language="eng",
            ),
            ProbeStream(
                index=3,
                stream_type=StreamType.AUDIO,
                codec_name="truehd",
                language="fre",
            ),
            ProbeStream(
                index=4,
                stream_type=StreamType.SUBTITLE,
                codec_name="subrip",
                language="eng",
            ),
        ),
        container="mkv",
        file_medium=FileMedium.VIDEO,
        video_resolution="1080p",
        video_codec_name="h264",
        path=Path("/media/movie.mkv"),
    )


@pytest.fixture
def h264_1080p_media() -> MediaFile:
    """Plain 1080p H.264 file with one AC3 stream."""
    return MediaFile(
        streams=(
            ProbeStream(
                index=0,
                stream_type=StreamType.VIDEO,
                codec_name="h264",
                width=1920,
                height=1080,
            ),
            ProbeStream(
                index=1,
                stream_type=StreamType.AUDIO,
                codec_name="ac3",
                language="eng",
            ),
        ),
        format=ProbeFormat(duration_seconds=3600.0, size_bytes=4_000_000_000),
        container="mkv",
        file_medium=FileMedium.VIDEO,
        video_resolution="1080p",
        video_codec_name="h264",
        path=Path("/media/show.mkv"),
    )
