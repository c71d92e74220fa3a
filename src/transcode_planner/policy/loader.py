"""Policy file loading and validation.

This module loads YAML policy files, validates them with Pydantic models and
converts the result into the frozen configuration dataclasses used by the
evaluators. Every default is resolved here, once, so the evaluators never
coalesce missing values themselves.

Field aliases accept the string-typed input names used by media-server
plugin hosts (``codecs_to_transcode``, ``sdCQV``, ``ffmpeg_preset``, ...),
so host inputs can be converted with :func:`audio_config_from_inputs` and
:func:`video_config_from_inputs`.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from transcode_planner.policy.evaluator import PolicySchema
from transcode_planner.policy.exceptions import PolicyValidationError
from transcode_planner.policy.types import (
    DEFAULT_AUDIO_TARGET_CODEC,
    DEFAULT_B_FRAMES,
    DEFAULT_BITRATE_CEILING,
    DEFAULT_ENCODER_PRESET,
    DEFAULT_HWACCEL,
    DEFAULT_QUALITY_BY_TIER,
    DEFAULT_RC_LOOKAHEAD,
    DEFAULT_SUBTITLE_TEXT_CODEC,
    DEFAULT_VIDEO_CONTAINER,
    DEFAULT_VIDEO_ENCODER,
    DEFAULT_VIDEO_TARGET_CODEC,
    AudioNormalizerConfig,
    QualityTier,
    VideoPlannerConfig,
    parse_bitrate,
)

# Current maximum supported schema version
MAX_SCHEMA_VERSION = 1


def _split_codec_list(value: Any) -> Any:
    """Accept comma-separated strings as well as lists."""
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


def _require_codec_name(value: str, kind: str) -> str:
    codec = value.strip().lower()
    if not codec:
        raise ValueError(f"Target {kind} codec must not be blank")
    return codec


class AudioNormalizerModel(BaseModel):
    """Pydantic model for the audio normalizer section."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    source_codecs: list[str] = Field(
        default_factory=lambda: ["truehd"], alias="codecs_to_transcode"
    )
    target_codec: str = Field(default=DEFAULT_AUDIO_TARGET_CODEC, alias="codec")
    target_bitrate: str | None = Field(default=None, alias="bitrate")

    @field_validator("source_codecs", mode="before")
    @classmethod
    def split_source_codecs(cls, v: Any) -> Any:
        """Split comma-separated codec strings."""
        return _split_codec_list(v)

    @field_validator("source_codecs")
    @classmethod
    def validate_source_codecs(cls, v: list[str]) -> list[str]:
        """Require at least one source codec."""
        codecs = [c.strip().lower() for c in v if c.strip()]
        if not codecs:
            raise ValueError("At least one source codec is required")
        return codecs

    @field_validator("target_codec")
    @classmethod
    def normalize_target_codec(cls, v: str) -> str:
        """Lowercase the codec name; any ffmpeg codec name is accepted."""
        return _require_codec_name(v, "audio")

    @field_validator("target_bitrate")
    @classmethod
    def validate_bitrate(cls, v: str | None) -> str | None:
        """Validate bitrate string; blank means no bitrate."""
        if v is None or not v.strip():
            return None
        if parse_bitrate(v) is None:
            raise ValueError(
                f"Invalid bitrate '{v}'. "
                "Must be a number followed by M or k (e.g., '640k')."
            )
        return v.strip()


class VideoPlannerModel(BaseModel):
    """Pydantic model for the video planner section."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    sd_cqv: int = Field(
        default=DEFAULT_QUALITY_BY_TIER[QualityTier.SD], ge=0, le=51, alias="sdCQV"
    )
    hd_cqv: int = Field(
        default=DEFAULT_QUALITY_BY_TIER[QualityTier.HD], ge=0, le=51, alias="hdCQV"
    )
    fullhd_cqv: int = Field(
        default=DEFAULT_QUALITY_BY_TIER[QualityTier.FULLHD],
        ge=0,
        le=51,
        alias="fullhdCQV",
    )
    uhd_cqv: int = Field(
        default=DEFAULT_QUALITY_BY_TIER[QualityTier.UHD], ge=0, le=51, alias="uhdCQV"
    )
    b_frames: int = Field(default=DEFAULT_B_FRAMES, ge=0, le=5, alias="bframe")
    preset: str | None = Field(default=DEFAULT_ENCODER_PRESET, alias="ffmpeg_preset")
    bitrate_ceiling: int = Field(default=DEFAULT_BITRATE_CEILING, gt=0)
    target_codec: str = DEFAULT_VIDEO_TARGET_CODEC
    encoder: str = DEFAULT_VIDEO_ENCODER
    container: str = DEFAULT_VIDEO_CONTAINER
    rc_lookahead: int = Field(default=DEFAULT_RC_LOOKAHEAD, ge=0)
    subtitle_text_codec: str = DEFAULT_SUBTITLE_TEXT_CODEC
    hwaccel: str | None = DEFAULT_HWACCEL

    @field_validator("bitrate_ceiling", mode="before")
    @classmethod
    def parse_ceiling(cls, v: Any) -> Any:
        """Accept bitrate strings such as '30M'."""
        if isinstance(v, str):
            parsed = parse_bitrate(v)
            if parsed is None:
                raise ValueError(
                    f"Invalid bitrate_ceiling '{v}'. "
                    "Must be a number followed by M or k (e.g., '30M')."
                )
            return parsed
        return v

    @field_validator("preset")
    @classmethod
    def default_blank_preset(cls, v: str | None) -> str:
        """Blank or missing preset falls back to the default."""
        if v is None or not v.strip():
            return DEFAULT_ENCODER_PRESET
        return v.strip()

    @field_validator("target_codec")
    @classmethod
    def normalize_video_codec(cls, v: str) -> str:
        """Lowercase the codec name; any ffmpeg codec name is accepted."""
        return _require_codec_name(v, "video")

    @field_validator("hwaccel")
    @classmethod
    def blank_hwaccel_disables(cls, v: str | None) -> str | None:
        """An empty hwaccel string disables hardware decoding."""
        if v is None or not v.strip():
            return None
        return v.strip()


class PolicyModel(BaseModel):
    """Pydantic model for a complete policy file."""

    model_config = ConfigDict(extra="forbid")

    schema_version: int = Field(default=1, ge=1)
    description: str | None = None
    audio_normalizer: AudioNormalizerModel | None = None
    video_planner: VideoPlannerModel | None = None

    @field_validator("schema_version")
    @classmethod
    def validate_schema_version(cls, v: int) -> int:
        """Reject schema versions newer than this release understands."""
        if v > MAX_SCHEMA_VERSION:
            raise ValueError(
                f"schema_version {v} is not supported "
                f"(maximum is {MAX_SCHEMA_VERSION})"
            )
        return v

    @model_validator(mode="after")
    def validate_has_evaluator(self) -> "PolicyModel":
        """Require at least one evaluator section."""
        if self.audio_normalizer is None and self.video_planner is None:
            raise ValueError(
                "Policy must configure audio_normalizer, video_planner, or both"
            )
        return self


# =============================================================================
# Conversion to dataclasses
# =============================================================================


def _convert_audio_normalizer(model: AudioNormalizerModel) -> AudioNormalizerConfig:
    return AudioNormalizerConfig(
        source_codecs=frozenset(model.source_codecs),
        target_codec=model.target_codec,
        target_bitrate=model.target_bitrate,
    )


def _convert_video_planner(model: VideoPlannerModel) -> VideoPlannerConfig:
    return VideoPlannerConfig(
        quality_by_tier={
            QualityTier.SD: model.sd_cqv,
            QualityTier.HD: model.hd_cqv,
            QualityTier.FULLHD: model.fullhd_cqv,
            QualityTier.UHD: model.uhd_cqv,
        },
        b_frames=model.b_frames,
        encoder_preset=model.preset or DEFAULT_ENCODER_PRESET,
        bitrate_ceiling=model.bitrate_ceiling,
        target_codec=model.target_codec,
        encoder=model.encoder,
        output_container=model.container,
        rc_lookahead=model.rc_lookahead,
        subtitle_text_codec=model.subtitle_text_codec,
        hwaccel=model.hwaccel,
    )


def _convert_to_policy_schema(model: PolicyModel) -> PolicySchema:
    return PolicySchema(
        schema_version=model.schema_version,
        description=model.description,
        audio_normalizer=(
            _convert_audio_normalizer(model.audio_normalizer)
            if model.audio_normalizer is not None
            else None
        ),
        video_planner=(
            _convert_video_planner(model.video_planner)
            if model.video_planner is not None
            else None
        ),
    )


# =============================================================================
# Public API
# =============================================================================


def load_policy(policy_path: Path) -> PolicySchema:
    """Load and validate a policy from a YAML file.

    Args:
        policy_path: Path to the YAML policy file.

    Returns:
        Validated PolicySchema object.

    Raises:
        PolicyValidationError: If the policy file is invalid.
        FileNotFoundError: If the policy file does not exist.
    """
    if not policy_path.exists():
        raise FileNotFoundError(f"Policy file not found: {policy_path}")

    try:
        with open(policy_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise PolicyValidationError(f"Invalid YAML syntax: {e}") from e

    if data is None:
        raise PolicyValidationError("Policy file is empty")

    if not isinstance(data, dict):
        raise PolicyValidationError("Policy file must be a YAML mapping")

    return load_policy_from_dict(data)


def load_policy_from_dict(data: dict[str, Any]) -> PolicySchema:
    """Load and validate a policy from a dictionary.

    Args:
        data: Dictionary containing policy configuration.

    Returns:
        Validated PolicySchema object.

    Raises:
        PolicyValidationError: If the policy data is invalid.
    """
    try:
        model = PolicyModel.model_validate(data)
    except ValidationError as e:
        raise _to_policy_error(e) from e

    return _convert_to_policy_schema(model)


def audio_config_from_inputs(inputs: Mapping[str, Any]) -> AudioNormalizerConfig:
    """Build an audio normalizer config from host plugin inputs.

    Missing inputs take their named defaults; host inputs are strings, so
    ``codecs_to_transcode`` may be a comma-separated list.

    Raises:
        PolicyValidationError: If an input value is invalid.
    """
    try:
        model = AudioNormalizerModel.model_validate(dict(inputs))
    except ValidationError as e:
        raise _to_policy_error(e) from e
    return _convert_audio_normalizer(model)


def video_config_from_inputs(inputs: Mapping[str, Any]) -> VideoPlannerConfig:
    """Build a video planner config from host plugin inputs.

    Numeric inputs may be strings (``"25"``); a blank ``ffmpeg_preset``
    resolves to ``medium``.

    Raises:
        PolicyValidationError: If an input value is invalid.
    """
    try:
        model = VideoPlannerModel.model_validate(dict(inputs))
    except ValidationError as e:
        raise _to_policy_error(e) from e
    return _convert_video_planner(model)


def _to_policy_error(error: ValidationError) -> PolicyValidationError:
    """Format a Pydantic validation error into a user-friendly exception."""
    errors = error.errors()
    if errors:
        first_error = errors[0]
        loc = ".".join(str(x) for x in first_error.get("loc", []))
        msg = first_error.get("msg", str(error))
        if loc:
            return PolicyValidationError(
                f"Policy validation failed: {loc}: {msg}", field=loc
            )
        return PolicyValidationError(f"Policy validation failed: {msg}")

    return PolicyValidationError(f"Policy validation failed: {error}")
