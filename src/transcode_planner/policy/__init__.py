"""Policy engine module for Transcode Planner.

This module provides policy loading, validation, and evaluation functionality:
- types: Configuration dataclasses, plan directives and TranscodePlan
- loader: Policy loading from YAML files and host plugin inputs
- audio: Language-aware audio codec normalizer
- video: Resolution-tiered video transcode planner
- video_analysis: Primary stream selection and effective bitrate resolution
- evaluator: Runs the evaluators enabled by a policy
"""

from transcode_planner.policy.audio import (
    AudioAction,
    AudioStreamDecision,
    covered_languages,
    decide_audio_streams,
    evaluate_audio_normalization,
)
from transcode_planner.policy.evaluator import (
    EvaluationResult,
    EvaluatorKind,
    PolicySchema,
    evaluate_file,
)
from transcode_planner.policy.exceptions import PolicyError, PolicyValidationError
from transcode_planner.policy.loader import (
    audio_config_from_inputs,
    load_policy,
    load_policy_from_dict,
    video_config_from_inputs,
)
from transcode_planner.policy.types import (
    AssignBitrate,
    AssignCodec,
    AudioNormalizerConfig,
    DisableStreams,
    InputOption,
    MapStream,
    QualityTier,
    RationaleEntry,
    SetOption,
    TranscodePlan,
    VideoPlannerConfig,
    parse_bitrate,
    resolution_tier,
)
from transcode_planner.policy.video import (
    AuxiliaryNormalizations,
    plan_video_transcode,
    scan_auxiliary_streams,
)
from transcode_planner.policy.video_analysis import (
    BitrateSource,
    EffectiveBitrate,
    resolve_effective_bitrate,
    select_primary_video_stream,
)

__all__ = [
    # Evaluators
    "evaluate_file",
    "evaluate_audio_normalization",
    "plan_video_transcode",
    "EvaluationResult",
    "EvaluatorKind",
    "PolicySchema",
    # Audio
    "AudioAction",
    "AudioStreamDecision",
    "covered_languages",
    "decide_audio_streams",
    # Video
    "AuxiliaryNormalizations",
    "scan_auxiliary_streams",
    "BitrateSource",
    "EffectiveBitrate",
    "resolve_effective_bitrate",
    "select_primary_video_stream",
    # Types
    "AudioNormalizerConfig",
    "VideoPlannerConfig",
    "QualityTier",
    "resolution_tier",
    "parse_bitrate",
    "TranscodePlan",
    "RationaleEntry",
    "MapStream",
    "AssignCodec",
    "AssignBitrate",
    "SetOption",
    "DisableStreams",
    "InputOption",
    # Loading
    "load_policy",
    "load_policy_from_dict",
    "audio_config_from_inputs",
    "video_config_from_inputs",
    "PolicyError",
    "PolicyValidationError",
]
