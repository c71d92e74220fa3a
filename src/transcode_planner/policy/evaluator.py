"""Policy evaluation entry point.

Runs every evaluator configured in a policy against one probe snapshot.
Evaluators are independent: each sees the same input and produces its own
plan, and nothing is carried from one evaluation to the next.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from transcode_planner.domain import MediaFile
from transcode_planner.policy.audio import evaluate_audio_normalization
from transcode_planner.policy.types import (
    AudioNormalizerConfig,
    TranscodePlan,
    VideoPlannerConfig,
)
from transcode_planner.policy.video import plan_video_transcode

logger = logging.getLogger(__name__)


class EvaluatorKind(Enum):
    """The evaluators a policy can enable."""

    AUDIO_NORMALIZER = "audio_normalizer"
    VIDEO_PLANNER = "video_planner"


@dataclass(frozen=True)
class PolicySchema:
    """A validated policy: which evaluators run and how they are configured."""

    schema_version: int = 1
    description: str | None = None
    audio_normalizer: AudioNormalizerConfig | None = None
    video_planner: VideoPlannerConfig | None = None

    @property
    def evaluators(self) -> tuple[EvaluatorKind, ...]:
        """Enabled evaluators in evaluation order."""
        kinds: list[EvaluatorKind] = []
        if self.audio_normalizer is not None:
            kinds.append(EvaluatorKind.AUDIO_NORMALIZER)
        if self.video_planner is not None:
            kinds.append(EvaluatorKind.VIDEO_PLANNER)
        return tuple(kinds)


@dataclass(frozen=True)
class EvaluationResult:
    """Plan produced by one evaluator."""

    evaluator: EvaluatorKind
    plan: TranscodePlan


def evaluate_file(media: MediaFile, policy: PolicySchema) -> list[EvaluationResult]:
    """Evaluate a file against every evaluator enabled in the policy.

    Args:
        media: Probe snapshot of the file.
        policy: Validated policy.

    Returns:
        One EvaluationResult per enabled evaluator, audio first.
    """
    results: list[EvaluationResult] = []

    if policy.audio_normalizer is not None:
        plan = evaluate_audio_normalization(media, policy.audio_normalizer)
        results.append(EvaluationResult(EvaluatorKind.AUDIO_NORMALIZER, plan))

    if policy.video_planner is not None:
        plan = plan_video_transcode(media, policy.video_planner)
        results.append(EvaluationResult(EvaluatorKind.VIDEO_PLANNER, plan))

    media_path = str(media.path) if media.path else None
    for result in results:
        logger.info(
            "%s plan: %s",
            result.evaluator.value,
            "process" if result.plan.should_process else "skip",
            extra={"evaluator": result.evaluator.value, "media_path": media_path},
        )
    return results
