"""Tests for the policy evaluation entry point."""

import logging

from transcode_planner.policy import (
    AudioNormalizerConfig,
    EvaluatorKind,
    PolicySchema,
    VideoPlannerConfig,
    evaluate_file,
)


class TestEvaluateFile:
    """Tests for evaluate_file()."""

    def test_runs_both_evaluators_audio_first(self, truehd_eac3_media):
        policy = PolicySchema(
            audio_normalizer=AudioNormalizerConfig(),
            video_planner=VideoPlannerConfig(),
        )

        results = evaluate_file(truehd_eac3_media, policy)

        assert [r.evaluator for r in results] == [
            EvaluatorKind.AUDIO_NORMALIZER,
            EvaluatorKind.VIDEO_PLANNER,
        ]
        assert all(r.plan.should_process for r in results)

    def test_evaluations_are_independent(self, truehd_eac3_media):
        """Each evaluator sees the same input regardless of the other."""
        both = evaluate_file(
            truehd_eac3_media,
            PolicySchema(
                audio_normalizer=AudioNormalizerConfig(),
                video_planner=VideoPlannerConfig(),
            ),
        )
        video_only = evaluate_file(
            truehd_eac3_media, PolicySchema(video_planner=VideoPlannerConfig())
        )

        assert both[1].plan == video_only[0].plan

    def test_no_evaluators(self, truehd_eac3_media):
        assert evaluate_file(truehd_eac3_media, PolicySchema()) == []

    def test_input_is_not_mutated(self, truehd_eac3_media):
        before = truehd_eac3_media.streams

        evaluate_file(
            truehd_eac3_media, PolicySchema(audio_normalizer=AudioNormalizerConfig())
        )

        assert truehd_eac3_media.streams == before

    def test_result_records_carry_plan_context(self, truehd_eac3_media, caplog):
        policy = PolicySchema(
            audio_normalizer=AudioNormalizerConfig(),
            video_planner=VideoPlannerConfig(),
        )

        with caplog.at_level(logging.INFO, logger="transcode_planner.policy"):
            evaluate_file(truehd_eac3_media, policy)

        records = [r for r in caplog.records if hasattr(r, "evaluator")]
        assert [(r.evaluator, r.media_path) for r in records] == [
            ("audio_normalizer", "/media/movie.mkv"),
            ("video_planner", "/media/movie.mkv"),
        ]
        assert records[0].getMessage() == "audio_normalizer plan: process"
