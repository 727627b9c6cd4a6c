"""Tests for deload need evaluation."""

from __future__ import annotations

from dataclasses import replace

from adaptive_engine.config import DeloadThresholds
from adaptive_engine.math.deload import evaluate_deload_need
from adaptive_engine.models.deload import PlateauedExercise
from adaptive_engine.models.enums import DeloadSeverity, DeloadTriggerType, DeloadType


class TestDeloadTriggers:
    def test_no_triggers(self) -> None:
        result = evaluate_deload_need(tsb=5.0, recent_recovery_scores=[70, 75, 80])
        assert result.should_deload is False
        assert result.triggers == ()
        assert result.volume_reduction == 0.0
        assert result.intensity_reduction == 0.0
        assert result.duration_days == 0

    def test_tsb_threshold_is_strict(self) -> None:
        assert evaluate_deload_need(tsb=-15.0).should_deload is False
        assert evaluate_deload_need(tsb=-15.1).should_deload is True

    def test_missing_tsb_ignored(self) -> None:
        assert evaluate_deload_need(tsb=None).should_deload is False

    def test_volume_trigger(self) -> None:
        result = evaluate_deload_need(tsb=None, muscles_over_mrv=["quads", "glutes", "chest"])
        assert result.trigger_types == (DeloadTriggerType.VOLUME,)
        assert result.severity is DeloadSeverity.MILD
        assert result.deload_type is DeloadType.VOLUME
        assert result.volume_reduction == 0.4
        assert result.duration_days == 5

    def test_plateau_trigger_intensity_deload(self) -> None:
        stalled = [PlateauedExercise(f"ex-{i}", 2) for i in range(3)]
        result = evaluate_deload_need(tsb=None, plateaued_exercises=stalled)
        assert result.trigger_types == (DeloadTriggerType.PLATEAU,)
        assert result.deload_type is DeloadType.INTENSITY
        assert result.volume_reduction == 0.0
        assert result.intensity_reduction == 0.1

    def test_short_plateaus_do_not_count(self) -> None:
        stalled = [PlateauedExercise(f"ex-{i}", 1) for i in range(5)]
        assert evaluate_deload_need(tsb=None, plateaued_exercises=stalled).should_deload is False

    def test_recovery_only_looks_at_last_week(self) -> None:
        old_bad = [30, 30, 30] + [70] * 7
        assert evaluate_deload_need(tsb=None, recent_recovery_scores=old_bad).should_deload is False

    def test_recovery_trigger_default_deload(self) -> None:
        result = evaluate_deload_need(tsb=None, recent_recovery_scores=[45, 40, 48, 70, 75])
        assert result.trigger_types == (DeloadTriggerType.RECOVERY,)
        assert result.deload_type is DeloadType.VOLUME
        assert result.volume_reduction == 0.3

    def test_two_triggers_moderate(self) -> None:
        result = evaluate_deload_need(tsb=-18.0, recent_recovery_scores=[45, 40, 48])
        assert result.severity is DeloadSeverity.MODERATE


class TestDeloadSeverity:
    def test_severe_scenario(self) -> None:
        result = evaluate_deload_need(
            tsb=-30.0,
            muscles_over_mrv=["quads", "hamstrings", "chest"],
            recent_recovery_scores=[40, 45, 42, 38, 50, 55, 60],
        )
        assert result.should_deload is True
        assert result.severity is DeloadSeverity.SEVERE
        assert result.deload_type is DeloadType.FULL
        assert result.volume_reduction == 0.5
        assert result.intensity_reduction == 0.15
        assert result.duration_days == 7
        assert set(result.trigger_types) == {
            DeloadTriggerType.TSB,
            DeloadTriggerType.VOLUME,
            DeloadTriggerType.RECOVERY,
        }

    def test_very_low_tsb_alone_is_severe(self) -> None:
        result = evaluate_deload_need(tsb=-26.0)
        assert result.severity is DeloadSeverity.SEVERE
        assert result.deload_type is DeloadType.FULL

    def test_pure_function(self) -> None:
        kwargs = dict(
            tsb=-20.0,
            muscles_over_mrv=["quads", "glutes", "lats"],
            recent_recovery_scores=[40, 45, 42],
            days_since_last_deload=12,
        )
        assert evaluate_deload_need(**kwargs) == evaluate_deload_need(**kwargs)

    def test_recent_deload_noted(self) -> None:
        result = evaluate_deload_need(tsb=-20.0, days_since_last_deload=4)
        assert result.days_since_last_deload == 4
        assert any("only 4 days ago" in s for s in result.suggestions)

    def test_custom_thresholds(self) -> None:
        strict = replace(DeloadThresholds(), tsb=-5.0)
        assert evaluate_deload_need(tsb=-8.0, thresholds=strict).should_deload is True
        assert evaluate_deload_need(tsb=-8.0).should_deload is False
