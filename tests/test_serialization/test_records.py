"""Tests for plain-dict records and payload parsing."""

from __future__ import annotations

import json
from datetime import date, datetime, timezone

import pytest

from adaptive_engine.exceptions import InvalidReferenceError
from adaptive_engine.math.deload import evaluate_deload_need
from adaptive_engine.math.readiness import calculate_readiness_score
from adaptive_engine.models.enums import PhaseType, Priority, RecommendationStatus, WeekType
from adaptive_engine.models.preview import (
    RecommendationPreview,
    TimelineImpact,
    TrainingLoadProjection,
)
from adaptive_engine.models.recommendation import (
    PhaseExtension,
    PhaseInsert,
    Recommendation,
    UnsupportedChanges,
    WeekTypeChange,
    WeekVolumeAdjust,
    WorkoutIntensityScale,
    WorkoutSubstitute,
)
from adaptive_engine.serialization import (
    changes_to_dict,
    parse_changes,
    recommendation_to_record,
    record_to_recommendation,
)
from adaptive_engine.serialization.records import (
    assessment_from_record,
    baseline_from_record,
    daily_loads_from_records,
    deload_to_record,
    parse_date,
    preview_to_record,
    readiness_result_to_record,
)


class TestParseChanges:
    def test_phase_extension(self) -> None:
        changes = parse_changes(
            "phase_extension", {"new_end_date": "2026-03-22", "extension_days": 7}
        )
        assert changes == PhaseExtension(new_end_date=date(2026, 3, 22), extension_days=7)

    def test_proposed_end_date_alias(self) -> None:
        changes = parse_changes("phase_shorten", {"proposed_end_date": "2026-03-12"})
        assert changes.new_end_date == date(2026, 3, 12)

    def test_phase_insert(self) -> None:
        changes = parse_changes(
            "phase_insert",
            {"phase_type": "recovery", "duration_days": 7, "insert_after_phase_id": "phase-base"},
        )
        assert isinstance(changes, PhaseInsert)
        assert changes.phase_type is PhaseType.RECOVERY
        assert changes.shifts_remaining_phases is True

    def test_week_volume_needs_a_target(self) -> None:
        with pytest.raises(InvalidReferenceError):
            parse_changes("week_volume_adjust", {})
        changes = parse_changes("week_volume_adjust", {"target_hours": 6})
        assert changes == WeekVolumeAdjust(volume_percentage_change=0.0, target_hours=6.0)

    def test_week_type_change(self) -> None:
        changes = parse_changes("week_type_change", {"proposed_type": "deload"})
        assert changes == WeekTypeChange(proposed_type=WeekType.DELOAD)

    def test_substitutions(self) -> None:
        changes = parse_changes(
            "workout_substitute",
            {"substitutions": [{"original_exercise": "Back Squat", "substitute_exercise": "Hack Squat"}]},
        )
        assert isinstance(changes, WorkoutSubstitute)
        assert changes.substitutions[0].substitute_exercise == "Hack Squat"

    @pytest.mark.parametrize(
        "type_name, payload",
        [
            ("phase_extension", {}),
            ("phase_extension", {"new_end_date": "next tuesday"}),
            ("phase_insert", {"phase_type": "holiday", "duration_days": 7}),
            ("phase_insert", {"phase_type": "recovery"}),
            ("week_type_change", {"proposed_type": "vacation"}),
            ("workout_intensity_scale", {}),
            ("workout_intensity_scale", {"adjustment_factor": 0}),
            ("workout_intensity_scale", {"adjustment_factor": "lots"}),
            ("workout_substitute", {"substitutions": "Back Squat"}),
            ("workout_substitute", {"substitutions": ["Back Squat"]}),
            ("workout_skip", ["Back Squat"]),
            ("workout_substitute", {"substitutions": [{"original_exercise": "Back Squat"}]}),
        ],
    )
    def test_invalid_payloads(self, type_name: str, payload: dict) -> None:
        with pytest.raises(InvalidReferenceError):
            parse_changes(type_name, payload)

    def test_unknown_type_kept_raw(self) -> None:
        changes = parse_changes("workout_reschedule", {"new_date": "2026-03-06"})
        assert changes == UnsupportedChanges("workout_reschedule", {"new_date": "2026-03-06"})
        assert changes_to_dict(changes) == {"new_date": "2026-03-06"}

    def test_skip_accepts_empty(self) -> None:
        assert parse_changes("workout_skip", None).reason == ""


class TestRecommendationRecords:
    def _rec(self) -> Recommendation:
        return Recommendation(
            id="rec-1",
            plan_id="plan-1",
            recommendation_type="workout_intensity_scale",
            proposed_changes=WorkoutIntensityScale(0.85, "hard", "moderate"),
            target_workout_id="workout-strength",
            status=RecommendationStatus.MODIFIED,
            priority=Priority.RECOVERY,
            reasoning="Readiness is 30/100.",
            confidence=0.75,
            trigger_rule_id="readiness_intensity",
            trigger_data={"readiness_score": 30},
            created_at=datetime(2026, 3, 4, 6, 0, tzinfo=timezone.utc),
            responded_at=datetime(2026, 3, 4, 7, 0, tzinfo=timezone.utc),
            applied_at=datetime(2026, 3, 4, 7, 0, tzinfo=timezone.utc),
            user_notes="Going easier still",
            modified_changes=WorkoutIntensityScale(0.75, "hard", "easy"),
        )

    def test_record_is_json_ready(self) -> None:
        record = recommendation_to_record(self._rec())
        json.dumps(record)
        assert record["status"] == "modified"
        assert record["priority"] == 1
        assert record["proposed_changes"]["adjustment_factor"] == 0.85
        assert record["created_at"] == "2026-03-04T06:00:00+00:00"

    def test_record_round_trip(self) -> None:
        rec = self._rec()
        assert record_to_recommendation(recommendation_to_record(rec)) == rec

    def test_unknown_type_survives_round_trip(self) -> None:
        record = {
            "id": "rec-9",
            "plan_id": "plan-1",
            "recommendation_type": "workout_reschedule",
            "proposed_changes": {"new_date": "2026-03-06"},
        }
        rec = record_to_recommendation(record)
        assert isinstance(rec.proposed_changes, UnsupportedChanges)
        assert rec.status is RecommendationStatus.PENDING
        assert recommendation_to_record(rec)["proposed_changes"] == {"new_date": "2026-03-06"}


class TestInputRecords:
    def test_parse_date(self) -> None:
        assert parse_date("2026-03-04T08:30:00") == date(2026, 3, 4)
        assert parse_date(datetime(2026, 3, 4, 8)) == date(2026, 3, 4)
        with pytest.raises(ValueError):
            parse_date(20260304)

    def test_daily_loads_accepts_tss_alias(self) -> None:
        samples = daily_loads_from_records(
            [{"date": "2026-03-03", "tss": 55}, {"date": "2026-03-04", "training_stress": 60}]
        )
        assert [s.training_stress for s in samples] == [55.0, 60.0]

    def test_baseline_and_assessment(self) -> None:
        assert baseline_from_record(None) is None
        assert baseline_from_record({"avg_hrv": 60}).avg_hrv == 60
        assessment = assessment_from_record("athlete-1", {"date": "2026-03-04", "sleep_hours": 7})
        assert assessment.subjective_readiness == 5.0
        assert assessment.sleep_hours == 7

    def test_result_records(self, assessment_factory) -> None:
        record = readiness_result_to_record(calculate_readiness_score(assessment_factory(5)))
        assert record["recommendation"] == "maintain"
        assert list(record["factors"]) == ["subjective"]
        deload = deload_to_record(evaluate_deload_need(tsb=-30.0))
        assert deload["severity"] == "severe"
        assert deload["triggers"][0]["type"] == "tsb"
        json.dumps(deload)

    def test_preview_record(self) -> None:
        preview = RecommendationPreview(
            recommendation_id="rec-1",
            recommendation_type="phase_extension",
            training_load_projection=TrainingLoadProjection(-12.0, -8.5, -5.0),
            timeline_impact=TimelineImpact(date(2026, 3, 15), date(2026, 3, 22), 7),
        )
        record = preview_to_record(preview)
        assert record["timeline_impact"]["projected_end_date"] == "2026-03-22"
        assert record["training_load_projection"]["projected_tsb_7_days"] == -8.5
        assert record["affected_items"] == {"phases": [], "weeks": [], "workouts": []}
        json.dumps(record)
