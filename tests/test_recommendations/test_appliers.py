"""Tests for the per-type recommendation appliers."""

from __future__ import annotations

from datetime import date

import pytest

from adaptive_engine.exceptions import InvalidReferenceError
from adaptive_engine.models.enums import PhaseType, WeekType, WorkoutStatus
from adaptive_engine.models.recommendation import (
    PhaseExtension,
    PhaseInsert,
    PhaseShorten,
    Recommendation,
    Substitution,
    UnsupportedChanges,
    WeekTypeChange,
    WeekVolumeAdjust,
    WorkoutIntensityScale,
    WorkoutSkip,
    WorkoutSubstitute,
    changes_type_name,
)
from adaptive_engine.recommendations import apply_recommendation
from adaptive_engine.repository import InMemoryStore

TODAY = date(2026, 3, 4)


def _rec(changes, **targets) -> Recommendation:
    return Recommendation(
        id="rec-1",
        plan_id="plan-1",
        recommendation_type=changes_type_name(changes),
        proposed_changes=changes,
        **targets,
    )


def _apply(store: InMemoryStore, changes, **targets) -> bool:
    rec = _rec(changes, **targets)
    return apply_recommendation(store, rec, rec.proposed_changes, TODAY)


class TestPhaseAppliers:
    def test_extension(self, store: InMemoryStore) -> None:
        changes = PhaseExtension(new_end_date=date(2026, 3, 22), extension_days=7)
        assert _apply(store, changes, target_phase_id="phase-base") is True
        phase = store.get_phase("plan-1", "phase-base")
        assert phase.end_date == date(2026, 3, 22)
        assert phase.original_end_date == date(2026, 3, 15)
        [entry] = phase.adaptation_history.entries
        assert entry.change_type == "extension"
        assert entry.before == {"end_date": "2026-03-15"}
        assert entry.after == {"end_date": "2026-03-22"}
        assert entry.recommendation_id == "rec-1"
        assert entry.date == TODAY

    def test_shorten(self, store: InMemoryStore) -> None:
        changes = PhaseShorten(new_end_date=date(2026, 3, 12), shorten_days=3)
        _apply(store, changes, target_phase_id="phase-base")
        phase = store.get_phase("plan-1", "phase-base")
        assert phase.end_date == date(2026, 3, 12)
        assert phase.adaptation_history.entries[-1].change_type == "shorten"

    def test_end_before_start_rejected(self, store: InMemoryStore) -> None:
        changes = PhaseShorten(new_end_date=date(2026, 1, 1), shorten_days=73)
        with pytest.raises(InvalidReferenceError):
            _apply(store, changes, target_phase_id="phase-base")

    def test_missing_phase(self, store: InMemoryStore) -> None:
        changes = PhaseExtension(new_end_date=date(2026, 3, 22))
        with pytest.raises(InvalidReferenceError):
            _apply(store, changes, target_phase_id="phase-gone")
        with pytest.raises(InvalidReferenceError):
            _apply(store, changes)

    def test_insert_recovery_phase(self, store: InMemoryStore) -> None:
        changes = PhaseInsert(
            phase_type=PhaseType.RECOVERY,
            duration_days=7,
            insert_after_phase_id="phase-base",
            reason="fatigue_accumulation",
        )
        _apply(store, changes, target_phase_id="phase-base")
        plan = store.get_plan("plan-1")
        ordered = plan.ordered_phases()
        assert [p.order_index for p in ordered] == [0, 1, 2, 3]
        inserted = ordered[1]
        assert inserted.phase_type is PhaseType.RECOVERY
        assert inserted.name == "Inserted Recovery"
        assert inserted.start_date == date(2026, 3, 16)
        assert inserted.end_date == date(2026, 3, 22)
        assert inserted.volume_modifier == 0.5
        assert inserted.intensity_modifier == 0.6
        assert inserted.adaptation_history.entries[0].change_type == "inserted"
        assert inserted.adaptation_history.entries[0].after["reason"] == "fatigue_accumulation"

        build = plan.find_phase("phase-build")
        assert build.order_index == 2
        assert build.start_date == date(2026, 3, 16)
        [reindexed] = build.adaptation_history.entries
        assert reindexed.before == {"order_index": 1}
        assert reindexed.after == {"order_index": 2}
        assert plan.find_phase("phase-peak").order_index == 3

        base = plan.find_phase("phase-base")
        [note] = base.adaptation_history.entries
        assert note.change_type == "phase_inserted_after"
        assert note.after == {"inserted_phase_id": inserted.id}

    def test_insert_other_phase_modifiers(self, store: InMemoryStore) -> None:
        changes = PhaseInsert(phase_type=PhaseType.TRANSITION, duration_days=3)
        _apply(store, changes, target_phase_id="phase-peak")
        plan = store.get_plan("plan-1")
        inserted = plan.ordered_phases()[-1]
        assert inserted.order_index == 3
        assert inserted.volume_modifier == 0.7
        assert inserted.intensity_modifier == 0.8
        assert inserted.start_date == date(2026, 5, 18)

    def test_insert_requires_duration(self, store: InMemoryStore) -> None:
        changes = PhaseInsert(phase_type=PhaseType.RECOVERY, duration_days=0)
        with pytest.raises(InvalidReferenceError):
            _apply(store, changes, target_phase_id="phase-base")


class TestWeekAppliers:
    def test_volume_explicit_targets(self, store: InMemoryStore) -> None:
        changes = WeekVolumeAdjust(volume_percentage_change=-15.0, target_hours=6.8, target_tss=340)
        _apply(store, changes, target_week_id="week-1")
        week = store.get_week("plan-1", "week-1")
        assert week.target_hours == 6.8
        assert week.target_tss == 340
        [entry] = week.adaptation_adjustments.entries
        assert entry.change_type == "volume_adjust"
        assert entry.before == {"target_hours": 8.0, "target_tss": 400.0}
        assert entry.after["volume_percentage_change"] == -15.0

    def test_volume_scaled_by_percentage(self, store: InMemoryStore) -> None:
        _apply(store, WeekVolumeAdjust(volume_percentage_change=25.0), target_week_id="week-1")
        week = store.get_week("plan-1", "week-1")
        assert week.target_hours == 10.0
        assert week.target_tss == 500

    def test_week_type_change(self, store: InMemoryStore) -> None:
        _apply(store, WeekTypeChange(proposed_type=WeekType.RECOVERY), target_week_id="week-1")
        week = store.get_week("plan-1", "week-1")
        assert week.week_type is WeekType.RECOVERY
        entry = week.adaptation_adjustments.entries[0]
        assert entry.before == {"week_type": "normal"}
        assert entry.after == {"week_type": "recovery"}

    def test_missing_week(self, store: InMemoryStore) -> None:
        with pytest.raises(InvalidReferenceError):
            _apply(store, WeekTypeChange(proposed_type=WeekType.RECOVERY), target_week_id="nope")


class TestWorkoutAppliers:
    def test_intensity_scale(self, store: InMemoryStore) -> None:
        changes = WorkoutIntensityScale(adjustment_factor=0.85, scaled_intensity="moderate")
        _apply(store, changes, target_workout_id="workout-strength")
        workout = store.get_workout("plan-1", "workout-strength")
        assert workout.intensity == "moderate"
        assert workout.original_intensity == "hard"
        assert workout.readiness_adjusted is True
        assert workout.adjustment_factor == 0.85
        assert workout.adaptation_history.entries[0].change_type == "intensity_scale"

    def test_second_scale_keeps_first_original(self, store: InMemoryStore) -> None:
        _apply(store, WorkoutIntensityScale(0.9, scaled_intensity="moderate"),
               target_workout_id="workout-strength")
        _apply(store, WorkoutIntensityScale(0.8, scaled_intensity="easy"),
               target_workout_id="workout-strength")
        workout = store.get_workout("plan-1", "workout-strength")
        assert workout.original_intensity == "hard"
        assert workout.intensity == "easy"
        assert len(workout.adaptation_history) == 2

    def test_substitute(self, store: InMemoryStore) -> None:
        changes = WorkoutSubstitute(
            substitutions=(Substitution("back squat", "Front Squat", "No progress in 6 sessions"),)
        )
        _apply(store, changes, target_workout_id="workout-strength")
        workout = store.get_workout("plan-1", "workout-strength")
        assert [e.name for e in workout.exercises] == ["Front Squat", "Romanian Deadlift"]
        assert workout.substitution_reason == "No progress in 6 sessions"
        entry = workout.adaptation_history.entries[0]
        assert entry.before == {"exercises": ["Back Squat", "Romanian Deadlift"]}

    def test_empty_substitution_is_noop(self, store: InMemoryStore) -> None:
        _apply(store, WorkoutSubstitute(), target_workout_id="workout-strength")
        workout = store.get_workout("plan-1", "workout-strength")
        assert len(workout.adaptation_history) == 0

    def test_substitute_without_exercises(self, store: InMemoryStore) -> None:
        changes = WorkoutSubstitute(substitutions=(Substitution("Tempo", "Fartlek"),))
        with pytest.raises(InvalidReferenceError):
            _apply(store, changes, target_workout_id="workout-run")

    def test_skip(self, store: InMemoryStore) -> None:
        _apply(store, WorkoutSkip(reason="Readiness 15"), target_workout_id="workout-strength")
        workout = store.get_workout("plan-1", "workout-strength")
        assert workout.status is WorkoutStatus.SKIPPED
        entry = workout.adaptation_history.entries[0]
        assert entry.before == {"status": "suggested"}
        assert entry.after == {"status": "skipped", "reason": "Readiness 15"}

    def test_missing_workout(self, store: InMemoryStore) -> None:
        with pytest.raises(InvalidReferenceError):
            _apply(store, WorkoutSkip(), target_workout_id="nope")


class TestUnsupported:
    def test_unknown_type_is_noop(self, store: InMemoryStore) -> None:
        before = store.get_plan("plan-1")
        changes = UnsupportedChanges("workout_reschedule", {"new_date": "2026-03-06"})
        assert _apply(store, changes, target_workout_id="workout-strength") is False
        assert store.get_plan("plan-1") == before
