"""Appliers — write an accepted recommendation's changes into the plan.

One applier per recommendation type, dispatched through ``_APPLIERS``.
Every applier resolves its target inside the recommendation's plan,
computes the new values, appends exactly one audit entry per entity it
changes and saves that entity back through the repository. Callers are
expected to run ``apply_recommendation`` inside
``repository.transaction(plan_id)``.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, timedelta
from typing import Any, Callable

from adaptive_engine.exceptions import InvalidReferenceError
from adaptive_engine.models.enums import (
    INSERTED_OTHER_INTENSITY_MOD,
    INSERTED_OTHER_VOLUME_MOD,
    INSERTED_RECOVERY_INTENSITY_MOD,
    INSERTED_RECOVERY_VOLUME_MOD,
    PhaseType,
    RecommendationType,
    WorkoutStatus,
)
from adaptive_engine.models.plan import AuditEntry, Phase, WeeklyTarget, Workout
from adaptive_engine.models.recommendation import (
    PhaseExtension,
    PhaseInsert,
    PhaseShorten,
    ProposedChanges,
    Recommendation,
    UnsupportedChanges,
    WeekTypeChange,
    WeekVolumeAdjust,
    WorkoutIntensityScale,
    WorkoutSkip,
    WorkoutSubstitute,
)
from adaptive_engine.repository import PlanRepository

logger = logging.getLogger(__name__)

Applier = Callable[[PlanRepository, Recommendation, Any, date], None]


def _audit(
    today: date,
    change_type: str,
    before: dict[str, Any],
    after: dict[str, Any],
    rec: Recommendation,
) -> AuditEntry:
    return AuditEntry(
        date=today,
        change_type=change_type,
        before=before,
        after=after,
        recommendation_id=rec.id,
    )


def _require_phase(repository: PlanRepository, rec: Recommendation, phase_id: str | None) -> Phase:
    if not phase_id:
        raise InvalidReferenceError(f"{rec.recommendation_type} requires a target phase")
    phase = repository.get_phase(rec.plan_id, phase_id)
    if phase is None:
        raise InvalidReferenceError(f"Phase {phase_id} not found in plan {rec.plan_id}")
    return phase


def _require_week(repository: PlanRepository, rec: Recommendation) -> WeeklyTarget:
    if not rec.target_week_id:
        raise InvalidReferenceError(f"{rec.recommendation_type} requires a target week")
    week = repository.get_week(rec.plan_id, rec.target_week_id)
    if week is None:
        raise InvalidReferenceError(f"Week {rec.target_week_id} not found in plan {rec.plan_id}")
    return week


def _require_workout(repository: PlanRepository, rec: Recommendation) -> Workout:
    if not rec.target_workout_id:
        raise InvalidReferenceError(f"{rec.recommendation_type} requires a target workout")
    workout = repository.get_workout(rec.plan_id, rec.target_workout_id)
    if workout is None:
        raise InvalidReferenceError(
            f"Workout {rec.target_workout_id} not found in plan {rec.plan_id}"
        )
    return workout


# ---------------------------------------------------------------------------
# Phase appliers
# ---------------------------------------------------------------------------


def _move_phase_end(
    repository: PlanRepository,
    rec: Recommendation,
    new_end_date: date,
    change_type: str,
    today: date,
) -> None:
    phase = _require_phase(repository, rec, rec.target_phase_id)
    if new_end_date < phase.start_date:
        raise InvalidReferenceError(
            f"New end date {new_end_date.isoformat()} is before phase start "
            f"{phase.start_date.isoformat()}"
        )
    previous_end = phase.end_date
    phase.original_end_date = previous_end
    phase.end_date = new_end_date
    phase.adaptation_history.append(
        _audit(
            today,
            change_type,
            {"end_date": previous_end.isoformat()},
            {"end_date": new_end_date.isoformat()},
            rec,
        )
    )
    repository.save_phase(rec.plan_id, phase)


def apply_phase_extension(
    repository: PlanRepository, rec: Recommendation, changes: PhaseExtension, today: date
) -> None:
    _move_phase_end(repository, rec, changes.new_end_date, "extension", today)


def apply_phase_shorten(
    repository: PlanRepository, rec: Recommendation, changes: PhaseShorten, today: date
) -> None:
    _move_phase_end(repository, rec, changes.new_end_date, "shorten", today)


def apply_phase_insert(
    repository: PlanRepository, rec: Recommendation, changes: PhaseInsert, today: date
) -> None:
    """Insert a new phase directly after the reference phase.

    Later phases are re-indexed (order_index + 1) but keep their dates.
    """
    if changes.duration_days <= 0:
        raise InvalidReferenceError("phase_insert requires a positive duration_days")

    reference_id = changes.insert_after_phase_id or rec.target_phase_id
    reference = _require_phase(repository, rec, reference_id)
    plan = repository.get_plan(rec.plan_id)
    if plan is None:
        raise InvalidReferenceError(f"Plan {rec.plan_id} not found")

    start = reference.end_date + timedelta(days=1)
    end = start + timedelta(days=changes.duration_days - 1)
    new_index = reference.order_index + 1

    for later in plan.phases_after(reference):
        previous_index = later.order_index
        later.order_index = previous_index + 1
        later.adaptation_history.append(
            _audit(
                today,
                "reindexed",
                {"order_index": previous_index},
                {"order_index": later.order_index},
                rec,
            )
        )
        repository.save_phase(rec.plan_id, later)

    if changes.phase_type is PhaseType.RECOVERY:
        volume_mod, intensity_mod = INSERTED_RECOVERY_VOLUME_MOD, INSERTED_RECOVERY_INTENSITY_MOD
    else:
        volume_mod, intensity_mod = INSERTED_OTHER_VOLUME_MOD, INSERTED_OTHER_INTENSITY_MOD

    inserted = Phase(
        id=str(uuid.uuid4()),
        plan_id=rec.plan_id,
        name=f"Inserted {changes.phase_type.value.capitalize()}",
        phase_type=changes.phase_type,
        order_index=new_index,
        start_date=start,
        end_date=end,
        volume_modifier=volume_mod,
        intensity_modifier=intensity_mod,
    )
    inserted.adaptation_history.append(
        _audit(
            today,
            "inserted",
            {},
            {
                "phase_type": changes.phase_type.value,
                "start_date": start.isoformat(),
                "end_date": end.isoformat(),
                "order_index": new_index,
                "reason": changes.reason,
            },
            rec,
        )
    )
    repository.insert_phase(rec.plan_id, inserted)

    reference.adaptation_history.append(
        _audit(
            today,
            "phase_inserted_after",
            {},
            {"inserted_phase_id": inserted.id},
            rec,
        )
    )
    repository.save_phase(rec.plan_id, reference)


# ---------------------------------------------------------------------------
# Week appliers
# ---------------------------------------------------------------------------


def apply_week_volume_adjust(
    repository: PlanRepository, rec: Recommendation, changes: WeekVolumeAdjust, today: date
) -> None:
    week = _require_week(repository, rec)
    factor = 1 + changes.volume_percentage_change / 100
    before = {"target_hours": week.target_hours, "target_tss": week.target_tss}

    if changes.target_hours is not None:
        week.target_hours = changes.target_hours
    else:
        week.target_hours = round(week.target_hours * factor, 1)
    if changes.target_tss is not None:
        week.target_tss = changes.target_tss
    else:
        week.target_tss = round(week.target_tss * factor)

    week.adaptation_adjustments.append(
        _audit(
            today,
            "volume_adjust",
            before,
            {
                "target_hours": week.target_hours,
                "target_tss": week.target_tss,
                "volume_percentage_change": changes.volume_percentage_change,
            },
            rec,
        )
    )
    repository.save_week(rec.plan_id, week)


def apply_week_type_change(
    repository: PlanRepository, rec: Recommendation, changes: WeekTypeChange, today: date
) -> None:
    week = _require_week(repository, rec)
    previous = week.week_type
    week.week_type = changes.proposed_type
    week.adaptation_adjustments.append(
        _audit(
            today,
            "week_type_change",
            {"week_type": previous.value},
            {"week_type": changes.proposed_type.value},
            rec,
        )
    )
    repository.save_week(rec.plan_id, week)


# ---------------------------------------------------------------------------
# Workout appliers
# ---------------------------------------------------------------------------


def apply_workout_intensity_scale(
    repository: PlanRepository, rec: Recommendation, changes: WorkoutIntensityScale, today: date
) -> None:
    workout = _require_workout(repository, rec)
    before = {
        "intensity": workout.intensity,
        "adjustment_factor": workout.adjustment_factor,
    }
    workout.original_intensity = workout.original_intensity or workout.intensity
    workout.readiness_adjusted = True
    workout.adjustment_factor = changes.adjustment_factor
    if changes.scaled_intensity:
        workout.intensity = changes.scaled_intensity
    workout.adaptation_history.append(
        _audit(
            today,
            "intensity_scale",
            before,
            {
                "intensity": workout.intensity,
                "adjustment_factor": changes.adjustment_factor,
            },
            rec,
        )
    )
    repository.save_workout(rec.plan_id, workout)


def apply_workout_substitute(
    repository: PlanRepository, rec: Recommendation, changes: WorkoutSubstitute, today: date
) -> None:
    workout = _require_workout(repository, rec)
    if not changes.substitutions:
        logger.info("No substitutions to apply for workout %s", workout.id)
        return
    if not workout.exercises:
        raise InvalidReferenceError(f"Workout {workout.id} has no exercises to substitute")

    before = [e.name for e in workout.exercises]
    swaps = {s.original_exercise.lower(): s for s in changes.substitutions}
    for exercise in workout.exercises:
        swap = swaps.get(exercise.name.lower())
        if swap is not None:
            exercise.name = swap.substitute_exercise

    reasons = [s.reason for s in changes.substitutions if s.reason]
    workout.substitution_reason = ", ".join(reasons) or None
    workout.adaptation_history.append(
        _audit(
            today,
            "substitute",
            {"exercises": before},
            {"exercises": [e.name for e in workout.exercises]},
            rec,
        )
    )
    repository.save_workout(rec.plan_id, workout)


def apply_workout_skip(
    repository: PlanRepository, rec: Recommendation, changes: WorkoutSkip, today: date
) -> None:
    workout = _require_workout(repository, rec)
    previous = workout.status
    workout.status = WorkoutStatus.SKIPPED
    workout.adaptation_history.append(
        _audit(
            today,
            "skip",
            {"status": previous.value},
            {"status": WorkoutStatus.SKIPPED.value, "reason": changes.reason},
            rec,
        )
    )
    repository.save_workout(rec.plan_id, workout)


_APPLIERS: dict[RecommendationType, Applier] = {
    RecommendationType.PHASE_EXTENSION: apply_phase_extension,
    RecommendationType.PHASE_SHORTEN: apply_phase_shorten,
    RecommendationType.PHASE_INSERT: apply_phase_insert,
    RecommendationType.WEEK_VOLUME_ADJUST: apply_week_volume_adjust,
    RecommendationType.WEEK_TYPE_CHANGE: apply_week_type_change,
    RecommendationType.WORKOUT_INTENSITY_SCALE: apply_workout_intensity_scale,
    RecommendationType.WORKOUT_SUBSTITUTE: apply_workout_substitute,
    RecommendationType.WORKOUT_SKIP: apply_workout_skip,
}


def apply_recommendation(
    repository: PlanRepository,
    rec: Recommendation,
    changes: ProposedChanges,
    today: date,
) -> bool:
    """Apply ``changes`` on behalf of ``rec``.

    Args:
        repository: Plan storage; the caller owns the surrounding transaction.
        rec: The recommendation being accepted or modified.
        changes: The payload to apply (proposed or caller-modified).
        today: Date stamped on the audit entries.

    Returns:
        True when plan entities were changed, False for the documented
        no-op on recommendation types this engine does not support.

    Raises:
        InvalidReferenceError: The target does not exist in the plan or the
            payload is incomplete.
    """
    if isinstance(changes, UnsupportedChanges):
        logger.warning(
            "Recommendation %s has unsupported type %s; nothing applied",
            rec.id,
            changes.type_name,
        )
        return False

    applier = _APPLIERS[changes.recommendation_type]
    applier(repository, rec, changes, today)
    return True
