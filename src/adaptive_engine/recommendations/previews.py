"""What-if previews — project a recommendation's impact without applying it.

``build_preview`` only reads the plan it is given; the engine hands it a
detached copy so nothing here can reach stored state. TSB projections use
a simplified linear model (fixed gains per change type), not a rerun of
the load aggregator.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Callable

from adaptive_engine.models.enums import (
    RECOVERY_PHASE_TSB_GAIN_14D,
    RECOVERY_PHASE_TSB_GAIN_7D,
    RECOVERY_WEEK_TSB_GAIN_14D,
    RECOVERY_WEEK_TSB_GAIN_7D,
    RECOVERY_WEEK_VOLUME_FRACTION,
    SKIP_WORKOUT_TSB_GAIN_14D,
    SKIP_WORKOUT_TSB_GAIN_7D,
    RecommendationType,
    WeekType,
)
from adaptive_engine.models.plan import Plan, PlanEvent
from adaptive_engine.models.preview import (
    AffectedItems,
    RecommendationPreview,
    TimelineImpact,
    TrainingLoadProjection,
)
from adaptive_engine.models.recommendation import (
    PhaseExtension,
    PhaseInsert,
    PhaseShorten,
    Recommendation,
    UnsupportedChanges,
    WeekTypeChange,
    WeekVolumeAdjust,
    WorkoutIntensityScale,
    WorkoutSkip,
    WorkoutSubstitute,
)

PreviewBuilder = Callable[[RecommendationPreview, Plan, Recommendation, Any], None]

# Share of an intensity reduction that turns into TSB gain over 7 / 14 days
_INTENSITY_TSS_SHARE = 0.5
_INTENSITY_TSB_SHARE_7D = 0.3
_INTENSITY_TSB_SHARE_14D = 0.5
_SIGNIFICANT_INTENSITY_FACTOR = 0.7
_HIGH_FATIGUE_TSB = -20


def _project(preview: RecommendationPreview, gain_7d: float, gain_14d: float) -> None:
    current = preview.training_load_projection.current_tsb
    preview.training_load_projection.projected_tsb_7_days = round(current + gain_7d, 1)
    preview.training_load_projection.projected_tsb_14_days = round(current + gain_14d, 1)


def _event_risk(events: list[PlanEvent]) -> str:
    return f"May affect preparation for: {', '.join(e.name for e in events)}"


def _preview_phase_extension(
    preview: RecommendationPreview, plan: Plan, rec: Recommendation, changes: PhaseExtension
) -> None:
    phase = plan.find_phase(rec.target_phase_id or "")
    if phase is None:
        return
    original_end = changes.original_end_date or phase.end_date
    preview.affected_items.phases = [phase.id]
    preview.current_state = {"phase_name": phase.name, "end_date": original_end.isoformat()}
    preview.projected_state = {
        "phase_name": phase.name,
        "end_date": changes.new_end_date.isoformat(),
        "extension_days": changes.extension_days,
    }
    preview.timeline_impact = TimelineImpact(
        original_end_date=original_end,
        projected_end_date=changes.new_end_date,
        days_difference=changes.extension_days,
    )
    preview.benefits.append("More time to achieve phase goals")
    preview.benefits.append("Reduces pressure and rushing through progressions")

    later = [p for p in plan.ordered_phases() if p.start_date > phase.end_date]
    if later:
        preview.affected_items.phases.extend(p.id for p in later)
        preview.risks.append(f"{len(later)} subsequent phase(s) will be shifted")
        events = plan.events_on_or_after(phase.end_date)
        if events:
            preview.risks.append(_event_risk(events))


def _preview_phase_shorten(
    preview: RecommendationPreview, plan: Plan, rec: Recommendation, changes: PhaseShorten
) -> None:
    phase = plan.find_phase(rec.target_phase_id or "")
    if phase is None:
        return
    original_end = changes.original_end_date or phase.end_date
    preview.affected_items.phases = [phase.id]
    preview.current_state = {"phase_name": phase.name, "end_date": original_end.isoformat()}
    preview.projected_state = {
        "phase_name": phase.name,
        "end_date": changes.new_end_date.isoformat(),
        "days_shortened": changes.shorten_days,
    }
    preview.timeline_impact = TimelineImpact(
        original_end_date=original_end,
        projected_end_date=changes.new_end_date,
        days_difference=-changes.shorten_days,
    )
    preview.benefits.append("Earlier progression to next training phase")
    preview.benefits.append("Momentum maintained through faster progression")

    later = [p for p in plan.ordered_phases() if p.start_date > phase.end_date]
    if later:
        preview.affected_items.phases.extend(p.id for p in later)
        preview.benefits.append(f"{len(later)} subsequent phase(s) can start earlier")


def _preview_phase_insert(
    preview: RecommendationPreview, plan: Plan, rec: Recommendation, changes: PhaseInsert
) -> None:
    tsb = preview.training_load_projection.current_tsb
    reference = plan.find_phase(changes.insert_after_phase_id or rec.target_phase_id or "")
    start = changes.start_date
    if start is None and reference is not None:
        start = reference.end_date + timedelta(days=1)
    end = changes.end_date
    if end is None and start is not None:
        end = start + timedelta(days=changes.duration_days - 1)

    preview.current_state = {
        "tsb": tsb,
        "readiness": rec.trigger_data.get("avg_readiness_7d"),
        "fatigue_status": "High fatigue" if tsb < _HIGH_FATIGUE_TSB else "Moderate fatigue",
    }
    preview.projected_state = {
        "inserted_phase": {
            "type": changes.phase_type.value,
            "duration_days": changes.duration_days,
            "start_date": start.isoformat() if start else None,
            "end_date": end.isoformat() if end else None,
        }
    }
    preview.timeline_impact = TimelineImpact(days_difference=changes.duration_days)

    if changes.shifts_remaining_phases and reference is not None:
        later = plan.phases_after(reference)
        if later:
            preview.affected_items.phases = [p.id for p in later]
            preview.risks.append(
                f"{len(later)} phase(s) will be shifted by {changes.duration_days} days"
            )

    _project(preview, RECOVERY_PHASE_TSB_GAIN_7D, RECOVERY_PHASE_TSB_GAIN_14D)
    preview.benefits.append("Critical recovery to prevent overtraining")
    preview.benefits.append("TSB expected to improve by 20-30 points")
    preview.benefits.append("Reduced injury risk from fatigue accumulation")
    preview.benefits.append("Better long-term performance trajectory")

    if start is not None:
        events = plan.events_on_or_after(start)
        if events:
            preview.risks.append(_event_risk(events))


def _preview_week_volume_adjust(
    preview: RecommendationPreview, plan: Plan, rec: Recommendation, changes: WeekVolumeAdjust
) -> None:
    week = plan.find_week(rec.target_week_id or "")
    if week is None:
        return
    pct = changes.volume_percentage_change
    factor = 1 + pct / 100
    preview.affected_items.weeks = [week.id]
    preview.current_state = {
        "target_hours": changes.original_hours if changes.original_hours is not None else week.target_hours,
        "target_tss": week.target_tss,
    }
    preview.projected_state = {
        "target_hours": (
            changes.target_hours
            if changes.target_hours is not None
            else round(week.target_hours * factor, 1)
        ),
        "target_tss": round(week.target_tss * factor) if week.target_tss else None,
        "volume_change": f"{'+' if pct > 0 else ''}{pct:g}%",
    }
    if pct < 0:
        preview.benefits.append("More achievable targets may improve compliance")
        preview.benefits.append("Reduced volume aids recovery")
    else:
        preview.benefits.append("Increased training stimulus for continued adaptation")
        preview.risks.append("Higher volume requires adequate recovery capacity")


def _preview_week_type_change(
    preview: RecommendationPreview, plan: Plan, rec: Recommendation, changes: WeekTypeChange
) -> None:
    week = plan.find_week(rec.target_week_id or "")
    if week is None:
        return
    easing = changes.proposed_type in (WeekType.RECOVERY, WeekType.DELOAD)
    fraction = RECOVERY_WEEK_VOLUME_FRACTION if easing else 1.0

    preview.affected_items.weeks = [week.id]
    preview.current_state = {
        "week_type": (changes.original_type or week.week_type).value,
        "target_hours": week.target_hours,
        "target_tss": week.target_tss,
    }
    preview.projected_state = {
        "week_type": changes.proposed_type.value,
        "target_hours": round(week.target_hours * fraction, 1),
        "target_tss": round(week.target_tss * fraction),
    }
    if easing:
        _project(preview, RECOVERY_WEEK_TSB_GAIN_7D, RECOVERY_WEEK_TSB_GAIN_14D)
        preview.benefits.append("TSB expected to improve by ~15-20 points")
        preview.benefits.append("Allows supercompensation from accumulated training")
        preview.benefits.append("Reduces injury risk from fatigue accumulation")

    preview.affected_items.workouts = [
        w.id for w in plan.workouts_between(week.week_start_date, week.week_end_date)
    ]


def _preview_workout_intensity_scale(
    preview: RecommendationPreview, plan: Plan, rec: Recommendation, changes: WorkoutIntensityScale
) -> None:
    workout = plan.find_workout(rec.target_workout_id or "")
    if workout is None:
        return
    factor = changes.adjustment_factor
    reduction_pct = round((1 - factor) * 100)

    preview.affected_items.workouts = [workout.id]
    preview.current_state = {
        "workout": {
            "id": workout.id,
            "title": workout.title,
            "intensity": workout.intensity,
            "duration": workout.target_duration_min,
        }
    }
    preview.projected_state = {
        "workout": {
            "id": workout.id,
            "title": workout.title,
            "intensity": f"{workout.intensity} (reduced by {reduction_pct}%)",
            "duration": workout.target_duration_min,
            "adjustment_factor": factor,
        }
    }

    tss_reduction = reduction_pct * _INTENSITY_TSS_SHARE
    _project(
        preview,
        tss_reduction * _INTENSITY_TSB_SHARE_7D,
        tss_reduction * _INTENSITY_TSB_SHARE_14D,
    )
    preview.benefits.append("Reduced training stress allows better recovery")
    preview.benefits.append("Maintains training consistency while respecting fatigue")
    if factor < _SIGNIFICANT_INTENSITY_FACTOR:
        preview.risks.append("Significant intensity reduction may reduce training stimulus")


def _preview_workout_substitute(
    preview: RecommendationPreview, plan: Plan, rec: Recommendation, changes: WorkoutSubstitute
) -> None:
    workout = plan.find_workout(rec.target_workout_id or "")
    if workout is None:
        return
    swaps = {s.original_exercise.lower(): s.substitute_exercise for s in changes.substitutions}
    preview.affected_items.workouts = [workout.id]
    preview.current_state = {"exercises": [e.name for e in workout.exercises]}
    preview.projected_state = {
        "exercises": [swaps.get(e.name.lower(), e.name) for e in workout.exercises]
    }
    preview.benefits.append("New stimulus to break through the plateau")
    preview.risks.append("Unfamiliar movement may need lighter loads at first")


def _preview_workout_skip(
    preview: RecommendationPreview, plan: Plan, rec: Recommendation, changes: WorkoutSkip
) -> None:
    workout = plan.find_workout(rec.target_workout_id or "")
    if workout is None:
        return
    preview.affected_items.workouts = [workout.id]
    preview.current_state = {"status": workout.status.value}
    preview.projected_state = {"status": "skipped"}
    _project(preview, SKIP_WORKOUT_TSB_GAIN_7D, SKIP_WORKOUT_TSB_GAIN_14D)
    preview.benefits.append("Extra rest when the body is not ready to train")
    preview.risks.append("Missed session reduces this week's training stimulus")


_BUILDERS: dict[RecommendationType, PreviewBuilder] = {
    RecommendationType.PHASE_EXTENSION: _preview_phase_extension,
    RecommendationType.PHASE_SHORTEN: _preview_phase_shorten,
    RecommendationType.PHASE_INSERT: _preview_phase_insert,
    RecommendationType.WEEK_VOLUME_ADJUST: _preview_week_volume_adjust,
    RecommendationType.WEEK_TYPE_CHANGE: _preview_week_type_change,
    RecommendationType.WORKOUT_INTENSITY_SCALE: _preview_workout_intensity_scale,
    RecommendationType.WORKOUT_SUBSTITUTE: _preview_workout_substitute,
    RecommendationType.WORKOUT_SKIP: _preview_workout_skip,
}


def build_preview(plan: Plan, rec: Recommendation, current_tsb: float) -> RecommendationPreview:
    """Project the effect of applying ``rec`` to ``plan``.

    Args:
        plan: A copy of the recommendation's plan. Read, never written.
        rec: The recommendation to preview (its effective changes are used).
        current_tsb: Today's Training Stress Balance.

    Returns:
        A RecommendationPreview. Targets that no longer resolve produce an
        empty preview with flat TSB rather than an error.
    """
    preview = RecommendationPreview(
        recommendation_id=rec.id,
        recommendation_type=rec.recommendation_type,
        training_load_projection=TrainingLoadProjection(
            current_tsb=current_tsb,
            projected_tsb_7_days=current_tsb,
            projected_tsb_14_days=current_tsb,
        ),
        affected_items=AffectedItems(),
    )

    changes = rec.effective_changes
    if isinstance(changes, UnsupportedChanges):
        preview.risks.append("Preview not available for this recommendation type")
        return preview

    _BUILDERS[changes.recommendation_type](preview, plan, rec, changes)
    return preview
