"""Deload need evaluation.

Four independent triggers: form (TSB), weekly volume above the maximum
recoverable volume (MRV) for several muscles, several stalled exercises,
and a run of low recovery days. Severity and deload parameters follow from
which triggers fired.

Reference:
    Israetel, Hoffmann & Smith. Scientific Principles of Hypertrophy
    Training (MRV and deload guidelines).
"""

from __future__ import annotations

from typing import Sequence

from adaptive_engine.config import DEFAULT_CONFIG, DeloadThresholds
from adaptive_engine.models.deload import (
    DeloadRecommendation,
    DeloadTrigger,
    PlateauedExercise,
)
from adaptive_engine.models.enums import (
    TRAILING_WEEK_DAYS,
    DeloadSeverity,
    DeloadTriggerType,
    DeloadType,
)

# (deload type, volume reduction, intensity reduction, duration days)
_FULL_DELOAD = (DeloadType.FULL, 0.5, 0.15, 7)
_VOLUME_DELOAD = (DeloadType.VOLUME, 0.4, 0.0, 5)
_INTENSITY_DELOAD = (DeloadType.INTENSITY, 0.0, 0.1, 5)
_DEFAULT_DELOAD = (DeloadType.VOLUME, 0.3, 0.0, 5)


def _collect_triggers(
    tsb: float | None,
    muscles_over_mrv: Sequence[str],
    plateaued_exercises: Sequence[PlateauedExercise],
    recent_recovery_scores: Sequence[float],
    thresholds: DeloadThresholds,
) -> list[DeloadTrigger]:
    triggers: list[DeloadTrigger] = []

    if tsb is not None and tsb < thresholds.tsb:
        triggers.append(
            DeloadTrigger(
                type=DeloadTriggerType.TSB,
                reason=f"TSB is {tsb}, below threshold of {thresholds.tsb}",
                data={"tsb": tsb, "threshold": thresholds.tsb},
            )
        )

    if len(muscles_over_mrv) >= thresholds.muscles_over_mrv:
        triggers.append(
            DeloadTrigger(
                type=DeloadTriggerType.VOLUME,
                reason=f"{len(muscles_over_mrv)} muscles over MRV: {', '.join(muscles_over_mrv)}",
                data={"muscles": list(muscles_over_mrv), "threshold": thresholds.muscles_over_mrv},
            )
        )

    stalled = [
        e for e in plateaued_exercises if e.weeks_without_progress >= thresholds.plateau_weeks
    ]
    if len(stalled) >= thresholds.plateau_exercises:
        triggers.append(
            DeloadTrigger(
                type=DeloadTriggerType.PLATEAU,
                reason=f"{len(stalled)} exercises plateaued for {thresholds.plateau_weeks}+ weeks",
                data={
                    "exercises": [e.exercise_id for e in stalled],
                    "threshold": thresholds.plateau_weeks,
                },
            )
        )

    last_week = list(recent_recovery_scores)[-TRAILING_WEEK_DAYS:]
    low_days = sum(1 for s in last_week if s < thresholds.low_recovery_score)
    if low_days >= thresholds.low_recovery_days:
        triggers.append(
            DeloadTrigger(
                type=DeloadTriggerType.RECOVERY,
                reason=(
                    f"{low_days} of last {TRAILING_WEEK_DAYS} days had low recovery "
                    f"scores (<{thresholds.low_recovery_score})"
                ),
                data={"low_days": low_days, "threshold": thresholds.low_recovery_days},
            )
        )

    return triggers


def evaluate_deload_need(
    tsb: float | None,
    muscles_over_mrv: Sequence[str] = (),
    plateaued_exercises: Sequence[PlateauedExercise] = (),
    recent_recovery_scores: Sequence[float] = (),
    days_since_last_deload: int | None = None,
    thresholds: DeloadThresholds = DEFAULT_CONFIG.deload,
) -> DeloadRecommendation:
    """Decide whether a deload is warranted and what it should look like.

    Pure function: identical inputs always give an equal result.

    Args:
        tsb: Current form, if known.
        muscles_over_mrv: Muscle groups currently above MRV.
        plateaued_exercises: Exercises with weeks without progress.
        recent_recovery_scores: Recovery/readiness scores, oldest first.
            Only the last 7 are considered.
        days_since_last_deload: Reported back, and noted when recent.
        thresholds: Trigger thresholds.

    Returns:
        DeloadRecommendation. With no triggers ``should_deload`` is False
        and all reductions are zero.
    """
    triggers = _collect_triggers(
        tsb, muscles_over_mrv, plateaued_exercises, recent_recovery_scores, thresholds
    )

    if not triggers:
        return DeloadRecommendation(
            should_deload=False,
            triggers=(),
            severity=DeloadSeverity.MILD,
            deload_type=DeloadType.VOLUME,
            duration_days=0,
            volume_reduction=0.0,
            intensity_reduction=0.0,
            message="No deload needed - continue training as planned",
            days_since_last_deload=days_since_last_deload,
        )

    fired = {t.type for t in triggers}
    severe_tsb = DeloadTriggerType.TSB in fired and tsb is not None and tsb < thresholds.severe_tsb
    if len(triggers) >= 3 or severe_tsb:
        severity = DeloadSeverity.SEVERE
    elif len(triggers) == 2:
        severity = DeloadSeverity.MODERATE
    else:
        severity = DeloadSeverity.MILD

    if severity is DeloadSeverity.SEVERE:
        deload_type, volume_cut, intensity_cut, duration = _FULL_DELOAD
    elif DeloadTriggerType.VOLUME in fired:
        deload_type, volume_cut, intensity_cut, duration = _VOLUME_DELOAD
    elif DeloadTriggerType.PLATEAU in fired:
        deload_type, volume_cut, intensity_cut, duration = _INTENSITY_DELOAD
    else:
        deload_type, volume_cut, intensity_cut, duration = _DEFAULT_DELOAD

    trigger_names = ", ".join(t.type.value for t in triggers)
    message = f"Deload recommended: {severity.value} fatigue detected from {trigger_names}"

    suggestions = [f"Reduce training volume by {round(volume_cut * 100)}%"]
    if intensity_cut > 0:
        suggestions.append(f"Reduce weights by {round(intensity_cut * 100)}%")
    suggestions.append(f"Duration: {duration} days")
    suggestions.append("Focus on mobility, sleep, and nutrition during deload")
    if days_since_last_deload is not None and days_since_last_deload < thresholds.min_days_between:
        suggestions.append(
            f"Last deload was only {days_since_last_deload} days ago - "
            "review programming if fatigue keeps returning this quickly"
        )

    return DeloadRecommendation(
        should_deload=True,
        triggers=tuple(triggers),
        severity=severity,
        deload_type=deload_type,
        duration_days=duration,
        volume_reduction=volume_cut,
        intensity_reduction=intensity_cut,
        message=message,
        suggestions=tuple(suggestions),
        days_since_last_deload=days_since_last_deload,
    )
