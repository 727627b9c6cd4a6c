"""RECOVERY rule: scale or skip today's workouts when readiness is low.

Thresholds:
    readiness < 50 → scale intensity by the readiness adjustment factor
    readiness < 25 → skip the workout
"""

from __future__ import annotations

from adaptive_engine.config import DEFAULT_CONFIG, ReadinessPolicy
from adaptive_engine.models.context import AdaptationContext
from adaptive_engine.models.enums import Priority
from adaptive_engine.models.recommendation import (
    RecommendationDraft,
    WorkoutIntensityScale,
    WorkoutSkip,
)
from adaptive_engine.rules.base import TriggerRule

_INTENSITY_STEPS = ("easy", "moderate", "hard", "very_hard")
MAINTAIN_BAND_SCALE = 0.9


def scale_intensity_label(intensity: str, factor: float) -> str:
    """Step a workout's intensity label down according to the factor."""
    if intensity not in _INTENSITY_STEPS:
        return intensity
    index = _INTENSITY_STEPS.index(intensity)
    if factor < 0.8:
        index -= 2
    elif factor < 1.0:
        index -= 1
    return _INTENSITY_STEPS[max(0, index)]


class ReadinessIntensityRule(TriggerRule):
    """Targets the first open workout scheduled on the reference date."""

    rule_id = "readiness_intensity"
    version = "1.0.0"
    priority = Priority.RECOVERY
    required_data = ["readiness"]

    def __init__(self, policy: ReadinessPolicy = DEFAULT_CONFIG.readiness) -> None:
        self.policy = policy

    def evaluate(self, context: AdaptationContext) -> RecommendationDraft | None:
        readiness = context.readiness
        workouts = context.todays_workouts
        if readiness is None or not workouts:
            return None
        if readiness.score >= self.policy.day_of_adjustment_threshold:
            return None

        workout = workouts[0]
        label = workout.title or "today's workout"
        trigger_data = {"readiness_score": readiness.score}

        if readiness.score < self.policy.skip_threshold:
            return self.draft(
                WorkoutSkip(reason=f"Readiness score {readiness.score} is very low"),
                (
                    f"Readiness is {readiness.score}/100. Skipping "
                    f"{label} in favour of rest or light "
                    f"mobility will help you recover."
                ),
                target_workout_id=workout.id,
                confidence=0.8,
                trigger_data=trigger_data,
            )

        # Scores in the maintain band (40-49) carry a neutral factor
        factor = readiness.adjustment_factor
        if factor >= 1.0:
            factor = MAINTAIN_BAND_SCALE
        return self.draft(
            WorkoutIntensityScale(
                adjustment_factor=factor,
                original_intensity=workout.intensity,
                scaled_intensity=scale_intensity_label(workout.intensity, factor),
            ),
            (
                f"Readiness is {readiness.score}/100. Reducing intensity by "
                f"{round((1 - factor) * 100)}% keeps the session productive without "
                f"digging a deeper recovery hole."
            ),
            target_workout_id=workout.id,
            confidence=0.75,
            trigger_data=trigger_data,
        )
