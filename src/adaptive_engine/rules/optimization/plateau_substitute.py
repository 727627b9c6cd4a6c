"""OPTIMIZATION rule: swap a long-stalled exercise in today's strength workout.

Only plateaus that have escalated to the swap action qualify, and only
when an alternative is configured for the exercise.
"""

from __future__ import annotations

from adaptive_engine.models.context import AdaptationContext
from adaptive_engine.models.enums import PlateauAction, Priority, WorkoutCategory
from adaptive_engine.models.recommendation import (
    RecommendationDraft,
    Substitution,
    WorkoutSubstitute,
)
from adaptive_engine.rules.base import TriggerRule


class PlateauSubstituteRule(TriggerRule):
    """Proposes workout_substitute for exercises stuck for 6+ sessions."""

    rule_id = "plateau_substitute"
    version = "1.0.0"
    priority = Priority.OPTIMIZATION
    required_data = ["plateaus"]

    def evaluate(self, context: AdaptationContext) -> RecommendationDraft | None:
        swaps = {
            p.exercise.lower(): p
            for p in context.plateaus
            if p.suggested_action is PlateauAction.SWAP_EXERCISE
        }
        if not swaps:
            return None

        for workout in context.todays_workouts:
            if workout.category is not WorkoutCategory.STRENGTH:
                continue
            substitutions = []
            for exercise in workout.exercises:
                plateau = swaps.get(exercise.name.lower())
                alternative = context.exercise_alternatives.get(exercise.name.lower())
                if plateau is None or not alternative:
                    continue
                substitutions.append(
                    Substitution(
                        original_exercise=exercise.name,
                        substitute_exercise=alternative,
                        reason=f"No progress in {plateau.sessions_stagnant} sessions",
                    )
                )
            if substitutions:
                names = ", ".join(s.original_exercise for s in substitutions)
                return self.draft(
                    WorkoutSubstitute(substitutions=tuple(substitutions)),
                    (
                        f"{names} has stalled. A variation that trains the same "
                        f"pattern provides a new stimulus to break the plateau."
                    ),
                    target_workout_id=workout.id,
                    confidence=0.6,
                    trigger_data={"exercises": [s.original_exercise for s in substitutions]},
                )
        return None
