"""SAFETY rule: turn the current week into a recovery week when a deload is due.

Reference:
    Israetel et al. Scientific Principles of Hypertrophy Training.
"""

from __future__ import annotations

from adaptive_engine.models.context import AdaptationContext
from adaptive_engine.models.enums import DeloadSeverity, Priority, WeekType
from adaptive_engine.models.recommendation import RecommendationDraft, WeekTypeChange
from adaptive_engine.rules.base import TriggerRule

_CONFIDENCE = {
    DeloadSeverity.SEVERE: 0.9,
    DeloadSeverity.MODERATE: 0.8,
    DeloadSeverity.MILD: 0.7,
}


class DeloadWeekRule(TriggerRule):
    """Proposes a week_type_change to recovery from the deload evaluation."""

    rule_id = "deload_week"
    version = "1.0.0"
    priority = Priority.SAFETY
    required_data = ["deload"]

    def evaluate(self, context: AdaptationContext) -> RecommendationDraft | None:
        deload = context.deload
        if deload is None or not deload.should_deload:
            return None
        week = context.current_week
        if week is None or week.week_type in (WeekType.RECOVERY, WeekType.DELOAD):
            return None

        return self.draft(
            WeekTypeChange(
                proposed_type=WeekType.RECOVERY,
                original_type=week.week_type,
                reason=deload.message,
            ),
            f"{deload.message}. " + " ".join(deload.suggestions),
            target_week_id=week.id,
            confidence=_CONFIDENCE[deload.severity],
            trigger_data={
                "severity": deload.severity.value,
                "triggers": [t.value for t in deload.trigger_types],
            },
        )
