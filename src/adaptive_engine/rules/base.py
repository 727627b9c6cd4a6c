"""Abstract base class for recommendation trigger rules."""

from __future__ import annotations

from abc import ABC, abstractmethod

from adaptive_engine.models.context import AdaptationContext
from adaptive_engine.models.enums import Priority
from adaptive_engine.models.recommendation import ProposedChanges, RecommendationDraft


class TriggerRule(ABC):
    """Base class for all plan-adjustment triggers.

    Each rule watches for one actionable condition in an AdaptationContext
    and, when it holds, proposes a structured change. Rules are discovered
    automatically by the TriggerRegistry and evaluated by the
    AdaptationEngine.

    Subclasses must define:
        rule_id: unique identifier (e.g. "deload_week")
        version: semantic version string
        priority: Priority tier (SAFETY, RECOVERY, PROGRESSION, OPTIMIZATION)
        required_data: AdaptationContext field names this rule needs
        evaluate(): the rule's decision logic
    """

    rule_id: str
    version: str
    priority: Priority
    required_data: list[str]

    def has_required_data(self, context: AdaptationContext) -> bool:
        """Check that all required context fields are present and non-empty."""
        for field_name in self.required_data:
            value = getattr(context, field_name, None)
            if value is None:
                return False
            if isinstance(value, (list, tuple)) and len(value) == 0:
                return False
        return True

    @abstractmethod
    def evaluate(self, context: AdaptationContext) -> RecommendationDraft | None:
        """Return a draft recommendation, or None if the condition does not hold."""
        ...

    def draft(
        self,
        changes: ProposedChanges,
        reasoning: str,
        *,
        target_phase_id: str | None = None,
        target_week_id: str | None = None,
        target_workout_id: str | None = None,
        confidence: float = 1.0,
        trigger_data: dict | None = None,
    ) -> RecommendationDraft:
        return RecommendationDraft(
            rule_id=self.rule_id,
            rule_version=self.version,
            priority=self.priority,
            proposed_changes=changes,
            target_phase_id=target_phase_id,
            target_week_id=target_week_id,
            target_workout_id=target_workout_id,
            reasoning=reasoning,
            confidence=confidence,
            trigger_data=trigger_data or {},
        )
