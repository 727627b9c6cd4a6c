"""Evaluation trace — how each trigger rule responded during one engine run."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum, auto

from adaptive_engine.models.recommendation import Recommendation, RecommendationDraft


class RuleStatus(IntEnum):
    """Whether a rule fired, was skipped, or was not applicable."""

    FIRED = auto()
    SKIPPED = auto()
    NOT_APPLICABLE = auto()


@dataclass(frozen=True)
class RuleResult:
    rule_id: str
    status: RuleStatus
    draft: RecommendationDraft | None = None
    explanation: str = ""


@dataclass(frozen=True)
class EvaluationTrace:
    """Audit trail for a single AdaptationEngine.evaluate() call.

    ``created`` holds the recommendations that were saved; drafts that
    matched an existing pending recommendation, or lost to a more urgent
    draft for the same target, are listed in ``suppressed`` instead.
    """

    rule_results: tuple[RuleResult, ...] = field(default_factory=tuple)
    created: tuple[Recommendation, ...] = field(default_factory=tuple)
    suppressed: tuple[RecommendationDraft, ...] = field(default_factory=tuple)

    def fired(self) -> tuple[str, ...]:
        return tuple(r.rule_id for r in self.rule_results if r.status is RuleStatus.FIRED)
