"""SAFETY rule: insert a recovery phase when fatigue has accumulated.

Deep negative form together with a week of poor readiness means the
athlete is not absorbing the current phase. A short recovery phase is
proposed right after it.

Thresholds:
    TSB < −25 and 7-day average readiness < 40
    Not proposed during a recovery or taper phase
"""

from __future__ import annotations

from datetime import timedelta

from adaptive_engine.models.context import AdaptationContext
from adaptive_engine.models.enums import (
    RECOVERY_INSERT_DAYS,
    RECOVERY_INSERT_READINESS,
    RECOVERY_INSERT_TSB,
    PhaseType,
    Priority,
)
from adaptive_engine.models.recommendation import PhaseInsert, RecommendationDraft
from adaptive_engine.rules.base import TriggerRule

_EXEMPT_PHASES = frozenset({PhaseType.RECOVERY, PhaseType.TAPER})


class RecoveryPhaseInsertRule(TriggerRule):
    """Proposes a 7-day recovery phase after the current one."""

    rule_id = "recovery_phase_insert"
    version = "1.0.0"
    priority = Priority.SAFETY
    required_data = ["load", "readiness_history"]

    def evaluate(self, context: AdaptationContext) -> RecommendationDraft | None:
        phase = context.current_phase
        if phase is None or phase.phase_type in _EXEMPT_PHASES:
            return None

        tsb = context.load.tsb  # type: ignore[union-attr]
        avg_readiness = context.avg_readiness_7d
        if tsb >= RECOVERY_INSERT_TSB or avg_readiness is None:
            return None
        if avg_readiness >= RECOVERY_INSERT_READINESS:
            return None

        start = phase.end_date + timedelta(days=1)
        changes = PhaseInsert(
            phase_type=PhaseType.RECOVERY,
            duration_days=RECOVERY_INSERT_DAYS,
            insert_after_phase_id=phase.id,
            start_date=start,
            end_date=start + timedelta(days=RECOVERY_INSERT_DAYS - 1),
            reason="fatigue_accumulation",
        )
        return self.draft(
            changes,
            (
                f"Significant fatigue accumulation detected (TSB {tsb:.1f}, "
                f"7-day readiness {avg_readiness:.0f}). A {RECOVERY_INSERT_DAYS}-day "
                f"recovery phase is recommended before continuing."
            ),
            target_phase_id=phase.id,
            confidence=0.85,
            trigger_data={"tsb": tsb, "avg_readiness_7d": round(avg_readiness, 1)},
        )
