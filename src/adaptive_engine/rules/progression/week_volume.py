"""PROGRESSION rule: adjust the current week's volume.

Thresholds:
    TSB > 10 and 7-day readiness > 70        → +10% volume
    hours compliance < 80% two weeks running → −15% volume
"""

from __future__ import annotations

from adaptive_engine.models.context import AdaptationContext
from adaptive_engine.models.enums import (
    LOW_COMPLIANCE_RATIO,
    LOW_COMPLIANCE_WEEKS,
    VOLUME_DECREASE_PCT,
    VOLUME_INCREASE_PCT,
    VOLUME_INCREASE_READINESS,
    VOLUME_INCREASE_TSB,
    Priority,
    WeekType,
)
from adaptive_engine.models.plan import WeeklyTarget
from adaptive_engine.models.recommendation import RecommendationDraft, WeekVolumeAdjust
from adaptive_engine.rules.base import TriggerRule

_FIXED_WEEKS = frozenset({WeekType.RECOVERY, WeekType.DELOAD, WeekType.RACE, WeekType.TEST})


def scaled_targets(week: WeeklyTarget, pct_change: float) -> WeekVolumeAdjust:
    multiplier = 1 + pct_change / 100
    return WeekVolumeAdjust(
        volume_percentage_change=pct_change,
        target_hours=round(week.target_hours * multiplier, 1),
        target_tss=round(week.target_tss * multiplier),
        original_hours=week.target_hours,
        original_tss=week.target_tss,
    )


class WeekVolumeRule(TriggerRule):
    """Proposes week_volume_adjust from freshness or chronic under-compliance."""

    rule_id = "week_volume"
    version = "1.0.0"
    priority = Priority.PROGRESSION
    required_data: list[str] = []

    def evaluate(self, context: AdaptationContext) -> RecommendationDraft | None:
        week = context.current_week
        if week is None or week.week_type in _FIXED_WEEKS or week.target_hours <= 0:
            return None

        recent = context.compliance_history[-LOW_COMPLIANCE_WEEKS:]
        if len(recent) == LOW_COMPLIANCE_WEEKS and all(c < LOW_COMPLIANCE_RATIO for c in recent):
            return self.draft(
                scaled_targets(week, VOLUME_DECREASE_PCT),
                (
                    f"You've completed less than {LOW_COMPLIANCE_RATIO:.0%} of planned "
                    f"training for {LOW_COMPLIANCE_WEEKS} consecutive weeks. Reducing this "
                    f"week's volume by {abs(VOLUME_DECREASE_PCT):g}% sets a target you can hit."
                ),
                target_week_id=week.id,
                confidence=0.7,
                trigger_data={"compliance": list(recent)},
            )

        load = context.load
        avg_readiness = context.avg_readiness_7d
        if load is None or avg_readiness is None:
            return None
        if load.tsb > VOLUME_INCREASE_TSB and avg_readiness > VOLUME_INCREASE_READINESS:
            return self.draft(
                scaled_targets(week, VOLUME_INCREASE_PCT),
                (
                    f"You're fresh (TSB {load.tsb:.1f}) with strong readiness "
                    f"({avg_readiness:.0f}). A {VOLUME_INCREASE_PCT:g}% volume increase "
                    f"this week can build fitness."
                ),
                target_week_id=week.id,
                confidence=0.65,
                trigger_data={"tsb": load.tsb, "avg_readiness_7d": round(avg_readiness, 1)},
            )
        return None
