"""PROGRESSION rule: stretch or compress the current phase to match progress.

Progress (percent of the phase's strength goal achieved) is compared with
time elapsed (percent of the phase's days gone).

Thresholds:
    behind by > 20 points with < 14 days left
        → extend by deficit / daily progress rate, capped at 14 days
    ahead by > 20 points, progress > 90% and > 7 days left
        → shorten by 30% of the remaining days
"""

from __future__ import annotations

import math
from datetime import timedelta

from adaptive_engine.models.context import AdaptationContext
from adaptive_engine.models.enums import (
    PHASE_EXTENSION_MAX_DAYS,
    PHASE_EXTENSION_WINDOW_DAYS,
    PHASE_PROGRESS_TOLERANCE,
    PHASE_SHORTEN_FRACTION,
    PHASE_SHORTEN_MIN_DAYS_LEFT,
    PHASE_SHORTEN_MIN_PROGRESS,
    PhaseType,
    Priority,
)
from adaptive_engine.models.recommendation import (
    PhaseExtension,
    PhaseShorten,
    RecommendationDraft,
)
from adaptive_engine.rules.base import TriggerRule


class PhaseProgressRule(TriggerRule):
    """Proposes phase_extension or phase_shorten."""

    rule_id = "phase_progress"
    version = "1.0.0"
    priority = Priority.PROGRESSION
    required_data = ["phase_progress_pct"]

    def evaluate(self, context: AdaptationContext) -> RecommendationDraft | None:
        phase = context.current_phase
        if phase is None or phase.phase_type in (PhaseType.RECOVERY, PhaseType.TAPER):
            return None

        total_days = (phase.end_date - phase.start_date).days
        if total_days <= 0:
            return None
        days_left = max(0, (phase.end_date - context.reference_date).days)
        days_done = total_days - days_left
        expected = round(days_done / total_days * 100)
        actual = float(context.phase_progress_pct)  # type: ignore[arg-type]
        trigger_data = {"expected_pct": expected, "actual_pct": actual, "days_left": days_left}

        deficit = expected - actual
        if deficit > PHASE_PROGRESS_TOLERANCE and days_left < PHASE_EXTENSION_WINDOW_DAYS:
            daily_rate = actual / max(1, days_done)
            days = min(math.ceil(deficit / max(0.5, daily_rate)), PHASE_EXTENSION_MAX_DAYS)
            return self.draft(
                PhaseExtension(
                    new_end_date=phase.end_date + timedelta(days=days),
                    extension_days=days,
                    original_end_date=phase.original_end_date or phase.end_date,
                ),
                (
                    f"Your {phase.name} phase is {round(deficit)}% behind schedule with "
                    f"{days_left} days remaining. Extending it by {days} days gives you "
                    f"time to reach the phase goals."
                ),
                target_phase_id=phase.id,
                confidence=0.7,
                trigger_data=trigger_data,
            )

        surplus = actual - expected
        if (
            surplus > PHASE_PROGRESS_TOLERANCE
            and actual > PHASE_SHORTEN_MIN_PROGRESS
            and days_left > PHASE_SHORTEN_MIN_DAYS_LEFT
        ):
            days = math.floor(days_left * PHASE_SHORTEN_FRACTION)
            if days <= 0:
                return None
            return self.draft(
                PhaseShorten(
                    new_end_date=phase.end_date - timedelta(days=days),
                    shorten_days=days,
                    original_end_date=phase.original_end_date or phase.end_date,
                ),
                (
                    f"Your {phase.name} phase is progressing ahead of schedule. You've "
                    f"achieved {round(actual)}% of phase goals with {days_left} days "
                    f"remaining. Shortening it by {days} days moves you on while "
                    f"maintaining momentum."
                ),
                target_phase_id=phase.id,
                confidence=0.7,
                trigger_data=trigger_data,
            )
        return None
