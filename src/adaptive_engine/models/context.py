"""Frozen adaptation context — the snapshot every trigger rule evaluates."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Mapping

from adaptive_engine.models.deload import DeloadRecommendation
from adaptive_engine.models.enums import WorkoutStatus
from adaptive_engine.models.load import LoadMetrics
from adaptive_engine.models.plan import Phase, Plan, WeeklyTarget, Workout
from adaptive_engine.models.progression import Plateau
from adaptive_engine.models.readiness import ReadinessResult


@dataclass(frozen=True)
class AdaptationContext:
    """Immutable snapshot of everything known about an athlete on one date.

    ``plan`` should be a detached copy; rules read it but must never mutate
    it. Optional fields left as None make the rules that need them
    not applicable rather than failing.
    """

    plan: Plan
    reference_date: date

    load: LoadMetrics | None = None
    readiness: ReadinessResult | None = None
    readiness_history: tuple[float, ...] = field(default_factory=tuple)  # oldest first
    deload: DeloadRecommendation | None = None
    plateaus: tuple[Plateau, ...] = field(default_factory=tuple)

    # Phase progress: percent of the phase's strength goal achieved so far
    phase_progress_pct: float | None = None
    # Weekly hours compliance ratios (actual / planned), oldest first
    compliance_history: tuple[float, ...] = field(default_factory=tuple)

    # Preferred replacement per exercise name (lower-cased keys)
    exercise_alternatives: Mapping[str, str] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @property
    def current_phase(self) -> Phase | None:
        return self.plan.phase_for_date(self.reference_date)

    @property
    def current_week(self) -> WeeklyTarget | None:
        return self.plan.week_for_date(self.reference_date)

    @property
    def todays_workouts(self) -> list[Workout]:
        """Workouts on the reference date still open for adjustment."""
        open_statuses = {WorkoutStatus.SUGGESTED, WorkoutStatus.SCHEDULED}
        return [
            w
            for w in self.plan.workouts_between(self.reference_date, self.reference_date)
            if w.status in open_statuses
        ]

    @property
    def avg_readiness_7d(self) -> float | None:
        recent = self.readiness_history[-7:]
        if not recent:
            return None
        return sum(recent) / len(recent)
