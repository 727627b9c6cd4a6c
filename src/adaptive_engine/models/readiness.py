"""Readiness assessment inputs, baselines and the derived result."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from adaptive_engine.models.enums import ReadinessRecommendation


@dataclass(frozen=True)
class ReadinessBaseline:
    """Rolling per-athlete statistics. Maintained outside the engine."""

    avg_hrv: float | None = None
    std_hrv: float | None = None
    avg_grip_strength: float | None = None
    avg_vertical_jump: float | None = None


@dataclass(frozen=True)
class FactorScore:
    """One factor's contribution to the readiness score.

    ``z_score`` is set for HRV, ``percent_of_baseline`` for grip and jump.
    """

    value: float
    score: float
    weight: int
    z_score: float | None = None
    percent_of_baseline: float | None = None

    @property
    def contribution(self) -> float:
        return self.score * self.weight / 100


@dataclass(frozen=True)
class ReadinessFactorBreakdown:
    subjective: FactorScore
    hrv: FactorScore | None = None
    sleep: FactorScore | None = None
    form: FactorScore | None = None
    grip_strength: FactorScore | None = None
    vertical_jump: FactorScore | None = None

    def present(self) -> dict[str, FactorScore]:
        """Factors that actually contributed, keyed by name."""
        named = {
            "subjective": self.subjective,
            "hrv": self.hrv,
            "sleep": self.sleep,
            "form": self.form,
            "grip_strength": self.grip_strength,
            "vertical_jump": self.vertical_jump,
        }
        return {name: f for name, f in named.items() if f is not None}

    @property
    def total_weight(self) -> int:
        return sum(f.weight for f in self.present().values())


@dataclass(frozen=True)
class ReadinessResult:
    score: int
    recommendation: ReadinessRecommendation
    adjustment_factor: float
    factors: ReadinessFactorBreakdown
    suggestions: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ReadinessAssessment:
    """A day's readiness submission. One per athlete per date (upserted)."""

    athlete_id: str
    date: date
    subjective_readiness: float  # 1-10
    hrv_reading: float | None = None
    grip_strength: float | None = None
    vertical_jump: float | None = None
    sleep_quality: float | None = None  # 1-10
    sleep_hours: float | None = None
    form_value: float | None = None  # TSB on the assessment date
    result: ReadinessResult | None = None
