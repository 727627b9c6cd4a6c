"""Training load inputs and derived metrics."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from adaptive_engine.models.enums import RiskLevel, TSSMethod, WorkoutCategory


@dataclass(frozen=True)
class DailyLoadSample:
    """One aggregate training-stress value for a calendar day."""

    date: date
    training_stress: float


@dataclass(frozen=True)
class AthleteThresholds:
    """Per-athlete physiological anchors used by the TSS cascade."""

    ftp_watts: float | None = None
    lthr_bpm: float | None = None
    resting_hr: int | None = None
    max_hr: int | None = None


@dataclass(frozen=True)
class WorkoutTelemetry:
    """Raw telemetry for a single completed workout."""

    category: WorkoutCategory = WorkoutCategory.OTHER
    duration_min: float | None = None
    avg_hr: float | None = None
    normalized_power: float | None = None
    avg_power: float | None = None
    perceived_exertion: float | None = None  # session RPE, 1-10
    effort_score: float | None = None  # vendor relative-effort number


@dataclass(frozen=True)
class TSSEstimate:
    tss: int
    method: TSSMethod


@dataclass(frozen=True)
class StrainAnalysis:
    """Foster monotony/strain plus ACWR risk for the trailing week."""

    weekly_load: float
    monotony: float
    strain: float
    acwr: float
    risk_level: RiskLevel
    recommendation: str


@dataclass(frozen=True)
class LoadMetrics:
    """Full load picture for one reference date."""

    date: date
    ctl: float
    atl: float
    tsb: float
    monotony: float
    strain: float
    acwr: float
    risk_level: RiskLevel
    recommendation: str


@dataclass(frozen=True)
class LoadHistoryPoint:
    date: date
    ctl: float
    atl: float
    tsb: float


@dataclass(frozen=True)
class ZoneDistribution:
    """Seconds spent in each of the five intensity zones."""

    zone1_seconds: float = 0.0
    zone2_seconds: float = 0.0
    zone3_seconds: float = 0.0
    zone4_seconds: float = 0.0
    zone5_seconds: float = 0.0

    @property
    def total_seconds(self) -> float:
        return (
            self.zone1_seconds
            + self.zone2_seconds
            + self.zone3_seconds
            + self.zone4_seconds
            + self.zone5_seconds
        )


@dataclass(frozen=True)
class PolarizedAnalysis:
    low_intensity_pct: float
    mid_intensity_pct: float
    high_intensity_pct: float
    is_polarized: bool
    compliance_score: int
    recommendation: str
    target_low_pct: float
    target_high_pct: float
