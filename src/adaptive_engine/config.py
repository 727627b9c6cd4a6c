"""Engine configuration — explicit policy objects with cited defaults.

Everything the calculation modules used to treat as a magic number lives
here. Defaults come from models/enums.py; override with
``dataclasses.replace``:

    config = replace(EngineConfig(), resting_hr=45)
"""

from __future__ import annotations

from dataclasses import dataclass, field

from adaptive_engine.models.enums import (
    ACWR_CAUTION_HIGH,
    ACWR_DANGER_THRESHOLD,
    ACWR_MIN_CHRONIC_LOAD,
    ACWR_UNDERTRAINED,
    ATL_WINDOW_DAYS,
    CTL_WINDOW_DAYS,
    DAY_OF_READINESS_THRESHOLD,
    DEFAULT_MAX_HR,
    DEFAULT_RESTING_HR,
    DELOAD_LOW_RECOVERY_DAYS,
    DELOAD_LOW_RECOVERY_SCORE,
    DELOAD_MIN_DAYS_BETWEEN,
    DELOAD_MUSCLES_OVER_MRV,
    DELOAD_PLATEAU_EXERCISES,
    DELOAD_PLATEAU_WEEKS,
    DELOAD_SEVERE_TSB,
    DELOAD_TSB_THRESHOLD,
    DOUBLE_INCREMENT,
    DOUBLE_REP_HIGH,
    DOUBLE_REP_LOW,
    LINEAR_LOWER_INCREMENT,
    LINEAR_UPPER_INCREMENT,
    MONOTONY_HIGH,
    MONOTONY_LOW,
    MONOTONY_MODERATE,
    PLATE_INCREMENT,
    PLATEAU_SESSION_THRESHOLD,
    READINESS_MAINTAIN_THRESHOLD,
    READINESS_PUSH_THRESHOLD,
    RPE_INCREMENT,
    RPE_TARGET_HIGH,
    RPE_TARGET_LOW,
    STRAIN_HIGH,
    STRAIN_LOW,
    STRAIN_MODERATE,
    WORKOUT_SKIP_READINESS,
)


@dataclass(frozen=True)
class StrainThresholds:
    """Foster monotony/strain and Gabbett ACWR risk bands."""

    monotony_low: float = MONOTONY_LOW
    monotony_moderate: float = MONOTONY_MODERATE
    monotony_high: float = MONOTONY_HIGH
    strain_low: float = STRAIN_LOW
    strain_moderate: float = STRAIN_MODERATE
    strain_high: float = STRAIN_HIGH
    acwr_moderate: float = ACWR_CAUTION_HIGH
    acwr_high: float = ACWR_DANGER_THRESHOLD
    acwr_too_low: float = ACWR_UNDERTRAINED
    min_chronic_load: float = ACWR_MIN_CHRONIC_LOAD


@dataclass(frozen=True)
class DeloadThresholds:
    """Trigger thresholds for the deload evaluator."""

    tsb: float = DELOAD_TSB_THRESHOLD
    severe_tsb: float = DELOAD_SEVERE_TSB
    muscles_over_mrv: int = DELOAD_MUSCLES_OVER_MRV
    plateau_weeks: int = DELOAD_PLATEAU_WEEKS
    plateau_exercises: int = DELOAD_PLATEAU_EXERCISES
    low_recovery_score: float = DELOAD_LOW_RECOVERY_SCORE
    low_recovery_days: int = DELOAD_LOW_RECOVERY_DAYS
    min_days_between: int = DELOAD_MIN_DAYS_BETWEEN


@dataclass(frozen=True)
class ReadinessPolicy:
    """Score bands mapping readiness to a recommendation."""

    push_threshold: int = READINESS_PUSH_THRESHOLD
    maintain_threshold: int = READINESS_MAINTAIN_THRESHOLD
    day_of_adjustment_threshold: int = DAY_OF_READINESS_THRESHOLD
    skip_threshold: int = WORKOUT_SKIP_READINESS


@dataclass(frozen=True)
class ProgressionParams:
    """Per-model progression parameters (weights in the athlete's unit)."""

    upper_increment: float = LINEAR_UPPER_INCREMENT
    lower_increment: float = LINEAR_LOWER_INCREMENT
    rep_low: int = DOUBLE_REP_LOW
    rep_high: int = DOUBLE_REP_HIGH
    double_increment: float = DOUBLE_INCREMENT
    rpe_low: float = RPE_TARGET_LOW
    rpe_high: float = RPE_TARGET_HIGH
    rpe_increment: float = RPE_INCREMENT
    plate_increment: float = PLATE_INCREMENT
    plateau_threshold: int = PLATEAU_SESSION_THRESHOLD


@dataclass(frozen=True)
class EngineConfig:
    """Top-level configuration passed into the TSS estimator and load aggregator."""

    resting_hr: int = DEFAULT_RESTING_HR
    max_hr: int = DEFAULT_MAX_HR
    ctl_window_days: int = CTL_WINDOW_DAYS
    atl_window_days: int = ATL_WINDOW_DAYS
    strain: StrainThresholds = field(default_factory=StrainThresholds)
    deload: DeloadThresholds = field(default_factory=DeloadThresholds)
    readiness: ReadinessPolicy = field(default_factory=ReadinessPolicy)
    progression: ProgressionParams = field(default_factory=ProgressionParams)


DEFAULT_CONFIG = EngineConfig()
