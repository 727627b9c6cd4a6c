"""Training Stress Score estimation from whatever telemetry a workout has.

Priority cascade (first satisfied wins):
    1. Power      — TSS = hours × (NP / FTP)² × 100
    2. Heart rate — hrTSS with a heart-rate-reserve intensity factor
    3. Vendor effort score, used verbatim
    4. Session RPE — minutes × (0.3 + 0.12 × RPE)
    5. Category default RPE through rule 4

References:
    Coggan & Allen (2010). Training and Racing with a Power Meter.
    Foster et al. (2001). A new approach to monitoring exercise training.
        J Strength Cond Res 15(1):109-115.
"""

from __future__ import annotations

from adaptive_engine.config import DEFAULT_CONFIG, EngineConfig
from adaptive_engine.models.enums import (
    DEFAULT_CATEGORY_RPE,
    RPE_TSS_BASE_PER_MIN,
    RPE_TSS_SLOPE_PER_MIN,
    TSSMethod,
    WorkoutCategory,
)
from adaptive_engine.models.load import AthleteThresholds, TSSEstimate, WorkoutTelemetry


def calculate_power_tss(power: float, duration_min: float, ftp: float) -> int:
    """Power-based TSS. Returns 0 when any input is missing or non-positive."""
    if not ftp or not power or duration_min <= 0:
        return 0
    intensity_factor = power / ftp
    return round(duration_min / 60 * intensity_factor**2 * 100)


def calculate_hr_tss(
    avg_hr: float,
    duration_min: float,
    lthr: float,
    resting_hr: float,
) -> int:
    """Heart-rate TSS using the heart-rate-reserve intensity factor.

    IF = (avgHR − restingHR) / (LTHR − restingHR)

    Returns 0 when LTHR does not sit above resting HR.
    """
    if not lthr or not avg_hr or duration_min <= 0:
        return 0
    lthr_reserve = lthr - resting_hr
    if lthr_reserve <= 0:
        return 0
    intensity_factor = max(0.0, avg_hr - resting_hr) / lthr_reserve
    return round(duration_min / 60 * intensity_factor**2 * 100)


def calculate_rpe_tss(duration_min: float, session_rpe: float) -> int:
    """Estimate TSS from session RPE: RPE 5 ≈ 0.9 TSS/min, RPE 10 ≈ 1.5 TSS/min."""
    if duration_min <= 0:
        return 0
    per_minute = RPE_TSS_BASE_PER_MIN + RPE_TSS_SLOPE_PER_MIN * session_rpe
    return round(duration_min * per_minute)


def default_rpe(category: WorkoutCategory | str) -> int:
    try:
        return DEFAULT_CATEGORY_RPE[WorkoutCategory(category)]
    except ValueError:
        return DEFAULT_CATEGORY_RPE[WorkoutCategory.OTHER]


def estimate_tss(
    telemetry: WorkoutTelemetry,
    thresholds: AthleteThresholds | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> TSSEstimate:
    """Estimate a workout's TSS using the best available data.

    Never raises for missing inputs: the cascade always ends at the
    category default.

    Args:
        telemetry: The workout's raw measurements.
        thresholds: Athlete FTP / LTHR / resting HR, if known.
        config: Supplies the resting-HR default.

    Returns:
        A TSSEstimate carrying the score and the rung that produced it.
    """
    thresholds = thresholds or AthleteThresholds()
    duration = telemetry.duration_min or 0.0
    if duration <= 0:
        return TSSEstimate(tss=0, method=TSSMethod.NONE)

    power = telemetry.normalized_power or telemetry.avg_power
    if power and thresholds.ftp_watts and thresholds.ftp_watts > 0:
        return TSSEstimate(
            tss=calculate_power_tss(power, duration, thresholds.ftp_watts),
            method=TSSMethod.POWER,
        )

    if telemetry.avg_hr and thresholds.lthr_bpm and thresholds.lthr_bpm > 0:
        resting = thresholds.resting_hr or config.resting_hr
        return TSSEstimate(
            tss=calculate_hr_tss(telemetry.avg_hr, duration, thresholds.lthr_bpm, resting),
            method=TSSMethod.HEART_RATE,
        )

    if telemetry.effort_score and telemetry.effort_score > 0:
        return TSSEstimate(tss=round(telemetry.effort_score), method=TSSMethod.EFFORT_SCORE)

    if telemetry.perceived_exertion and telemetry.perceived_exertion > 0:
        return TSSEstimate(
            tss=calculate_rpe_tss(duration, telemetry.perceived_exertion),
            method=TSSMethod.RPE,
        )

    return TSSEstimate(
        tss=calculate_rpe_tss(duration, default_rpe(telemetry.category)),
        method=TSSMethod.CATEGORY_DEFAULT,
    )


def calculate_workout_tss(
    telemetry: WorkoutTelemetry,
    thresholds: AthleteThresholds | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> int:
    """Shorthand for ``estimate_tss(...).tss``."""
    return estimate_tss(telemetry, thresholds, config).tss


def estimate_session_rpe(
    avg_hr: float,
    lthr: float,
    config: EngineConfig = DEFAULT_CONFIG,
) -> int:
    """Estimate session RPE (2-10) from average HR relative to LTHR.

    Both values are expressed as a fraction of heart-rate reserve before
    comparing, using the configured resting and max HR.
    """
    hr_reserve = config.max_hr - config.resting_hr
    if hr_reserve <= 0 or lthr <= config.resting_hr:
        return default_rpe(WorkoutCategory.OTHER)
    lthr_pct = (lthr - config.resting_hr) / hr_reserve
    avg_pct = (avg_hr - config.resting_hr) / hr_reserve
    ratio = avg_pct / lthr_pct

    for upper, rpe in ((0.6, 2), (0.7, 3), (0.8, 4), (0.9, 5), (0.95, 6), (1.0, 7), (1.05, 8), (1.1, 9)):
        if ratio < upper:
            return rpe
    return 10


def calculate_session_load(duration_min: float, session_rpe: float) -> int:
    """Foster session load: duration (minutes) × session RPE."""
    return round(duration_min * session_rpe)
