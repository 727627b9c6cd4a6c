"""Training load calculations: CTL, ATL, TSB, monotony, strain, ACWR.

References:
    - Banister (1991): Impulse-response fitness/fatigue model
    - Coggan: Performance Manager Chart (42-day CTL, 7-day ATL)
    - Foster (1998): Monotony and strain
    - Gabbett (2016): ACWR injury risk thresholds
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Sequence

import numpy as np
import pandas as pd

from adaptive_engine.config import DEFAULT_CONFIG, EngineConfig, StrainThresholds
from adaptive_engine.exceptions import DuplicateSampleError
from adaptive_engine.models.enums import (
    MONOTONY_CONSTANT_LOAD,
    TRAILING_WEEK_DAYS,
    TSB_FATIGUED_LOW,
    TSB_FRESH,
    TSB_OPTIMAL_LOW,
    TSB_TIRED_LOW,
    TSB_VERY_FRESH,
    RiskLevel,
)
from adaptive_engine.models.load import (
    DailyLoadSample,
    LoadHistoryPoint,
    LoadMetrics,
    StrainAnalysis,
)

TSB_GUIDANCE: dict[str, str] = {
    "very_fresh": "Ready for a big effort or race",
    "fresh": "Good for quality training",
    "optimal": "Balanced fitness and freshness",
    "tired": "Building fitness, monitor recovery",
    "fatigued": "Consider easier training or rest",
    "very_fatigued": "High injury risk - rest recommended",
}


def build_daily_series(samples: Iterable[DailyLoadSample]) -> list[DailyLoadSample]:
    """Validate and sort daily samples.

    Raises:
        DuplicateSampleError: if two samples share a date.
    """
    seen: set[date] = set()
    ordered = sorted(samples, key=lambda s: s.date)
    for sample in ordered:
        if sample.date in seen:
            raise DuplicateSampleError(f"Duplicate load sample for {sample.date.isoformat()}")
        seen.add(sample.date)
    return ordered


def upsert_sample(
    samples: Iterable[DailyLoadSample], sample: DailyLoadSample
) -> list[DailyLoadSample]:
    """Return a new sorted series with ``sample`` replacing any value on its date."""
    kept = [s for s in samples if s.date != sample.date]
    kept.append(sample)
    return build_daily_series(kept)


def _to_daily_frame(samples: Sequence[DailyLoadSample]) -> pd.Series:
    """Calendar-day indexed stress series; days without a sample read as rest (0)."""
    if not samples:
        return pd.Series(dtype=np.float64)
    series = pd.Series(
        [s.training_stress for s in samples],
        index=pd.to_datetime([s.date for s in samples]),
        dtype=np.float64,
    )
    full_range = pd.date_range(series.index.min(), series.index.max(), freq="D")
    return series.reindex(full_range, fill_value=0.0)


def _ewma_at(daily: pd.Series, window: int, reference_date: date) -> float:
    ref = pd.Timestamp(reference_date)
    history = daily[daily.index <= ref]
    if history.empty:
        return 0.0
    # Pad rest days up to the reference date, then keep at most 2W days
    if history.index.max() < ref:
        pad = pd.date_range(history.index.max() + pd.Timedelta(days=1), ref, freq="D")
        history = pd.concat([history, pd.Series(0.0, index=pad)])
    history = history.iloc[-2 * window:]
    ewma = history.ewm(span=window, adjust=True).mean()
    return round(float(ewma.iloc[-1]), 1)


def calculate_ewma_load(
    samples: Sequence[DailyLoadSample],
    window: int,
    reference_date: date | None = None,
) -> float:
    """Exponentially weighted daily load over a lookback window.

    Decay λ = 2/(W+1), most recent day weighted highest, history capped at
    2W calendar days. Weights are normalised by their sum so a steady daily
    load of X reads as X from the first day it is recorded, instead of
    ramping up from zero. Calendar days without a sample count as rest
    days (zero load).

    Args:
        samples: Daily load samples in any order (one per date).
        window: Lookback window W in days (42 for CTL, 7 for ATL).
        reference_date: Day to evaluate. Defaults to the latest sample.

    Returns:
        The weighted load, rounded to 1 decimal. 0.0 without history.

    Reference:
        Banister (1991); Coggan's Performance Manager Chart.
    """
    ordered = build_daily_series(samples)
    if not ordered or window <= 0:
        return 0.0
    ref = reference_date or ordered[-1].date
    return _ewma_at(_to_daily_frame(ordered), window, ref)


def calculate_ctl(
    samples: Sequence[DailyLoadSample],
    reference_date: date | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> float:
    """Chronic Training Load ("fitness"), 42-day window by default."""
    return calculate_ewma_load(samples, config.ctl_window_days, reference_date)


def calculate_atl(
    samples: Sequence[DailyLoadSample],
    reference_date: date | None = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> float:
    """Acute Training Load ("fatigue"), 7-day window by default."""
    return calculate_ewma_load(samples, config.atl_window_days, reference_date)


def calculate_tsb(ctl: float, atl: float) -> float:
    """Training Stress Balance ("form") = CTL − ATL.

    Plain difference of the already-rounded CTL and ATL, so a stored TSB
    always equals ``ctl - atl`` exactly.
    """
    return ctl - atl


def trailing_week_loads(
    samples: Sequence[DailyLoadSample], reference_date: date
) -> list[float]:
    """Loads for the 7 calendar days ending on ``reference_date`` (oldest first)."""
    by_date = {s.date: s.training_stress for s in samples}
    start = reference_date - timedelta(days=TRAILING_WEEK_DAYS - 1)
    return [by_date.get(start + timedelta(days=i), 0.0) for i in range(TRAILING_WEEK_DAYS)]


def calculate_monotony(daily_loads: Sequence[float]) -> float:
    """Calculate training monotony over the supplied days.

    Monotony = mean(daily_load) / population std(daily_load)

    Args:
        daily_loads: Daily training loads, usually the trailing week.

    Returns:
        Monotony rounded to 2 decimals. 0.0 with fewer than 2 days. An
        unchanging non-zero load is maximal monotony (10.0).

    Reference:
        Foster (1998). Med Sci Sports Exerc 30(7):1164-1168.
    """
    if len(daily_loads) < 2:
        return 0.0
    loads = np.asarray(daily_loads, dtype=np.float64)
    mean = float(np.mean(loads))
    std = float(np.std(loads, ddof=0))
    if std == 0:
        return MONOTONY_CONSTANT_LOAD if mean > 0 else 0.0
    return round(mean / std, 2)


def calculate_strain(weekly_load: float, monotony: float) -> float:
    """Foster strain = weekly load × monotony."""
    return round(weekly_load * monotony)


def calculate_acwr(atl: float, ctl: float) -> float:
    """Acute:Chronic Workload Ratio = ATL / CTL. Sweet spot 0.8-1.3."""
    if ctl == 0:
        return 0.0
    return round(atl / ctl, 2)


def analyze_training_strain(
    daily_loads: Sequence[float],
    atl: float,
    ctl: float,
    config: EngineConfig = DEFAULT_CONFIG,
) -> StrainAnalysis:
    """Classify injury risk from monotony, strain and ACWR.

    Args:
        daily_loads: The trailing week of daily loads.
        atl: Acute load on the reference date.
        ctl: Chronic load on the reference date.
        config: Supplies the risk bands.

    Returns:
        A StrainAnalysis with risk level and guidance text.

    Reference:
        Foster (1998); Gabbett (2016), Br J Sports Med 50(5):273-280.
    """
    bands: StrainThresholds = config.strain
    weekly_load = float(sum(daily_loads))
    monotony = calculate_monotony(daily_loads)
    strain = calculate_strain(weekly_load, monotony)
    acwr = calculate_acwr(atl, ctl)

    risk = RiskLevel.LOW
    recommendation = "Training load is appropriate"

    if monotony > bands.monotony_high or strain > bands.strain_high:
        risk = RiskLevel.VERY_HIGH
        recommendation = "High injury risk - reduce load and add variety"
    elif (
        monotony > bands.monotony_moderate
        or strain > bands.strain_moderate
        or acwr > bands.acwr_high
    ):
        risk = RiskLevel.HIGH
        recommendation = "Elevated risk - consider reducing load"
    elif (
        monotony > bands.monotony_low
        or strain > bands.strain_low
        or acwr > bands.acwr_moderate
    ):
        risk = RiskLevel.MODERATE
        recommendation = "Monitor fatigue and recovery closely"

    if acwr < bands.acwr_too_low and ctl > bands.min_chronic_load:
        recommendation = "Training load may be too low to maintain fitness"

    return StrainAnalysis(
        weekly_load=weekly_load,
        monotony=monotony,
        strain=strain,
        acwr=acwr,
        risk_level=risk,
        recommendation=recommendation,
    )


def compute_load_metrics(
    samples: Sequence[DailyLoadSample],
    reference_date: date,
    config: EngineConfig = DEFAULT_CONFIG,
) -> LoadMetrics:
    """Full load picture for one date: CTL, ATL, TSB plus strain analysis."""
    ordered = build_daily_series(samples)
    ctl = calculate_ctl(ordered, reference_date, config)
    atl = calculate_atl(ordered, reference_date, config)
    week = trailing_week_loads(ordered, reference_date)
    strain = analyze_training_strain(week, atl, ctl, config)
    return LoadMetrics(
        date=reference_date,
        ctl=ctl,
        atl=atl,
        tsb=calculate_tsb(ctl, atl),
        monotony=strain.monotony,
        strain=strain.strain,
        acwr=strain.acwr,
        risk_level=strain.risk_level,
        recommendation=strain.recommendation,
    )


def calculate_load_history(
    samples: Sequence[DailyLoadSample],
    start: date,
    end: date,
    config: EngineConfig = DEFAULT_CONFIG,
) -> list[LoadHistoryPoint]:
    """Per-day CTL/ATL/TSB from ``start`` to ``end`` inclusive.

    Returns an empty list when ``end`` precedes ``start``.
    """
    if end < start:
        return []
    daily = _to_daily_frame(build_daily_series(samples))
    points: list[LoadHistoryPoint] = []
    for day in pd.date_range(start, end, freq="D"):
        ctl = _ewma_at(daily, config.ctl_window_days, day.date()) if not daily.empty else 0.0
        atl = _ewma_at(daily, config.atl_window_days, day.date()) if not daily.empty else 0.0
        points.append(
            LoadHistoryPoint(date=day.date(), ctl=ctl, atl=atl, tsb=calculate_tsb(ctl, atl))
        )
    return points


def classify_tsb(tsb: float) -> str:
    """Classify form into a readiness band.

    Returns:
        One of: "very_fresh", "fresh", "optimal", "tired", "fatigued",
        "very_fatigued". ``TSB_GUIDANCE`` maps each to advice text.
    """
    if tsb >= TSB_VERY_FRESH:
        return "very_fresh"
    if tsb >= TSB_FRESH:
        return "fresh"
    if tsb >= TSB_OPTIMAL_LOW:
        return "optimal"
    if tsb >= TSB_TIRED_LOW:
        return "tired"
    if tsb >= TSB_FATIGUED_LOW:
        return "fatigued"
    return "very_fatigued"


def project_tsb(current_tsb: float, daily_delta: float, days: int) -> float:
    """Linear TSB projection used by recommendation previews."""
    return round(current_tsb + daily_delta * days, 1)
