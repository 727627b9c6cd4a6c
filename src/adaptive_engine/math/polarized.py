"""Polarized intensity distribution analysis.

Low = zones 1-2, mid = zone 3 (the "gray zone"), high = zones 4-5.

Reference:
    Seiler (2010). What is best practice for training intensity and
    duration distribution in endurance athletes? Int J Sports Physiol
    Perform 5(3):276-291.
"""

from __future__ import annotations

from adaptive_engine.models.enums import (
    POLARIZED_MAX_MID_PCT,
    POLARIZED_MID_PENALTY_FLOOR,
    POLARIZED_MIN_HIGH_PCT,
    POLARIZED_MIN_LOW_PCT,
    POLARIZED_TARGET_HIGH_PCT,
    POLARIZED_TARGET_LOW_PCT,
)
from adaptive_engine.models.load import PolarizedAnalysis, ZoneDistribution


def analyze_polarized_distribution(
    zones: ZoneDistribution,
    target_low_pct: float = POLARIZED_TARGET_LOW_PCT,
    target_high_pct: float = POLARIZED_TARGET_HIGH_PCT,
) -> PolarizedAnalysis:
    """Score adherence to an easy/hard split.

    compliance = 100 − |low − targetLow| − |high − targetHigh| − 2 × max(0, mid − 10)

    Args:
        zones: Seconds in each of the five zones.
        target_low_pct: Target share of zone 1-2 time.
        target_high_pct: Target share of zone 4-5 time.

    Returns:
        PolarizedAnalysis with percentages rounded to 1 decimal and an
        integer compliance score floored at 0.
    """
    total = zones.total_seconds
    if total <= 0:
        return PolarizedAnalysis(
            low_intensity_pct=0.0,
            mid_intensity_pct=0.0,
            high_intensity_pct=0.0,
            is_polarized=False,
            compliance_score=0,
            recommendation="No training data available",
            target_low_pct=target_low_pct,
            target_high_pct=target_high_pct,
        )

    low_pct = (zones.zone1_seconds + zones.zone2_seconds) / total * 100
    mid_pct = zones.zone3_seconds / total * 100
    high_pct = (zones.zone4_seconds + zones.zone5_seconds) / total * 100

    mid_penalty = max(0.0, mid_pct - POLARIZED_MID_PENALTY_FLOOR) * 2
    compliance = max(
        0.0,
        100 - abs(low_pct - target_low_pct) - abs(high_pct - target_high_pct) - mid_penalty,
    )

    is_polarized = (
        low_pct >= POLARIZED_MIN_LOW_PCT
        and mid_pct <= POLARIZED_MAX_MID_PCT
        and high_pct >= POLARIZED_MIN_HIGH_PCT
    )

    if mid_pct > 20:
        recommendation = (
            f'Too much Zone 3 "gray zone" training ({mid_pct:.0f}%). '
            "Reduce tempo work and focus on truly easy or truly hard efforts."
        )
    elif low_pct < 70:
        recommendation = (
            f"Not enough easy training ({low_pct:.0f}%). "
            "Add more Zone 1-2 volume for better recovery and adaptation."
        )
    elif high_pct < POLARIZED_MIN_HIGH_PCT:
        recommendation = (
            f"Not enough high-intensity work ({high_pct:.0f}%). "
            "Add interval sessions for fitness gains."
        )
    elif is_polarized:
        recommendation = "Excellent polarized distribution! Keep it up."
    else:
        recommendation = "Good distribution. Minor adjustments could optimize your training."

    return PolarizedAnalysis(
        low_intensity_pct=round(low_pct, 1),
        mid_intensity_pct=round(mid_pct, 1),
        high_intensity_pct=round(high_pct, 1),
        is_polarized=is_polarized,
        compliance_score=round(compliance),
        recommendation=recommendation,
        target_low_pct=target_low_pct,
        target_high_pct=target_high_pct,
    )
