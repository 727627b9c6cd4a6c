"""Multi-factor readiness scoring.

Weighted average over the factors actually measured that day. Missing
factors are left out of both numerator and denominator rather than being
defaulted to a neutral value.

Reference:
    Galpin, A. readiness assessment model (subjective, HRV, sleep, form,
    grip strength, vertical jump).
"""

from __future__ import annotations

from adaptive_engine.config import DEFAULT_CONFIG, ReadinessPolicy
from adaptive_engine.models.enums import (
    READINESS_NEUTRAL_SCORE,
    READINESS_WEIGHT_FORM,
    READINESS_WEIGHT_GRIP,
    READINESS_WEIGHT_HRV,
    READINESS_WEIGHT_JUMP,
    READINESS_WEIGHT_SLEEP,
    READINESS_WEIGHT_SUBJECTIVE,
    SLEEP_ADEQUATE_MIN_HOURS,
    SLEEP_OPTIMAL_MAX_HOURS,
    SLEEP_OPTIMAL_MIN_HOURS,
    SLEEP_OVERSLEEP_SCORE,
    SLEEP_UNKNOWN_HOURS_SCORE,
    ReadinessRecommendation,
)
from adaptive_engine.models.readiness import (
    FactorScore,
    ReadinessAssessment,
    ReadinessBaseline,
    ReadinessFactorBreakdown,
    ReadinessResult,
)


def hrv_z_score_to_score(z: float) -> float:
    """Map an HRV z-score onto 0-100 (z ≥ 1 → 80-100, z < −1 → 0-40)."""
    if z >= 1:
        return 80 + min(z - 1, 2) * 10
    if z >= 0:
        return 60 + z * 20
    if z >= -1:
        return 40 + (z + 1) * 20
    return max(0.0, 40 + z * 20)


def sleep_hours_score(hours: float | None) -> float:
    if hours is None:
        return SLEEP_UNKNOWN_HOURS_SCORE
    if SLEEP_OPTIMAL_MIN_HOURS <= hours <= SLEEP_OPTIMAL_MAX_HOURS:
        return 100.0
    if hours > SLEEP_OPTIMAL_MAX_HOURS:
        return SLEEP_OVERSLEEP_SCORE
    if hours >= SLEEP_ADEQUATE_MIN_HOURS:
        return 60 + (hours - SLEEP_ADEQUATE_MIN_HOURS) * 40
    return max(0.0, hours * 10)


def form_to_score(tsb: float) -> float:
    """Map TSB onto 0-100. Very high TSB is capped at 80 (possible detraining)."""
    if tsb > 15:
        return 80.0
    if tsb >= 0:
        return 90 + tsb * 0.67
    if tsb >= -10:
        return 70 + tsb * 2
    if tsb >= -20:
        return 30 + (tsb + 20) * 4
    return max(0.0, 30 + (tsb + 20) * 2)


def percent_of_baseline_score(pct: float) -> float:
    """Shared curve for grip strength and vertical jump against baseline."""
    if pct >= 100:
        return 80 + min(pct - 100, 10) * 2
    if pct >= 95:
        return 60 + (pct - 95) * 4
    if pct >= 90:
        return 40 + (pct - 90) * 4
    return max(0.0, pct / 2)


def _baseline_factor(
    value: float, baseline_avg: float | None, weight: int
) -> FactorScore:
    if baseline_avg and baseline_avg > 0:
        pct = value / baseline_avg * 100
        return FactorScore(
            value=value,
            score=percent_of_baseline_score(pct),
            weight=weight,
            percent_of_baseline=pct,
        )
    return FactorScore(value=value, score=READINESS_NEUTRAL_SCORE, weight=weight)


def calculate_readiness_score(
    assessment: ReadinessAssessment,
    baseline: ReadinessBaseline | None = None,
    policy: ReadinessPolicy = DEFAULT_CONFIG.readiness,
) -> ReadinessResult:
    """Score a day's readiness and derive a training recommendation.

    Args:
        assessment: The day's submission. ``result`` is ignored.
        baseline: Rolling athlete baselines. Without one, HRV, grip and
            jump score a neutral 50.
        policy: Push / maintain thresholds.

    Returns:
        ReadinessResult with score 0-100, push/maintain/reduce, an
        adjustment factor (0.70-1.10) and caution suggestions.
    """
    baseline = baseline or ReadinessBaseline()
    suggestions: list[str] = []

    subjective_value = assessment.subjective_readiness or 5
    subjective = FactorScore(
        value=subjective_value,
        score=subjective_value / 10 * 100,
        weight=READINESS_WEIGHT_SUBJECTIVE,
    )
    if subjective_value <= 4:
        suggestions.append("Consider a lighter session or active recovery")

    hrv = None
    if assessment.hrv_reading is not None:
        z = None
        hrv_score = READINESS_NEUTRAL_SCORE
        if baseline.avg_hrv and baseline.std_hrv and baseline.std_hrv > 0:
            z = (assessment.hrv_reading - baseline.avg_hrv) / baseline.std_hrv
            hrv_score = hrv_z_score_to_score(z)
        hrv = FactorScore(
            value=assessment.hrv_reading,
            score=hrv_score,
            weight=READINESS_WEIGHT_HRV,
            z_score=z,
        )
        if z is not None and z < -1:
            suggestions.append("HRV is significantly below baseline - prioritize recovery")

    sleep = None
    if assessment.sleep_quality is not None:
        quality_score = assessment.sleep_quality / 10 * 100
        combined = (quality_score + sleep_hours_score(assessment.sleep_hours)) / 2
        sleep = FactorScore(
            value=assessment.sleep_quality, score=combined, weight=READINESS_WEIGHT_SLEEP
        )
        if assessment.sleep_hours is not None and assessment.sleep_hours < SLEEP_ADEQUATE_MIN_HOURS:
            suggestions.append("Sleep was inadequate - consider reducing intensity")

    form = None
    if assessment.form_value is not None:
        form = FactorScore(
            value=assessment.form_value,
            score=form_to_score(assessment.form_value),
            weight=READINESS_WEIGHT_FORM,
        )
        if assessment.form_value < -15:
            suggestions.append("Training stress is high - deload may be needed")

    grip = None
    if assessment.grip_strength is not None:
        grip = _baseline_factor(
            assessment.grip_strength, baseline.avg_grip_strength, READINESS_WEIGHT_GRIP
        )
        if grip.percent_of_baseline is not None and grip.percent_of_baseline < 90:
            suggestions.append("Grip strength is below baseline - CNS may be fatigued")

    jump = None
    if assessment.vertical_jump is not None:
        jump = _baseline_factor(
            assessment.vertical_jump, baseline.avg_vertical_jump, READINESS_WEIGHT_JUMP
        )
        if jump.percent_of_baseline is not None and jump.percent_of_baseline < 90:
            suggestions.append(
                "Jump performance is reduced - consider power-dominant exercises another day"
            )

    factors = ReadinessFactorBreakdown(
        subjective=subjective,
        hrv=hrv,
        sleep=sleep,
        form=form,
        grip_strength=grip,
        vertical_jump=jump,
    )
    present = factors.present().values()
    total_weight = sum(f.weight for f in present)
    weighted_sum = sum(f.score * f.weight for f in present)
    score = round(weighted_sum / total_weight) if total_weight else round(READINESS_NEUTRAL_SCORE)
    score = max(0, min(100, score))

    if score >= policy.push_threshold:
        recommendation = ReadinessRecommendation.PUSH
        factor = 1.0 + (score - policy.push_threshold) / 300
    elif score >= policy.maintain_threshold:
        recommendation = ReadinessRecommendation.MAINTAIN
        factor = 1.0
    else:
        recommendation = ReadinessRecommendation.REDUCE
        factor = 0.70 + score / policy.maintain_threshold * 0.30

    if not suggestions:
        if recommendation is ReadinessRecommendation.PUSH:
            suggestions.append("Good readiness - train as planned or push slightly")
        elif recommendation is ReadinessRecommendation.MAINTAIN:
            suggestions.append("Moderate readiness - stick to planned workout")
        else:
            suggestions.append("Low readiness - keep today easy and prioritize recovery")

    return ReadinessResult(
        score=score,
        recommendation=recommendation,
        adjustment_factor=round(factor, 2),
        factors=factors,
        suggestions=tuple(suggestions),
    )


def readiness_band_color(score: float) -> str:
    """Display color for a readiness score."""
    if score >= 70:
        return "green"
    if score >= 40:
        return "amber"
    return "red"
