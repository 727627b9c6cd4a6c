"""Tempo, time-under-tension and effective-reps helpers.

References:
    Beardsley (2019). Hypertrophy: Muscle fiber growth caused by mechanical
        tension (effective / stimulating reps).
    Zourdos et al. (2016). J Strength Cond Res 30(1):267-275 (RPE ↔ RIR).
"""

from __future__ import annotations

from adaptive_engine.models.enums import (
    DEFAULT_ASSUMED_RPE,
    DEFAULT_TEMPO,
    EXPLOSIVE_PHASE_SECONDS,
    TrainingAdaptation,
)
from adaptive_engine.models.tempo import EffectiveReps, Tempo, TimeUnderTension, TUTAssessment

RECOMMENDED_TEMPOS: dict[TrainingAdaptation, str] = {
    TrainingAdaptation.SKILL: "1-0-1-0",
    TrainingAdaptation.SPEED_POWER: "1-0-X-0",
    TrainingAdaptation.STRENGTH: "2-1-1-0",
    TrainingAdaptation.HYPERTROPHY: "3-0-1-0",
    TrainingAdaptation.MUSCULAR_ENDURANCE: "2-0-1-0",
    TrainingAdaptation.ANAEROBIC_CAPACITY: "1-0-1-0",
    TrainingAdaptation.VO2MAX: "1-0-1-0",
    TrainingAdaptation.LONG_DURATION: "1-0-1-0",
    TrainingAdaptation.BODY_COMPOSITION: "2-0-1-0",
}

# (min seconds, max seconds, display target) of TUT per set
TUT_RANGES: dict[TrainingAdaptation, tuple[float, float, str]] = {
    TrainingAdaptation.SKILL: (5, 30, "5-30s per set"),
    TrainingAdaptation.SPEED_POWER: (3, 15, "3-15s per set"),
    TrainingAdaptation.STRENGTH: (10, 30, "10-30s per set"),
    TrainingAdaptation.HYPERTROPHY: (30, 70, "30-70s per set (40-60 ideal)"),
    TrainingAdaptation.MUSCULAR_ENDURANCE: (40, 120, "40-120s per set"),
    TrainingAdaptation.ANAEROBIC_CAPACITY: (30, 120, "30-120s per effort"),
    TrainingAdaptation.VO2MAX: (0, 999, "N/A for cardio"),
    TrainingAdaptation.LONG_DURATION: (0, 999, "N/A for cardio"),
    TrainingAdaptation.BODY_COMPOSITION: (20, 60, "20-60s per set"),
}


def _parse_phase(text: str) -> float | None:
    text = text.strip()
    if text.upper() == "X":
        return EXPLOSIVE_PHASE_SECONDS
    try:
        value = float(text)
    except ValueError:
        return None
    return value if value >= 0 else None


def parse_tempo(tempo: str | None) -> Tempo | None:
    """Parse "3-1-X-0" into a Tempo. Returns None for anything malformed."""
    if not tempo:
        return None
    parts = tempo.split("-")
    if len(parts) != 4:
        return None
    phases = [_parse_phase(p) for p in parts]
    if any(p is None for p in phases):
        return None
    return Tempo(*phases)  # type: ignore[arg-type]


def format_tempo(tempo: Tempo) -> str:
    def fmt(seconds: float) -> str:
        if seconds == EXPLOSIVE_PHASE_SECONDS:
            return "X"
        return str(round(seconds))

    return "-".join(
        fmt(s) for s in (tempo.eccentric, tempo.pause_bottom, tempo.concentric, tempo.pause_top)
    )


def calculate_tut(tempo: str | None, reps: int, sets: int = 1) -> TimeUnderTension:
    """Time under tension per rep, per set and in total.

    A missing or malformed tempo falls back to 2-0-1-0 (3 s per rep).
    """
    parsed = parse_tempo(tempo)
    if parsed is None:
        tempo = DEFAULT_TEMPO
        parsed = parse_tempo(DEFAULT_TEMPO)
    per_rep = parsed.per_rep_seconds  # type: ignore[union-attr]
    return TimeUnderTension(
        tempo=tempo,  # type: ignore[arg-type]
        per_rep=round(per_rep, 1),
        per_set=round(per_rep * reps, 1),
        total=round(per_rep * reps * sets, 1),
    )


def rir_to_rpe(rir: float) -> float:
    return max(1.0, min(10.0, 10 - rir))


def rpe_to_rir(rpe: float) -> float:
    return max(0.0, 10 - rpe)


def calculate_effective_reps(
    reps: int, rpe: float | None = None, rir: float | None = None
) -> EffectiveReps:
    """Reps close enough to failure to count as stimulating.

    RPE ≥ 9 → up to 5, ≥ 8 → 4, ≥ 7 → 3, ≥ 6 → 2, otherwise 1. Without RPE
    or RIR a typical working set (RPE 7.5) is assumed.
    """
    if rpe is not None:
        effective_rpe = rpe
    elif rir is not None:
        effective_rpe = rir_to_rpe(rir)
    else:
        effective_rpe = DEFAULT_ASSUMED_RPE

    if effective_rpe >= 9:
        cap = 5
    elif effective_rpe >= 8:
        cap = 4
    elif effective_rpe >= 7:
        cap = 3
    elif effective_rpe >= 6:
        cap = 2
    else:
        cap = 1

    if rir is None and rpe is not None:
        rir = rpe_to_rir(rpe)
    return EffectiveReps(total_reps=reps, effective_reps=min(reps, cap), rpe=rpe, rir=rir)


def recommended_tempo(adaptation: TrainingAdaptation | str) -> str:
    try:
        return RECOMMENDED_TEMPOS[TrainingAdaptation(adaptation)]
    except ValueError:
        return DEFAULT_TEMPO


def assess_tut_for_adaptation(
    tut_seconds: float, adaptation: TrainingAdaptation | str
) -> TUTAssessment:
    adaptation = TrainingAdaptation(adaptation)
    low, high, target = TUT_RANGES[adaptation]
    name = adaptation.value
    if low <= tut_seconds <= high:
        return TUTAssessment(True, f"TUT is appropriate for {name} ({target})")
    if tut_seconds < low:
        return TUTAssessment(False, f"TUT ({tut_seconds:g}s) is too short for {name}. Target: {target}")
    return TUTAssessment(False, f"TUT ({tut_seconds:g}s) is too long for {name}. Target: {target}")
