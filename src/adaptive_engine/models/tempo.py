"""Lifting tempo, time under tension and effective-reps results."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Tempo:
    """Seconds per phase: eccentric-pauseBottom-concentric-pauseTop."""

    eccentric: float
    pause_bottom: float
    concentric: float
    pause_top: float

    @property
    def per_rep_seconds(self) -> float:
        return self.eccentric + self.pause_bottom + self.concentric + self.pause_top


@dataclass(frozen=True)
class TimeUnderTension:
    tempo: str
    per_rep: float
    per_set: float
    total: float


@dataclass(frozen=True)
class EffectiveReps:
    total_reps: int
    effective_reps: int
    rpe: float | None
    rir: float | None


@dataclass(frozen=True)
class TUTAssessment:
    is_appropriate: bool
    feedback: str
