"""Strength progression inputs and suggestions."""

from __future__ import annotations

from dataclasses import dataclass, field

from adaptive_engine.models.enums import PlateauAction, ProgressionModel


@dataclass(frozen=True)
class SetLog:
    """One logged working set. RPE and RIR are optional."""

    reps: int
    rpe: float | None = None
    rir: float | None = None


@dataclass(frozen=True)
class LastSession:
    """An exercise's most recent performance at a single working weight."""

    exercise: str
    weight: float
    sets: tuple[SetLog, ...] = field(default_factory=tuple)
    is_lower_body: bool = False

    @property
    def reps(self) -> int:
        """Reps of the weakest working set (what every set achieved)."""
        return min((s.reps for s in self.sets), default=0)


@dataclass(frozen=True)
class Plateau:
    exercise: str
    sessions_stagnant: int
    suggested_action: PlateauAction
    message: str


@dataclass(frozen=True)
class ProgressionSuggestion:
    model: ProgressionModel
    exercise: str
    current_weight: float
    current_reps: int
    suggested_weight: float
    suggested_reps: int
    reasoning: str
    confident: bool = True
    plateau: Plateau | None = None
