"""Training plan hierarchy: Plan → Phase → WeeklyTarget, plus Workouts.

Plan entities are mutable (the recommendation appliers update them in
place), but their audit trails are not: ``AuditLog`` only ever grows.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Iterable, Iterator

from adaptive_engine.models.enums import (
    PhaseType,
    PlanMode,
    WeekType,
    WorkoutCategory,
    WorkoutStatus,
)


@dataclass(frozen=True)
class AuditEntry:
    """One structural change made by an applied recommendation."""

    date: date
    change_type: str
    before: dict[str, Any]
    after: dict[str, Any]
    recommendation_id: str


class AuditLog:
    """Append-only history of AuditEntry records.

    There is deliberately no way to replace, reorder or delete an entry
    through this interface; ``entries`` hands out an immutable tuple.
    """

    def __init__(self, entries: Iterable[AuditEntry] = ()) -> None:
        self._entries: list[AuditEntry] = list(entries)

    def append(self, entry: AuditEntry) -> None:
        if not isinstance(entry, AuditEntry):
            raise TypeError(f"AuditLog accepts AuditEntry, got {type(entry).__name__}")
        self._entries.append(entry)

    @property
    def entries(self) -> tuple[AuditEntry, ...]:
        return tuple(self._entries)

    def for_recommendation(self, recommendation_id: str) -> tuple[AuditEntry, ...]:
        return tuple(e for e in self._entries if e.recommendation_id == recommendation_id)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[AuditEntry]:
        return iter(tuple(self._entries))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AuditLog):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"AuditLog({len(self._entries)} entries)"


@dataclass
class WeeklyTarget:
    id: str
    phase_id: str
    week_start_date: date
    target_hours: float = 0.0
    target_tss: float = 0.0
    week_type: WeekType = WeekType.NORMAL
    per_activity_hours: dict[str, float] = field(default_factory=dict)
    adaptation_adjustments: AuditLog = field(default_factory=AuditLog)

    @property
    def week_end_date(self) -> date:
        return self.week_start_date + timedelta(days=6)

    def contains(self, day: date) -> bool:
        return self.week_start_date <= day <= self.week_end_date


@dataclass
class ExercisePrescription:
    name: str
    sets: int = 3
    reps: int = 8
    weight: float | None = None
    tempo: str | None = None


@dataclass
class Workout:
    """Leaf schedulable unit. Strength workouts carry exercises, cardio a structure."""

    id: str
    plan_id: str
    date: date
    category: WorkoutCategory = WorkoutCategory.OTHER
    intensity: str = "moderate"
    status: WorkoutStatus = WorkoutStatus.SUGGESTED
    title: str = ""
    target_duration_min: float = 0.0
    exercises: list[ExercisePrescription] = field(default_factory=list)
    structure: dict[str, Any] = field(default_factory=dict)
    readiness_adjusted: bool = False
    adjustment_factor: float | None = None
    original_intensity: str | None = None
    substitution_reason: str | None = None
    adaptation_history: AuditLog = field(default_factory=AuditLog)


@dataclass
class Phase:
    id: str
    plan_id: str
    name: str
    phase_type: PhaseType
    order_index: int
    start_date: date
    end_date: date
    volume_modifier: float = 1.0
    intensity_modifier: float = 1.0
    original_end_date: date | None = None
    weeks: list[WeeklyTarget] = field(default_factory=list)
    adaptation_history: AuditLog = field(default_factory=AuditLog)

    @property
    def duration_days(self) -> int:
        return (self.end_date - self.start_date).days + 1

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class PlanEvent:
    """A dated goal inside the plan (race, competition, test day)."""

    id: str
    name: str
    event_date: date


@dataclass
class Plan:
    id: str
    athlete_id: str
    mode: PlanMode = PlanMode.ROLLING
    phases: list[Phase] = field(default_factory=list)
    workouts: list[Workout] = field(default_factory=list)
    events: list[PlanEvent] = field(default_factory=list)

    def ordered_phases(self) -> list[Phase]:
        return sorted(self.phases, key=lambda p: p.order_index)

    def find_phase(self, phase_id: str) -> Phase | None:
        return next((p for p in self.phases if p.id == phase_id), None)

    def find_week(self, week_id: str) -> WeeklyTarget | None:
        for phase in self.phases:
            for week in phase.weeks:
                if week.id == week_id:
                    return week
        return None

    def find_workout(self, workout_id: str) -> Workout | None:
        return next((w for w in self.workouts if w.id == workout_id), None)

    def phase_for_date(self, day: date) -> Phase | None:
        return next((p for p in self.ordered_phases() if p.contains(day)), None)

    def week_for_date(self, day: date) -> WeeklyTarget | None:
        for phase in self.ordered_phases():
            for week in phase.weeks:
                if week.contains(day):
                    return week
        return None

    def phases_after(self, phase: Phase) -> list[Phase]:
        return [p for p in self.ordered_phases() if p.order_index > phase.order_index]

    def workouts_between(self, start: date, end: date) -> list[Workout]:
        return [w for w in self.workouts if start <= w.date <= end]

    def events_on_or_after(self, day: date) -> list[PlanEvent]:
        return [e for e in self.events if e.event_date >= day]

    @property
    def end_date(self) -> date | None:
        phases = self.ordered_phases()
        return max(p.end_date for p in phases) if phases else None
