"""Deload evaluation inputs and output."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from adaptive_engine.models.enums import DeloadSeverity, DeloadTriggerType, DeloadType


@dataclass(frozen=True)
class PlateauedExercise:
    exercise_id: str
    weeks_without_progress: int


@dataclass(frozen=True)
class DeloadTrigger:
    type: DeloadTriggerType
    reason: str
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DeloadRecommendation:
    should_deload: bool
    triggers: tuple[DeloadTrigger, ...]
    severity: DeloadSeverity
    deload_type: DeloadType
    duration_days: int
    volume_reduction: float  # fraction, 0.5 = halve volume
    intensity_reduction: float
    message: str
    suggestions: tuple[str, ...] = field(default_factory=tuple)
    days_since_last_deload: int | None = None

    @property
    def trigger_types(self) -> tuple[DeloadTriggerType, ...]:
        return tuple(t.type for t in self.triggers)
