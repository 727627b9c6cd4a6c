"""What-if preview of a recommendation. Never backed by a write."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any


@dataclass
class AffectedItems:
    phases: list[str] = field(default_factory=list)
    weeks: list[str] = field(default_factory=list)
    workouts: list[str] = field(default_factory=list)


@dataclass
class TimelineImpact:
    original_end_date: date | None = None
    projected_end_date: date | None = None
    days_difference: int = 0


@dataclass
class TrainingLoadProjection:
    """TSB now and at +7/+14 days under a simplified linear model."""

    current_tsb: float
    projected_tsb_7_days: float
    projected_tsb_14_days: float


@dataclass
class RecommendationPreview:
    recommendation_id: str
    recommendation_type: str
    training_load_projection: TrainingLoadProjection
    current_state: dict[str, Any] = field(default_factory=dict)
    projected_state: dict[str, Any] = field(default_factory=dict)
    affected_items: AffectedItems = field(default_factory=AffectedItems)
    timeline_impact: TimelineImpact = field(default_factory=TimelineImpact)
    risks: list[str] = field(default_factory=list)
    benefits: list[str] = field(default_factory=list)
