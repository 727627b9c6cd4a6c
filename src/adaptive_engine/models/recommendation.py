"""Plan recommendations and their type-specific change payloads.

``ProposedChanges`` is a tagged union: each payload class carries its
``recommendation_type`` as a class attribute, so appliers and previews can
dispatch on it. ``UnsupportedChanges`` holds the raw mapping of a type this
version of the engine does not know about.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, ClassVar, Union

from adaptive_engine.models.enums import (
    PhaseType,
    Priority,
    RecommendationStatus,
    RecommendationType,
    WeekType,
)


@dataclass(frozen=True)
class PhaseExtension:
    recommendation_type: ClassVar[RecommendationType] = RecommendationType.PHASE_EXTENSION

    new_end_date: date
    extension_days: int = 0
    original_end_date: date | None = None


@dataclass(frozen=True)
class PhaseShorten:
    recommendation_type: ClassVar[RecommendationType] = RecommendationType.PHASE_SHORTEN

    new_end_date: date
    shorten_days: int = 0
    original_end_date: date | None = None


@dataclass(frozen=True)
class PhaseInsert:
    recommendation_type: ClassVar[RecommendationType] = RecommendationType.PHASE_INSERT

    phase_type: PhaseType
    duration_days: int
    insert_after_phase_id: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    reason: str = ""
    shifts_remaining_phases: bool = True


@dataclass(frozen=True)
class WeekVolumeAdjust:
    recommendation_type: ClassVar[RecommendationType] = RecommendationType.WEEK_VOLUME_ADJUST

    volume_percentage_change: float
    target_hours: float | None = None
    target_tss: float | None = None
    original_hours: float | None = None
    original_tss: float | None = None


@dataclass(frozen=True)
class WeekTypeChange:
    recommendation_type: ClassVar[RecommendationType] = RecommendationType.WEEK_TYPE_CHANGE

    proposed_type: WeekType
    original_type: WeekType | None = None
    reason: str = ""


@dataclass(frozen=True)
class WorkoutIntensityScale:
    recommendation_type: ClassVar[RecommendationType] = (
        RecommendationType.WORKOUT_INTENSITY_SCALE
    )

    adjustment_factor: float
    original_intensity: str | None = None
    scaled_intensity: str | None = None


@dataclass(frozen=True)
class Substitution:
    original_exercise: str
    substitute_exercise: str
    reason: str = ""


@dataclass(frozen=True)
class WorkoutSubstitute:
    recommendation_type: ClassVar[RecommendationType] = RecommendationType.WORKOUT_SUBSTITUTE

    substitutions: tuple[Substitution, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class WorkoutSkip:
    recommendation_type: ClassVar[RecommendationType] = RecommendationType.WORKOUT_SKIP

    reason: str = ""


@dataclass(frozen=True)
class UnsupportedChanges:
    """Payload for a recommendation type newer than this engine."""

    type_name: str
    raw: dict[str, Any] = field(default_factory=dict)


ProposedChanges = Union[
    PhaseExtension,
    PhaseShorten,
    PhaseInsert,
    WeekVolumeAdjust,
    WeekTypeChange,
    WorkoutIntensityScale,
    WorkoutSubstitute,
    WorkoutSkip,
    UnsupportedChanges,
]


def changes_type_name(changes: ProposedChanges) -> str:
    if isinstance(changes, UnsupportedChanges):
        return changes.type_name
    return changes.recommendation_type.value


@dataclass(frozen=True)
class RecommendationDraft:
    """What a trigger rule proposes. The engine turns drafts into Recommendations."""

    rule_id: str
    rule_version: str
    priority: Priority
    proposed_changes: ProposedChanges
    target_phase_id: str | None = None
    target_week_id: str | None = None
    target_workout_id: str | None = None
    reasoning: str = ""
    confidence: float = 1.0  # 0.0-1.0
    trigger_data: dict[str, Any] = field(default_factory=dict)

    @property
    def recommendation_type(self) -> str:
        return changes_type_name(self.proposed_changes)


@dataclass
class Recommendation:
    """A structured, previewable, applicable proposal against one plan.

    Status only moves pending → accepted | modified | dismissed, and
    ``applied_at`` is set exactly when the status is accepted or modified.
    """

    id: str
    plan_id: str
    recommendation_type: str
    proposed_changes: ProposedChanges
    target_phase_id: str | None = None
    target_week_id: str | None = None
    target_workout_id: str | None = None
    status: RecommendationStatus = RecommendationStatus.PENDING
    priority: Priority = Priority.OPTIMIZATION
    reasoning: str = ""
    confidence: float = 1.0
    trigger_rule_id: str | None = None
    trigger_data: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    responded_at: datetime | None = None
    applied_at: datetime | None = None
    user_notes: str | None = None
    modified_changes: ProposedChanges | None = None

    @property
    def is_pending(self) -> bool:
        return self.status is RecommendationStatus.PENDING

    @property
    def effective_changes(self) -> ProposedChanges:
        """The payload that was (or would be) applied."""
        return self.modified_changes or self.proposed_changes
