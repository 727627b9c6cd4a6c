"""Data models for the adaptive engine."""

from adaptive_engine.models.context import AdaptationContext
from adaptive_engine.models.deload import (
    DeloadRecommendation,
    DeloadTrigger,
    PlateauedExercise,
)
from adaptive_engine.models.enums import (
    PhaseType,
    PlanMode,
    Priority,
    ProgressionModel,
    ReadinessRecommendation,
    RecommendationStatus,
    RecommendationType,
    ResponseAction,
    RiskLevel,
    WeekType,
    WorkoutCategory,
    WorkoutStatus,
)
from adaptive_engine.models.load import (
    AthleteThresholds,
    DailyLoadSample,
    LoadMetrics,
    StrainAnalysis,
    WorkoutTelemetry,
    ZoneDistribution,
)
from adaptive_engine.models.plan import (
    AuditEntry,
    AuditLog,
    ExercisePrescription,
    Phase,
    Plan,
    PlanEvent,
    WeeklyTarget,
    Workout,
)
from adaptive_engine.models.preview import RecommendationPreview
from adaptive_engine.models.progression import (
    LastSession,
    Plateau,
    ProgressionSuggestion,
    SetLog,
)
from adaptive_engine.models.readiness import (
    ReadinessAssessment,
    ReadinessBaseline,
    ReadinessResult,
)
from adaptive_engine.models.recommendation import (
    PhaseExtension,
    PhaseInsert,
    PhaseShorten,
    ProposedChanges,
    Recommendation,
    RecommendationDraft,
    Substitution,
    UnsupportedChanges,
    WeekTypeChange,
    WeekVolumeAdjust,
    WorkoutIntensityScale,
    WorkoutSkip,
    WorkoutSubstitute,
)
from adaptive_engine.models.trace import EvaluationTrace, RuleResult, RuleStatus

__all__ = [
    "AdaptationContext",
    "AthleteThresholds",
    "AuditEntry",
    "AuditLog",
    "DailyLoadSample",
    "DeloadRecommendation",
    "DeloadTrigger",
    "EvaluationTrace",
    "ExercisePrescription",
    "LastSession",
    "LoadMetrics",
    "Phase",
    "PhaseExtension",
    "PhaseInsert",
    "PhaseShorten",
    "PhaseType",
    "Plan",
    "PlanEvent",
    "PlanMode",
    "Plateau",
    "PlateauedExercise",
    "Priority",
    "ProgressionModel",
    "ProgressionSuggestion",
    "ProposedChanges",
    "ReadinessAssessment",
    "ReadinessBaseline",
    "ReadinessRecommendation",
    "ReadinessResult",
    "Recommendation",
    "RecommendationDraft",
    "RecommendationPreview",
    "RecommendationStatus",
    "RecommendationType",
    "ResponseAction",
    "RiskLevel",
    "RuleResult",
    "RuleStatus",
    "SetLog",
    "StrainAnalysis",
    "Substitution",
    "UnsupportedChanges",
    "WeekType",
    "WeekTypeChange",
    "WeekVolumeAdjust",
    "WeeklyTarget",
    "Workout",
    "WorkoutCategory",
    "WorkoutIntensityScale",
    "WorkoutSkip",
    "WorkoutStatus",
    "WorkoutSubstitute",
    "WorkoutTelemetry",
    "ZoneDistribution",
]
