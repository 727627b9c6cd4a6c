"""Plain-dict records for recommendations, payloads and metric results.

Dates are ISO 8601 ``YYYY-MM-DD`` strings and enums are their values, so
every record is JSON-serializable as-is. Parsing is strict about required
payload fields and lenient about everything optional.

All functions are pure (no I/O).
"""

from __future__ import annotations

import dataclasses
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable, Mapping

from adaptive_engine.exceptions import InvalidReferenceError
from adaptive_engine.models.deload import DeloadRecommendation
from adaptive_engine.models.enums import (
    PhaseType,
    Priority,
    RecommendationStatus,
    RecommendationType,
    WeekType,
)
from adaptive_engine.models.load import DailyLoadSample, LoadHistoryPoint, LoadMetrics
from adaptive_engine.models.preview import RecommendationPreview
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
    Substitution,
    UnsupportedChanges,
    WeekTypeChange,
    WeekVolumeAdjust,
    WorkoutIntensityScale,
    WorkoutSkip,
    WorkoutSubstitute,
    changes_type_name,
)


def parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value[:10])
    raise ValueError(f"Not a date: {value!r}")


def _to_plain(value: Any) -> Any:
    """Recursively convert dates, enums, tuples and dataclasses to JSON types."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _to_plain(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Mapping):
        return {k: _to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(v) for v in value]
    return value


# ---------------------------------------------------------------------------
# Proposed-changes payloads
# ---------------------------------------------------------------------------


def _require(mapping: Mapping[str, Any], type_name: str, *keys: str) -> Any:
    """First present key among ``keys`` (aliases), or InvalidReferenceError."""
    for key in keys:
        if mapping.get(key) is not None:
            return mapping[key]
    raise InvalidReferenceError(f"{type_name} changes missing required field '{keys[0]}'")


def _convert(type_name: str, field_name: str, fn: Callable[[Any], Any], value: Any) -> Any:
    try:
        return fn(value)
    except (TypeError, ValueError) as exc:
        raise InvalidReferenceError(
            f"{type_name} changes has invalid '{field_name}': {value!r}"
        ) from exc


def _optional(
    mapping: Mapping[str, Any], type_name: str, key: str, fn: Callable[[Any], Any]
) -> Any:
    value = mapping.get(key)
    return None if value is None else _convert(type_name, key, fn, value)


def _parse_phase_extension(m: Mapping[str, Any]) -> PhaseExtension:
    name = RecommendationType.PHASE_EXTENSION.value
    new_end = _require(m, name, "new_end_date", "proposed_end_date")
    return PhaseExtension(
        new_end_date=_convert(name, "new_end_date", parse_date, new_end),
        extension_days=_optional(m, name, "extension_days", int) or 0,
        original_end_date=_optional(m, name, "original_end_date", parse_date),
    )


def _parse_phase_shorten(m: Mapping[str, Any]) -> PhaseShorten:
    name = RecommendationType.PHASE_SHORTEN.value
    new_end = _require(m, name, "new_end_date", "proposed_end_date")
    return PhaseShorten(
        new_end_date=_convert(name, "new_end_date", parse_date, new_end),
        shorten_days=_optional(m, name, "shorten_days", int) or 0,
        original_end_date=_optional(m, name, "original_end_date", parse_date),
    )


def _parse_phase_insert(m: Mapping[str, Any]) -> PhaseInsert:
    name = RecommendationType.PHASE_INSERT.value
    return PhaseInsert(
        phase_type=_convert(name, "phase_type", PhaseType, _require(m, name, "phase_type")),
        duration_days=_convert(name, "duration_days", int, _require(m, name, "duration_days")),
        insert_after_phase_id=m.get("insert_after_phase_id"),
        start_date=_optional(m, name, "start_date", parse_date),
        end_date=_optional(m, name, "end_date", parse_date),
        reason=m.get("reason") or "",
        shifts_remaining_phases=bool(m.get("shifts_remaining_phases", True)),
    )


def _parse_week_volume_adjust(m: Mapping[str, Any]) -> WeekVolumeAdjust:
    name = RecommendationType.WEEK_VOLUME_ADJUST.value
    if all(m.get(k) is None for k in ("target_hours", "target_tss", "volume_percentage_change")):
        raise InvalidReferenceError(
            f"{name} changes need target_hours, target_tss or volume_percentage_change"
        )
    return WeekVolumeAdjust(
        volume_percentage_change=_optional(m, name, "volume_percentage_change", float) or 0.0,
        target_hours=_optional(m, name, "target_hours", float),
        target_tss=_optional(m, name, "target_tss", float),
        original_hours=_optional(m, name, "original_hours", float),
        original_tss=_optional(m, name, "original_tss", float),
    )


def _parse_week_type_change(m: Mapping[str, Any]) -> WeekTypeChange:
    name = RecommendationType.WEEK_TYPE_CHANGE.value
    return WeekTypeChange(
        proposed_type=_convert(name, "proposed_type", WeekType, _require(m, name, "proposed_type")),
        original_type=_optional(m, name, "original_type", WeekType),
        reason=m.get("reason") or "",
    )


def _parse_workout_intensity_scale(m: Mapping[str, Any]) -> WorkoutIntensityScale:
    name = RecommendationType.WORKOUT_INTENSITY_SCALE.value
    factor = _convert(
        name, "adjustment_factor", float, _require(m, name, "adjustment_factor")
    )
    if factor <= 0:
        raise InvalidReferenceError(f"{name} adjustment_factor must be positive, got {factor}")
    return WorkoutIntensityScale(
        adjustment_factor=factor,
        original_intensity=m.get("original_intensity"),
        scaled_intensity=m.get("scaled_intensity"),
    )


def _parse_workout_substitute(m: Mapping[str, Any]) -> WorkoutSubstitute:
    name = RecommendationType.WORKOUT_SUBSTITUTE.value
    items = m.get("substitutions") or []
    if not isinstance(items, (list, tuple)):
        raise InvalidReferenceError(f"{name} substitutions must be a list")
    substitutions = []
    for item in items:
        if not isinstance(item, Mapping):
            raise InvalidReferenceError(f"{name} substitution must be an object: {item!r}")
        substitutions.append(
            Substitution(
                original_exercise=str(_require(item, name, "original_exercise")),
                substitute_exercise=str(_require(item, name, "substitute_exercise")),
                reason=item.get("reason") or "",
            )
        )
    return WorkoutSubstitute(substitutions=tuple(substitutions))


def _parse_workout_skip(m: Mapping[str, Any]) -> WorkoutSkip:
    return WorkoutSkip(reason=m.get("reason") or "")


_PARSERS: dict[RecommendationType, Callable[[Mapping[str, Any]], ProposedChanges]] = {
    RecommendationType.PHASE_EXTENSION: _parse_phase_extension,
    RecommendationType.PHASE_SHORTEN: _parse_phase_shorten,
    RecommendationType.PHASE_INSERT: _parse_phase_insert,
    RecommendationType.WEEK_VOLUME_ADJUST: _parse_week_volume_adjust,
    RecommendationType.WEEK_TYPE_CHANGE: _parse_week_type_change,
    RecommendationType.WORKOUT_INTENSITY_SCALE: _parse_workout_intensity_scale,
    RecommendationType.WORKOUT_SUBSTITUTE: _parse_workout_substitute,
    RecommendationType.WORKOUT_SKIP: _parse_workout_skip,
}


def parse_changes(type_name: str, mapping: Mapping[str, Any] | None) -> ProposedChanges:
    """Build a typed payload for ``type_name`` from a plain mapping.

    Unknown types parse to UnsupportedChanges holding the raw mapping.

    Raises:
        InvalidReferenceError: a required field is missing or malformed.
    """
    mapping = mapping or {}
    if not isinstance(mapping, Mapping):
        raise InvalidReferenceError(f"{type_name} changes must be an object: {mapping!r}")
    try:
        rec_type = RecommendationType(type_name)
    except ValueError:
        return UnsupportedChanges(type_name=type_name, raw=dict(mapping))
    return _PARSERS[rec_type](mapping)


def changes_to_dict(changes: ProposedChanges) -> dict[str, Any]:
    if isinstance(changes, UnsupportedChanges):
        return dict(changes.raw)
    return _to_plain(changes)


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------


def recommendation_to_record(rec: Recommendation) -> dict[str, Any]:
    return {
        "id": rec.id,
        "plan_id": rec.plan_id,
        "recommendation_type": rec.recommendation_type,
        "target_phase_id": rec.target_phase_id,
        "target_week_id": rec.target_week_id,
        "target_workout_id": rec.target_workout_id,
        "proposed_changes": changes_to_dict(rec.proposed_changes),
        "status": rec.status.value,
        "priority": int(rec.priority),
        "reasoning": rec.reasoning,
        "confidence": rec.confidence,
        "trigger_rule_id": rec.trigger_rule_id,
        "trigger_data": _to_plain(rec.trigger_data),
        "created_at": _to_plain(rec.created_at),
        "responded_at": _to_plain(rec.responded_at),
        "applied_at": _to_plain(rec.applied_at),
        "user_notes": rec.user_notes,
        "modified_changes": (
            changes_to_dict(rec.modified_changes) if rec.modified_changes is not None else None
        ),
    }


def _parse_datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def record_to_recommendation(record: Mapping[str, Any]) -> Recommendation:
    type_name = record["recommendation_type"]
    modified = record.get("modified_changes")
    return Recommendation(
        id=record["id"],
        plan_id=record["plan_id"],
        recommendation_type=type_name,
        proposed_changes=parse_changes(type_name, record.get("proposed_changes")),
        target_phase_id=record.get("target_phase_id"),
        target_week_id=record.get("target_week_id"),
        target_workout_id=record.get("target_workout_id"),
        status=RecommendationStatus(record.get("status", RecommendationStatus.PENDING.value)),
        priority=Priority(record.get("priority", Priority.OPTIMIZATION)),
        reasoning=record.get("reasoning") or "",
        confidence=float(record.get("confidence", 1.0)),
        trigger_rule_id=record.get("trigger_rule_id"),
        trigger_data=dict(record.get("trigger_data") or {}),
        created_at=_parse_datetime(record.get("created_at")),
        responded_at=_parse_datetime(record.get("responded_at")),
        applied_at=_parse_datetime(record.get("applied_at")),
        user_notes=record.get("user_notes"),
        modified_changes=parse_changes(type_name, modified) if modified is not None else None,
    )


# ---------------------------------------------------------------------------
# Load and readiness
# ---------------------------------------------------------------------------


def daily_loads_from_records(records: list[Mapping[str, Any]]) -> list[DailyLoadSample]:
    """Accepts ``{"date": ..., "training_stress": ...}`` (or ``"tss"``) items."""
    return [
        DailyLoadSample(
            date=parse_date(r["date"]),
            training_stress=float(r.get("training_stress", r.get("tss", 0.0))),
        )
        for r in records
    ]


def baseline_from_record(record: Mapping[str, Any] | None) -> ReadinessBaseline | None:
    if not record:
        return None
    return ReadinessBaseline(
        avg_hrv=record.get("avg_hrv"),
        std_hrv=record.get("std_hrv"),
        avg_grip_strength=record.get("avg_grip_strength"),
        avg_vertical_jump=record.get("avg_vertical_jump"),
    )


def assessment_from_record(athlete_id: str, record: Mapping[str, Any]) -> ReadinessAssessment:
    return ReadinessAssessment(
        athlete_id=athlete_id,
        date=parse_date(record["date"]),
        subjective_readiness=float(record.get("subjective_readiness", 5)),
        hrv_reading=record.get("hrv_reading"),
        grip_strength=record.get("grip_strength"),
        vertical_jump=record.get("vertical_jump"),
        sleep_quality=record.get("sleep_quality"),
        sleep_hours=record.get("sleep_hours"),
        form_value=record.get("form_value"),
    )


def load_metrics_to_record(metrics: LoadMetrics) -> dict[str, Any]:
    return _to_plain(metrics)


def load_history_to_records(points: list[LoadHistoryPoint]) -> list[dict[str, Any]]:
    return [_to_plain(p) for p in points]


def readiness_result_to_record(result: ReadinessResult) -> dict[str, Any]:
    return {
        "score": result.score,
        "recommendation": result.recommendation.value,
        "adjustment_factor": result.adjustment_factor,
        "factors": {name: _to_plain(f) for name, f in result.factors.present().items()},
        "suggestions": list(result.suggestions),
    }


def deload_to_record(deload: DeloadRecommendation) -> dict[str, Any]:
    return _to_plain(deload)


def preview_to_record(preview: RecommendationPreview) -> dict[str, Any]:
    return _to_plain(preview)


__all__ = [
    "assessment_from_record",
    "baseline_from_record",
    "changes_to_dict",
    "changes_type_name",
    "daily_loads_from_records",
    "deload_to_record",
    "load_history_to_records",
    "load_metrics_to_record",
    "parse_changes",
    "parse_date",
    "preview_to_record",
    "readiness_result_to_record",
    "recommendation_to_record",
    "record_to_recommendation",
]
