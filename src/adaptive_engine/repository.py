"""Repository interfaces the engine depends on, plus an in-memory store.

The engine only ever talks to these protocols. ``InMemoryStore`` is the
reference implementation used by the scheduler and the test suite: every
read hands out a detached copy and every write stores one, the way a
relational store would, and ``transaction()`` restores a snapshot of the
plan and its recommendations when the block raises.
"""

from __future__ import annotations

import copy
import logging
import threading
from contextlib import contextmanager
from datetime import date, timedelta
from typing import Iterator, Protocol

from adaptive_engine.exceptions import InvalidReferenceError
from adaptive_engine.math.training_load import build_daily_series, upsert_sample
from adaptive_engine.models.enums import RecommendationStatus
from adaptive_engine.models.load import DailyLoadSample
from adaptive_engine.models.plan import Phase, Plan, WeeklyTarget, Workout
from adaptive_engine.models.readiness import ReadinessAssessment, ReadinessBaseline
from adaptive_engine.models.recommendation import Recommendation

logger = logging.getLogger(__name__)


class LoadSampleProvider(Protocol):
    def get_daily_loads(self, athlete_id: str, start: date, end: date) -> list[DailyLoadSample]:
        """Samples between ``start`` and ``end`` inclusive, ordered by date."""
        ...


class BaselineProvider(Protocol):
    def get_baseline(self, athlete_id: str) -> ReadinessBaseline | None:
        ...


class PlanRepository(Protocol):
    def get_plan(self, plan_id: str) -> Plan | None:
        ...

    def get_phase(self, plan_id: str, phase_id: str) -> Phase | None:
        ...

    def get_week(self, plan_id: str, week_id: str) -> WeeklyTarget | None:
        ...

    def get_workout(self, plan_id: str, workout_id: str) -> Workout | None:
        ...

    def save_phase(self, plan_id: str, phase: Phase) -> None:
        ...

    def save_week(self, plan_id: str, week: WeeklyTarget) -> None:
        ...

    def save_workout(self, plan_id: str, workout: Workout) -> None:
        ...

    def insert_phase(self, plan_id: str, phase: Phase) -> None:
        ...

    def transaction(self, plan_id: str):  # -> ContextManager[None]
        """Everything written inside the block commits or rolls back together."""
        ...


class RecommendationRepository(Protocol):
    def get(self, recommendation_id: str) -> Recommendation | None:
        ...

    def save(self, recommendation: Recommendation) -> None:
        ...

    def list_pending(self, plan_id: str) -> list[Recommendation]:
        ...


class AssessmentRepository(Protocol):
    def upsert(self, assessment: ReadinessAssessment) -> None:
        """Store the assessment, replacing any earlier one for the same athlete and date."""
        ...


class ReadinessHistoryProvider(Protocol):
    def get_assessment(self, athlete_id: str, day: date) -> ReadinessAssessment | None:
        ...

    def readiness_scores(self, athlete_id: str, end: date, days: int = 7) -> list[float]:
        """Scored readiness for the ``days`` ending on ``end``, oldest first."""
        ...


class InMemoryStore:
    """Dict-backed implementation of every repository protocol."""

    def __init__(self) -> None:
        self._loads: dict[str, list[DailyLoadSample]] = {}
        self._baselines: dict[str, ReadinessBaseline] = {}
        self._plans: dict[str, Plan] = {}
        self._recommendations: dict[str, Recommendation] = {}
        self._assessments: dict[tuple[str, date], ReadinessAssessment] = {}
        self._lock = threading.RLock()

    # -- load samples -------------------------------------------------------

    def add_daily_loads(self, athlete_id: str, samples: list[DailyLoadSample]) -> None:
        with self._lock:
            merged = self._loads.get(athlete_id, [])
            for sample in build_daily_series(samples):
                merged = upsert_sample(merged, sample)
            self._loads[athlete_id] = merged

    def get_daily_loads(self, athlete_id: str, start: date, end: date) -> list[DailyLoadSample]:
        with self._lock:
            return [s for s in self._loads.get(athlete_id, []) if start <= s.date <= end]

    # -- baselines ----------------------------------------------------------

    def set_baseline(self, athlete_id: str, baseline: ReadinessBaseline) -> None:
        with self._lock:
            self._baselines[athlete_id] = baseline

    def get_baseline(self, athlete_id: str) -> ReadinessBaseline | None:
        with self._lock:
            return self._baselines.get(athlete_id)

    # -- readiness assessments ----------------------------------------------

    def upsert(self, assessment: ReadinessAssessment) -> None:
        with self._lock:
            self._assessments[(assessment.athlete_id, assessment.date)] = assessment

    def get_assessment(self, athlete_id: str, day: date) -> ReadinessAssessment | None:
        with self._lock:
            return self._assessments.get((athlete_id, day))

    def readiness_scores(self, athlete_id: str, end: date, days: int = 7) -> list[float]:
        """Scored readiness for the ``days`` ending on ``end``, oldest first."""
        start = end - timedelta(days=days - 1)
        with self._lock:
            found = sorted(
                (a for (athlete, day), a in self._assessments.items()
                 if athlete == athlete_id and start <= day <= end and a.result is not None),
                key=lambda a: a.date,
            )
        return [float(a.result.score) for a in found]  # type: ignore[union-attr]

    # -- plans --------------------------------------------------------------

    def add_plan(self, plan: Plan) -> None:
        with self._lock:
            self._plans[plan.id] = copy.deepcopy(plan)

    def _plan(self, plan_id: str) -> Plan:
        plan = self._plans.get(plan_id)
        if plan is None:
            raise InvalidReferenceError(f"Plan {plan_id} not found")
        return plan

    def get_plan(self, plan_id: str) -> Plan | None:
        with self._lock:
            plan = self._plans.get(plan_id)
            return copy.deepcopy(plan) if plan is not None else None

    def get_phase(self, plan_id: str, phase_id: str) -> Phase | None:
        with self._lock:
            plan = self._plans.get(plan_id)
            phase = plan.find_phase(phase_id) if plan else None
            return copy.deepcopy(phase) if phase is not None else None

    def get_week(self, plan_id: str, week_id: str) -> WeeklyTarget | None:
        with self._lock:
            plan = self._plans.get(plan_id)
            week = plan.find_week(week_id) if plan else None
            return copy.deepcopy(week) if week is not None else None

    def get_workout(self, plan_id: str, workout_id: str) -> Workout | None:
        with self._lock:
            plan = self._plans.get(plan_id)
            workout = plan.find_workout(workout_id) if plan else None
            return copy.deepcopy(workout) if workout is not None else None

    def save_phase(self, plan_id: str, phase: Phase) -> None:
        with self._lock:
            plan = self._plan(plan_id)
            for i, existing in enumerate(plan.phases):
                if existing.id == phase.id:
                    plan.phases[i] = copy.deepcopy(phase)
                    return
            raise InvalidReferenceError(f"Phase {phase.id} not found in plan {plan_id}")

    def save_week(self, plan_id: str, week: WeeklyTarget) -> None:
        with self._lock:
            plan = self._plan(plan_id)
            for phase in plan.phases:
                for i, existing in enumerate(phase.weeks):
                    if existing.id == week.id:
                        phase.weeks[i] = copy.deepcopy(week)
                        return
            raise InvalidReferenceError(f"Week {week.id} not found in plan {plan_id}")

    def save_workout(self, plan_id: str, workout: Workout) -> None:
        with self._lock:
            plan = self._plan(plan_id)
            for i, existing in enumerate(plan.workouts):
                if existing.id == workout.id:
                    plan.workouts[i] = copy.deepcopy(workout)
                    return
            raise InvalidReferenceError(f"Workout {workout.id} not found in plan {plan_id}")

    def insert_phase(self, plan_id: str, phase: Phase) -> None:
        with self._lock:
            plan = self._plan(plan_id)
            if plan.find_phase(phase.id) is not None:
                raise InvalidReferenceError(f"Phase {phase.id} already exists in plan {plan_id}")
            plan.phases.append(copy.deepcopy(phase))

    @contextmanager
    def transaction(self, plan_id: str) -> Iterator[None]:
        """Snapshot the plan and its recommendations; restore both on error."""
        with self._lock:
            plan_snapshot = copy.deepcopy(self._plans.get(plan_id))
            rec_snapshot = {
                rid: copy.deepcopy(r)
                for rid, r in self._recommendations.items()
                if r.plan_id == plan_id
            }
            try:
                yield
            except Exception:
                logger.warning("Rolling back transaction on plan %s", plan_id)
                if plan_snapshot is not None:
                    self._plans[plan_id] = plan_snapshot
                for rid in [r for r, rec in self._recommendations.items() if rec.plan_id == plan_id]:
                    if rid not in rec_snapshot:
                        del self._recommendations[rid]
                self._recommendations.update(rec_snapshot)
                raise

    # -- recommendations ----------------------------------------------------

    def get(self, recommendation_id: str) -> Recommendation | None:
        with self._lock:
            rec = self._recommendations.get(recommendation_id)
            return copy.deepcopy(rec) if rec is not None else None

    def save(self, recommendation: Recommendation) -> None:
        with self._lock:
            self._recommendations[recommendation.id] = copy.deepcopy(recommendation)

    def list_pending(self, plan_id: str) -> list[Recommendation]:
        with self._lock:
            return [
                copy.deepcopy(r)
                for r in self._recommendations.values()
                if r.plan_id == plan_id and r.status is RecommendationStatus.PENDING
            ]
