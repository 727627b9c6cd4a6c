"""Shared test fixtures: a three-phase plan, load histories, readiness and stores."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Callable

import pytest

from adaptive_engine.math.readiness import calculate_readiness_score
from adaptive_engine.models.context import AdaptationContext
from adaptive_engine.models.enums import PhaseType, RiskLevel, WorkoutCategory
from adaptive_engine.models.load import DailyLoadSample, LoadMetrics
from adaptive_engine.models.plan import (
    ExercisePrescription,
    Phase,
    Plan,
    PlanEvent,
    WeeklyTarget,
    Workout,
)
from adaptive_engine.models.readiness import (
    ReadinessAssessment,
    ReadinessBaseline,
    ReadinessResult,
)
from adaptive_engine.repository import InMemoryStore

TODAY = date(2026, 3, 4)  # Wednesday


def daily_loads(values: list[float], end: date = TODAY) -> list[DailyLoadSample]:
    """One sample per day, the last one on ``end``."""
    start = end - timedelta(days=len(values) - 1)
    return [
        DailyLoadSample(date=start + timedelta(days=i), training_stress=v)
        for i, v in enumerate(values)
    ]


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def plan_factory() -> Callable[..., Plan]:
    """Factory for a base → build → peak plan with today inside the base phase.

    Usage:
        plan = plan_factory(week_type=WeekType.RECOVERY)
    """

    def factory(**week_overrides) -> Plan:
        week = WeeklyTarget(
            id="week-1",
            phase_id="phase-base",
            week_start_date=date(2026, 3, 2),
            target_hours=8.0,
            target_tss=400.0,
            **week_overrides,
        )
        base = Phase(
            id="phase-base",
            plan_id="plan-1",
            name="Base",
            phase_type=PhaseType.BASE,
            order_index=0,
            start_date=date(2026, 2, 2),
            end_date=date(2026, 3, 15),
            weeks=[week],
        )
        build = Phase(
            id="phase-build",
            plan_id="plan-1",
            name="Build",
            phase_type=PhaseType.BUILD,
            order_index=1,
            start_date=date(2026, 3, 16),
            end_date=date(2026, 4, 26),
        )
        peak = Phase(
            id="phase-peak",
            plan_id="plan-1",
            name="Peak",
            phase_type=PhaseType.PEAK,
            order_index=2,
            start_date=date(2026, 4, 27),
            end_date=date(2026, 5, 17),
        )
        strength = Workout(
            id="workout-strength",
            plan_id="plan-1",
            date=TODAY,
            category=WorkoutCategory.STRENGTH,
            intensity="hard",
            title="Lower Body Strength",
            target_duration_min=60,
            exercises=[
                ExercisePrescription(name="Back Squat", sets=3, reps=8, weight=100.0),
                ExercisePrescription(name="Romanian Deadlift", sets=3, reps=10, weight=80.0),
            ],
        )
        run = Workout(
            id="workout-run",
            plan_id="plan-1",
            date=TODAY + timedelta(days=1),
            category=WorkoutCategory.CARDIO,
            intensity="moderate",
            title="Tempo Run",
            target_duration_min=45,
        )
        return Plan(
            id="plan-1",
            athlete_id="athlete-1",
            phases=[base, build, peak],
            workouts=[strength, run],
            events=[PlanEvent(id="event-1", name="Spring 10K", event_date=date(2026, 5, 17))],
        )

    return factory


@pytest.fixture
def plan(plan_factory: Callable[..., Plan]) -> Plan:
    return plan_factory()


@pytest.fixture
def store(plan: Plan) -> InMemoryStore:
    s = InMemoryStore()
    s.add_plan(plan)
    return s


@pytest.fixture
def steady_loads() -> list[DailyLoadSample]:
    """42 days at a constant 50 TSS ending today → CTL ≈ ATL ≈ 50."""
    return daily_loads([50.0] * 42)


@pytest.fixture
def overreached_loads() -> list[DailyLoadSample]:
    """Five weeks at 40 then a week at 130 → deeply negative TSB."""
    return daily_loads([40.0] * 35 + [130.0] * 7)


@pytest.fixture
def baseline() -> ReadinessBaseline:
    return ReadinessBaseline(
        avg_hrv=60.0,
        std_hrv=5.0,
        avg_grip_strength=50.0,
        avg_vertical_jump=45.0,
    )


@pytest.fixture
def assessment_factory() -> Callable[..., ReadinessAssessment]:
    def factory(subjective: float = 7, day: date = TODAY, **fields) -> ReadinessAssessment:
        return ReadinessAssessment(
            athlete_id="athlete-1",
            date=day,
            subjective_readiness=subjective,
            **fields,
        )

    return factory


@pytest.fixture
def make_loads() -> Callable[..., list[DailyLoadSample]]:
    """Factory fixture wrapping ``daily_loads``.

    Usage:
        samples = make_loads([50.0] * 42)
    """
    return daily_loads


@pytest.fixture
def load_factory() -> Callable[..., LoadMetrics]:
    """LoadMetrics for today with the given form."""

    def factory(tsb: float, ctl: float = 60.0) -> LoadMetrics:
        return LoadMetrics(
            date=TODAY,
            ctl=ctl,
            atl=ctl - tsb,
            tsb=tsb,
            monotony=1.2,
            strain=400.0,
            acwr=1.0,
            risk_level=RiskLevel.LOW,
            recommendation="Training load is appropriate",
        )

    return factory


@pytest.fixture
def readiness_factory() -> Callable[[float], ReadinessResult]:
    """Score a subjective-only assessment (score = subjective × 10)."""

    def factory(subjective: float) -> ReadinessResult:
        return calculate_readiness_score(
            ReadinessAssessment(
                athlete_id="athlete-1", date=TODAY, subjective_readiness=subjective
            )
        )

    return factory


@pytest.fixture
def context_factory(plan_factory: Callable[..., Plan]) -> Callable[..., AdaptationContext]:
    """Build an AdaptationContext for today over a fresh plan.

    Usage:
        ctx = context_factory(readiness_history=(30, 35))
    """

    def factory(plan: Plan | None = None, reference_date: date = TODAY, **fields):
        return AdaptationContext(
            plan=plan if plan is not None else plan_factory(),
            reference_date=reference_date,
            **fields,
        )

    return factory
