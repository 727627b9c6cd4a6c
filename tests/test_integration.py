"""End-to-end: stored data → context → recommendations → preview → applied plan."""

from __future__ import annotations

from datetime import timedelta

import pytest

from adaptive_engine.engine import AdaptationEngine
from adaptive_engine.models.enums import PhaseType, RecommendationType, WeekType
from adaptive_engine.repository import InMemoryStore
from adaptive_engine.services import ContextBuilder, ReadinessService


@pytest.fixture
def fatigued_store(store: InMemoryStore, overreached_loads, assessment_factory, today) -> InMemoryStore:
    store.add_daily_loads("athlete-1", overreached_loads)
    service = ReadinessService(store, store)
    for offset in range(4):
        service.submit(assessment_factory(3, day=today - timedelta(days=offset)))
    return store


class TestFatiguedAthlete:
    def _context(self, store: InMemoryStore, today):
        return ContextBuilder(store, store).build(
            store.get_plan("plan-1"),
            today,
            exercise_history={"Back Squat": [100.0] * 7},
            exercise_alternatives={"back squat": "Front Squat"},
        )

    def test_full_cycle(self, fatigued_store: InMemoryStore, today) -> None:
        engine = AdaptationEngine(fatigued_store)
        trace = engine.evaluate_with_trace(self._context(fatigued_store, today))

        by_type = {r.recommendation_type: r for r in trace.created}
        assert set(by_type) == {
            RecommendationType.PHASE_INSERT.value,
            RecommendationType.WEEK_TYPE_CHANGE.value,
            RecommendationType.WORKOUT_INTENSITY_SCALE.value,
        }
        # Substitute and intensity scale both target today's strength workout
        assert [d.rule_id for d in trace.suppressed] == ["plateau_substitute"]

        insert = by_type[RecommendationType.PHASE_INSERT.value]
        preview = engine.preview(insert.id)
        assert preview.current_state["fatigue_status"] == "High fatigue"
        assert preview.training_load_projection.projected_tsb_7_days > preview.training_load_projection.current_tsb

        for rec in trace.created:
            engine.respond(rec.id, "accept")

        plan = fatigued_store.get_plan("plan-1")
        phases = plan.ordered_phases()
        assert [p.phase_type for p in phases] == [
            PhaseType.BASE,
            PhaseType.RECOVERY,
            PhaseType.BUILD,
            PhaseType.PEAK,
        ]
        assert plan.find_week("week-1").week_type is WeekType.RECOVERY
        strength = plan.find_workout("workout-strength")
        assert strength.intensity == "moderate"
        assert strength.original_intensity == "hard"
        assert strength.readiness_adjusted is True
        assert fatigued_store.list_pending("plan-1") == []

    def test_second_run_is_quiet(self, fatigued_store: InMemoryStore, today) -> None:
        engine = AdaptationEngine(fatigued_store)
        engine.evaluate(self._context(fatigued_store, today))
        assert engine.evaluate(self._context(fatigued_store, today)) == []


class TestFreshAthlete:
    def test_fresh_and_ready_adds_volume(self, store, make_loads, assessment_factory, today) -> None:
        store.add_daily_loads("athlete-1", make_loads([60.0] * 35 + [0.0] * 7))
        service = ReadinessService(store, store)
        for offset in range(3):
            service.submit(assessment_factory(9, day=today - timedelta(days=offset)))

        ctx = ContextBuilder(store, store).build(store.get_plan("plan-1"), today)
        assert ctx.load.tsb > 10
        [rec] = AdaptationEngine(store).evaluate(ctx)
        assert rec.recommendation_type == RecommendationType.WEEK_VOLUME_ADJUST.value
        assert rec.proposed_changes.volume_percentage_change == 10.0
