"""Tests for DeloadWeekRule — SAFETY tier recovery-week conversion."""

from __future__ import annotations

from datetime import date

from adaptive_engine.math.deload import evaluate_deload_need
from adaptive_engine.models.enums import Priority, WeekType
from adaptive_engine.models.recommendation import WeekTypeChange
from adaptive_engine.rules.safety.deload_week import DeloadWeekRule


class TestDeloadWeekRule:
    def setup_method(self) -> None:
        self.rule = DeloadWeekRule()

    def test_is_safety_priority(self) -> None:
        assert self.rule.priority == Priority.SAFETY

    def test_severe_deload_converts_week(self, context_factory) -> None:
        deload = evaluate_deload_need(tsb=-30.0)
        draft = self.rule.evaluate(context_factory(deload=deload))
        assert draft is not None
        assert draft.target_week_id == "week-1"
        assert draft.confidence == 0.9
        changes = draft.proposed_changes
        assert isinstance(changes, WeekTypeChange)
        assert changes.proposed_type is WeekType.RECOVERY
        assert changes.original_type is WeekType.NORMAL
        assert changes.reason == deload.message
        assert draft.trigger_data == {"severity": "severe", "triggers": ["tsb"]}

    def test_mild_deload_lower_confidence(self, context_factory) -> None:
        draft = self.rule.evaluate(context_factory(deload=evaluate_deload_need(tsb=-20.0)))
        assert draft.confidence == 0.7

    def test_moderate_deload(self, context_factory) -> None:
        deload = evaluate_deload_need(tsb=-20.0, recent_recovery_scores=[30, 30, 30])
        assert self.rule.evaluate(context_factory(deload=deload)).confidence == 0.8

    def test_no_deload_needed(self, context_factory) -> None:
        assert self.rule.evaluate(context_factory(deload=evaluate_deload_need(tsb=0.0))) is None

    def test_already_recovery_week(self, plan_factory, context_factory) -> None:
        for week_type in (WeekType.RECOVERY, WeekType.DELOAD):
            plan = plan_factory(week_type=week_type)
            ctx = context_factory(plan=plan, deload=evaluate_deload_need(tsb=-30.0))
            assert self.rule.evaluate(ctx) is None

    def test_no_current_week(self, context_factory) -> None:
        ctx = context_factory(reference_date=date(2026, 3, 10), deload=evaluate_deload_need(tsb=-30.0))
        assert self.rule.evaluate(ctx) is None
