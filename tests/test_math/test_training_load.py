"""Tests for CTL/ATL/TSB, monotony, strain, ACWR and load history."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from adaptive_engine.exceptions import DuplicateSampleError
from adaptive_engine.math.training_load import (
    TSB_GUIDANCE,
    analyze_training_strain,
    build_daily_series,
    calculate_acwr,
    calculate_atl,
    calculate_ctl,
    calculate_ewma_load,
    calculate_load_history,
    calculate_monotony,
    calculate_strain,
    calculate_tsb,
    classify_tsb,
    compute_load_metrics,
    project_tsb,
    trailing_week_loads,
    upsert_sample,
)
from adaptive_engine.models.enums import RiskLevel
from adaptive_engine.models.load import DailyLoadSample


class TestDailySeries:
    def test_sorted_by_date(self, make_loads) -> None:
        samples = make_loads([10.0, 20.0, 30.0])
        ordered = build_daily_series(reversed(samples))
        assert [s.training_stress for s in ordered] == [10.0, 20.0, 30.0]

    def test_duplicate_date_rejected(self, today: date) -> None:
        samples = [DailyLoadSample(today, 50.0), DailyLoadSample(today, 60.0)]
        with pytest.raises(DuplicateSampleError):
            build_daily_series(samples)

    def test_upsert_replaces_same_date(self, make_loads, today: date) -> None:
        samples = make_loads([10.0, 20.0])
        updated = upsert_sample(samples, DailyLoadSample(today, 99.0))
        assert len(updated) == 2
        assert updated[-1].training_stress == 99.0


class TestEWMA:
    def test_steady_load_converges(self, steady_loads, today: date) -> None:
        ctl = calculate_ctl(steady_loads, today)
        atl = calculate_atl(steady_loads, today)
        assert ctl == pytest.approx(50.0, abs=0.5)
        assert atl == pytest.approx(50.0, abs=0.5)
        assert calculate_tsb(ctl, atl) == pytest.approx(0.0, abs=0.5)

    def test_empty_history_is_zero(self, today: date) -> None:
        assert calculate_ctl([], today) == 0.0
        assert calculate_atl([], today) == 0.0

    def test_no_samples_before_reference(self, make_loads, today: date) -> None:
        samples = make_loads([50.0] * 5)
        assert calculate_ewma_load(samples, 7, today - timedelta(days=30)) == 0.0

    def test_rest_days_after_last_sample_decay(self, steady_loads, today: date) -> None:
        later = today + timedelta(days=10)
        assert calculate_atl(steady_loads, later) < calculate_atl(steady_loads, today)

    def test_gaps_count_as_rest(self, today: date) -> None:
        sparse = [DailyLoadSample(today - timedelta(days=i), 50.0) for i in range(0, 42, 2)]
        dense = [DailyLoadSample(today - timedelta(days=i), 50.0) for i in range(42)]
        assert calculate_ctl(sparse, today) < calculate_ctl(dense, today)

    def test_defaults_to_latest_sample(self, make_loads, today: date) -> None:
        samples = make_loads([40.0] * 10)
        assert calculate_ewma_load(samples, 7) == calculate_ewma_load(samples, 7, today)

    def test_rounded_to_one_decimal(self, make_loads) -> None:
        value = calculate_ewma_load(make_loads([13.0, 77.0, 41.0]), 7)
        assert value == round(value, 1)

    def test_higher_recent_load_raises_ctl(self, make_loads, today: date) -> None:
        base = make_loads([50.0] * 42)
        bumped = make_loads([50.0] * 41 + [150.0])
        assert calculate_ctl(bumped, today) > calculate_ctl(base, today)

    def test_acute_reacts_faster(self, overreached_loads, today: date) -> None:
        ctl = calculate_ctl(overreached_loads, today)
        atl = calculate_atl(overreached_loads, today)
        assert atl > ctl
        assert calculate_tsb(ctl, atl) < -25


class TestMonotonyAndStrain:
    def test_fewer_than_two_days(self) -> None:
        assert calculate_monotony([50.0]) == 0.0

    def test_constant_nonzero_load_is_max(self) -> None:
        assert calculate_monotony([50.0] * 7) == 10.0

    def test_all_rest_is_zero(self) -> None:
        assert calculate_monotony([0.0] * 7) == 0.0

    def test_varied_week(self) -> None:
        monotony = calculate_monotony([100.0, 0.0, 80.0, 0.0, 120.0, 60.0, 0.0])
        assert 0 < monotony < 1.5

    def test_strain(self) -> None:
        assert calculate_strain(500.0, 1.2) == 600

    def test_acwr(self) -> None:
        assert calculate_acwr(60.0, 50.0) == 1.2
        assert calculate_acwr(60.0, 0.0) == 0.0


class TestStrainAnalysis:
    def test_varied_week_low_risk(self) -> None:
        week = [60.0, 0.0, 70.0, 30.0, 0.0, 90.0, 20.0]
        analysis = analyze_training_strain(week, atl=40.0, ctl=40.0)
        assert analysis.risk_level is RiskLevel.LOW
        assert analysis.recommendation == "Training load is appropriate"

    def test_monotonous_week_very_high(self) -> None:
        analysis = analyze_training_strain([80.0] * 7, atl=80.0, ctl=80.0)
        assert analysis.risk_level is RiskLevel.VERY_HIGH

    def test_acwr_spike_high(self) -> None:
        week = [60.0, 0.0, 70.0, 30.0, 0.0, 90.0, 20.0]
        analysis = analyze_training_strain(week, atl=80.0, ctl=50.0)
        assert analysis.acwr == 1.6
        assert analysis.risk_level is RiskLevel.HIGH

    def test_too_low_load_warning(self) -> None:
        week = [20.0, 0.0, 10.0, 0.0, 15.0, 0.0, 5.0]
        analysis = analyze_training_strain(week, atl=20.0, ctl=50.0)
        assert analysis.recommendation == "Training load may be too low to maintain fitness"

    def test_trailing_week_zero_fills(self, today: date) -> None:
        samples = [DailyLoadSample(today, 70.0), DailyLoadSample(today - timedelta(days=3), 40.0)]
        assert trailing_week_loads(samples, today) == [0.0, 0.0, 0.0, 40.0, 0.0, 0.0, 70.0]


class TestLoadMetrics:
    def test_compute_load_metrics(self, steady_loads, today: date) -> None:
        metrics = compute_load_metrics(steady_loads, today)
        assert metrics.date == today
        assert metrics.tsb == metrics.ctl - metrics.atl
        assert metrics.monotony == 10.0
        assert metrics.acwr == pytest.approx(1.0, abs=0.02)

    def test_history_one_point_per_day(self, steady_loads, today: date) -> None:
        start = today - timedelta(days=6)
        history = calculate_load_history(steady_loads, start, today)
        assert [p.date for p in history] == [start + timedelta(days=i) for i in range(7)]
        for point in history:
            assert point.tsb == point.ctl - point.atl

    def test_tsb_is_exact_difference_over_varied_history(self, make_loads, today: date) -> None:
        pattern = [35.0, 90.0, 0.0, 120.0, 60.0, 15.0, 75.0, 140.0, 0.0, 55.0]
        samples = make_loads(pattern * 6)
        history = calculate_load_history(samples, today - timedelta(days=30), today)
        for point in history:
            assert point.tsb == point.ctl - point.atl
        metrics = compute_load_metrics(samples, today)
        assert metrics.tsb == metrics.ctl - metrics.atl

    def test_history_matches_point_values(self, overreached_loads, today: date) -> None:
        history = calculate_load_history(overreached_loads, today, today)
        assert history[0].ctl == calculate_ctl(overreached_loads, today)
        assert history[0].atl == calculate_atl(overreached_loads, today)

    def test_history_empty_range(self, steady_loads, today: date) -> None:
        assert calculate_load_history(steady_loads, today, today - timedelta(days=1)) == []


class TestTSBBands:
    @pytest.mark.parametrize(
        "tsb, band",
        [
            (30, "very_fresh"),
            (12, "fresh"),
            (0, "optimal"),
            (-15, "tired"),
            (-30, "fatigued"),
            (-45, "very_fatigued"),
        ],
    )
    def test_classify(self, tsb: float, band: str) -> None:
        assert classify_tsb(tsb) == band
        assert band in TSB_GUIDANCE

    def test_projection(self) -> None:
        assert project_tsb(-10.0, 2.5, 4) == 0.0
