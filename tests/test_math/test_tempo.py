"""Tests for tempo parsing, time under tension and effective reps."""

from __future__ import annotations

import pytest

from adaptive_engine.math.tempo import (
    assess_tut_for_adaptation,
    calculate_effective_reps,
    calculate_tut,
    format_tempo,
    parse_tempo,
    recommended_tempo,
)
from adaptive_engine.models.tempo import Tempo


class TestParseTempo:
    def test_plain(self) -> None:
        assert parse_tempo("3-1-2-0") == Tempo(3, 1, 2, 0)

    def test_explosive_phase(self) -> None:
        tempo = parse_tempo("2-0-X-0")
        assert tempo.concentric == 0.5
        assert tempo.per_rep_seconds == 2.5

    @pytest.mark.parametrize("text", [None, "", "3-1-2", "3-1-2-0-1", "3-a-2-0", "3--1-2-0"])
    def test_malformed(self, text) -> None:
        assert parse_tempo(text) is None

    def test_format_round_trip(self) -> None:
        assert format_tempo(parse_tempo("3-0-X-1")) == "3-0-X-1"


class TestTimeUnderTension:
    def test_default_tempo(self) -> None:
        tut = calculate_tut(None, reps=10, sets=3)
        assert tut.tempo == "2-0-1-0"
        assert tut.per_rep == 3.0
        assert tut.per_set == 30.0
        assert tut.total == 90.0

    def test_malformed_falls_back(self) -> None:
        assert calculate_tut("slow", reps=5).per_rep == 3.0

    def test_explicit_tempo(self) -> None:
        tut = calculate_tut("4-1-X-0", reps=8, sets=2)
        assert tut.per_rep == 5.5
        assert tut.per_set == 44.0
        assert tut.total == 88.0

    def test_hypertrophy_window(self) -> None:
        assert assess_tut_for_adaptation(45, "hypertrophy").is_appropriate is True
        short = assess_tut_for_adaptation(12, "hypertrophy")
        assert short.is_appropriate is False
        assert "too short" in short.feedback

    def test_recommended_tempo_fallback(self) -> None:
        assert recommended_tempo("hypertrophy") == "3-0-1-0"
        assert recommended_tempo("unknown") == "2-0-1-0"


class TestEffectiveReps:
    @pytest.mark.parametrize(
        "rpe, expected",
        [(10, 5), (9, 5), (8.5, 4), (7, 3), (6, 2), (5, 1)],
    )
    def test_rpe_caps(self, rpe: float, expected: int) -> None:
        assert calculate_effective_reps(10, rpe=rpe).effective_reps == expected

    def test_never_exceeds_total(self) -> None:
        assert calculate_effective_reps(2, rpe=10).effective_reps == 2

    def test_rir_converted(self) -> None:
        result = calculate_effective_reps(10, rir=1)
        assert result.effective_reps == 5

    def test_assumed_rpe_without_data(self) -> None:
        result = calculate_effective_reps(10)
        assert result.effective_reps == 3
        assert result.rpe is None

    def test_rir_derived_from_rpe(self) -> None:
        assert calculate_effective_reps(8, rpe=8).rir == 2
