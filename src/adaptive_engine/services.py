"""Services that wire the calculation core to the repositories.

``ReadinessService`` scores and stores daily readiness submissions.
``ContextBuilder`` assembles the AdaptationContext snapshot the trigger
rules evaluate, from stored load samples, readiness and exercise history.
"""

from __future__ import annotations

import dataclasses
from datetime import date, timedelta
from types import MappingProxyType
from typing import Mapping, Sequence

from adaptive_engine.config import DEFAULT_CONFIG, EngineConfig
from adaptive_engine.math.deload import evaluate_deload_need
from adaptive_engine.math.progression import detect_plateau
from adaptive_engine.math.readiness import calculate_readiness_score
from adaptive_engine.math.training_load import compute_load_metrics
from adaptive_engine.models.context import AdaptationContext
from adaptive_engine.models.deload import PlateauedExercise
from adaptive_engine.models.plan import Plan
from adaptive_engine.models.progression import Plateau
from adaptive_engine.models.readiness import ReadinessAssessment
from adaptive_engine.repository import (
    AssessmentRepository,
    BaselineProvider,
    LoadSampleProvider,
    ReadinessHistoryProvider,
)


class ReadinessService:
    """Scores a readiness submission and upserts it with its result."""

    def __init__(
        self,
        baselines: BaselineProvider,
        assessments: AssessmentRepository,
        config: EngineConfig = DEFAULT_CONFIG,
    ) -> None:
        self.baselines = baselines
        self.assessments = assessments
        self.config = config

    def submit(self, assessment: ReadinessAssessment) -> ReadinessAssessment:
        """Score ``assessment`` and store it.

        A second submission for the same athlete and date replaces the
        first.
        """
        baseline = self.baselines.get_baseline(assessment.athlete_id)
        result = calculate_readiness_score(assessment, baseline, self.config.readiness)
        scored = dataclasses.replace(assessment, result=result)
        self.assessments.upsert(scored)
        return scored


class ContextBuilder:
    """Builds a frozen AdaptationContext for one athlete and date."""

    def __init__(
        self,
        loads: LoadSampleProvider,
        readiness: ReadinessHistoryProvider,
        config: EngineConfig = DEFAULT_CONFIG,
    ) -> None:
        self.loads = loads
        self.readiness = readiness
        self.config = config

    def build(
        self,
        plan: Plan,
        reference_date: date,
        exercise_history: Mapping[str, Sequence[float]] | None = None,
        phase_progress_pct: float | None = None,
        compliance_history: Sequence[float] = (),
        exercise_alternatives: Mapping[str, str] | None = None,
        muscles_over_mrv: Sequence[str] = (),
        days_since_last_deload: int | None = None,
    ) -> AdaptationContext:
        """Snapshot everything the trigger rules look at.

        Args:
            plan: A detached copy of the athlete's plan.
            reference_date: The day being evaluated.
            exercise_history: Best working weight per session, oldest first,
                keyed by exercise name. Used for plateau detection.
            phase_progress_pct: Percent of the current phase's goal achieved.
            compliance_history: Weekly actual/planned hour ratios, oldest first.
            exercise_alternatives: Replacement exercise per exercise name.
            muscles_over_mrv: Muscle groups currently above MRV.
            days_since_last_deload: Passed through to the deload evaluator.

        Returns:
            AdaptationContext. Missing inputs are left empty so the rules
            needing them do not fire.
        """
        athlete_id = plan.athlete_id
        lookback = 2 * self.config.ctl_window_days
        samples = self.loads.get_daily_loads(
            athlete_id, reference_date - timedelta(days=lookback), reference_date
        )
        load = compute_load_metrics(samples, reference_date, self.config) if samples else None

        assessment = self.readiness.get_assessment(athlete_id, reference_date)
        history = tuple(self.readiness.readiness_scores(athlete_id, reference_date))

        plateaus: list[Plateau] = []
        for exercise, best_weights in (exercise_history or {}).items():
            plateau = detect_plateau(
                exercise, best_weights, self.config.progression.plateau_threshold
            )
            if plateau is not None:
                plateaus.append(plateau)

        deload = None
        if load is not None or history or plateaus or muscles_over_mrv:
            # Exercise history is logged weekly, so stagnant sessions count as weeks
            deload = evaluate_deload_need(
                tsb=load.tsb if load is not None else None,
                muscles_over_mrv=muscles_over_mrv,
                plateaued_exercises=[
                    PlateauedExercise(p.exercise, p.sessions_stagnant) for p in plateaus
                ],
                recent_recovery_scores=history,
                days_since_last_deload=days_since_last_deload,
                thresholds=self.config.deload,
            )

        alternatives = {k.lower(): v for k, v in (exercise_alternatives or {}).items()}
        return AdaptationContext(
            plan=plan,
            reference_date=reference_date,
            load=load,
            readiness=assessment.result if assessment is not None else None,
            readiness_history=history,
            deload=deload,
            plateaus=tuple(plateaus),
            phase_progress_pct=phase_progress_pct,
            compliance_history=tuple(compliance_history),
            exercise_alternatives=MappingProxyType(alternatives),
        )
