"""Per-exercise load progression models and plateau diagnosis.

Three interchangeable strategies:
    linear     — add a fixed increment every session
    double     — add reps through a band, then add weight and reset reps
    rpe_based  — adjust weight from the last set's RPE (or RIR)

References:
    Helms, Morgan & Valdez. The Muscle and Strength Pyramid: Training.
    Zourdos et al. (2016). Novel resistance training-specific RPE scale
        measuring repetitions in reserve. J Strength Cond Res 30(1):267-275.
"""

from __future__ import annotations

import dataclasses
import math
from typing import Sequence

from adaptive_engine.config import DEFAULT_CONFIG, ProgressionParams
from adaptive_engine.math.tempo import rir_to_rpe
from adaptive_engine.models.enums import (
    PLATEAU_CHANGE_REPS_AFTER,
    PLATEAU_SWAP_AFTER,
    PlateauAction,
    ProgressionModel,
)
from adaptive_engine.models.progression import LastSession, Plateau, ProgressionSuggestion


def round_to_increment(weight: float, increment: float) -> float:
    """Round to the nearest loadable increment (halves round up)."""
    if increment <= 0:
        return weight
    return math.floor(weight / increment + 0.5) * increment


def _round_toward_change(weight: float, current: float, increment: float) -> float:
    """Round onto the plate increment without undoing the model's change.

    A raise rounds up and a drop rounds down, so an increment smaller than
    the plate still moves the weight by one plate.
    """
    if increment <= 0 or weight == current:
        return round_to_increment(weight, increment)
    steps = weight / increment
    if weight > current:
        return math.ceil(steps - 1e-9) * increment
    return math.floor(steps + 1e-9) * increment


def _last_set_rpe(session: LastSession) -> float | None:
    if not session.sets:
        return None
    last = session.sets[-1]
    if last.rpe is not None:
        return last.rpe
    if last.rir is not None:
        return rir_to_rpe(last.rir)
    return None


def _linear(session: LastSession, params: ProgressionParams) -> tuple[float, int, str, bool]:
    increment = params.lower_increment if session.is_lower_body else params.upper_increment
    return (
        session.weight + increment,
        session.reps,
        f"Linear progression: add {increment:g} and repeat {session.reps} reps",
        True,
    )


def _double(session: LastSession, params: ProgressionParams) -> tuple[float, int, str, bool]:
    all_sets_at_top = bool(session.sets) and all(s.reps >= params.rep_high for s in session.sets)
    if all_sets_at_top:
        return (
            session.weight + params.double_increment,
            params.rep_low,
            (
                f"All sets reached {params.rep_high} reps. Add {params.double_increment:g} "
                f"and start at {params.rep_low} reps"
            ),
            True,
        )
    next_reps = min(max(session.reps, params.rep_low - 1) + 1, params.rep_high)
    return (
        session.weight,
        next_reps,
        (
            f"Try for {next_reps} reps at {session.weight:g} "
            f"(target: {params.rep_high} on every set before adding weight)"
        ),
        True,
    )


def _rpe_based(session: LastSession, params: ProgressionParams) -> tuple[float, int, str, bool]:
    rpe = _last_set_rpe(session)
    if rpe is None:
        return (
            session.weight,
            session.reps,
            "RPE or RIR must be logged on the last set for an RPE-based suggestion",
            False,
        )
    target = f"{params.rpe_low:g}-{params.rpe_high:g}"
    if rpe < params.rpe_low:
        return (
            session.weight + params.rpe_increment,
            session.reps,
            f"RPE {rpe:g} was below target ({target}). Add {params.rpe_increment:g}",
            True,
        )
    if rpe > params.rpe_high:
        return (
            session.weight - params.rpe_increment,
            session.reps,
            f"RPE {rpe:g} was above target ({target}). Drop {params.rpe_increment:g}",
            True,
        )
    return (
        session.weight,
        session.reps,
        f"RPE {rpe:g} in target range ({target}). Hold the weight",
        True,
    )


_MODELS = {
    ProgressionModel.LINEAR: _linear,
    ProgressionModel.DOUBLE: _double,
    ProgressionModel.RPE_BASED: _rpe_based,
}


def suggest_progression(
    model: ProgressionModel | str,
    last_session: LastSession,
    params: ProgressionParams = DEFAULT_CONFIG.progression,
) -> ProgressionSuggestion:
    """Suggest the next session's weight and reps for one exercise.

    Args:
        model: Progression strategy.
        last_session: The exercise's most recent working sets.
        params: Increments, rep band and RPE band.

    Returns:
        ProgressionSuggestion. ``confident`` is False when the RPE model
        has no RPE/RIR to work from; weight and reps are then unchanged.
    """
    model = ProgressionModel(model)
    weight, reps, reasoning, confident = _MODELS[model](last_session, params)
    return ProgressionSuggestion(
        model=model,
        exercise=last_session.exercise,
        current_weight=last_session.weight,
        current_reps=last_session.reps,
        suggested_weight=max(
            _round_toward_change(weight, last_session.weight, params.plate_increment), 0.0
        ),
        suggested_reps=reps,
        reasoning=reasoning,
        confident=confident,
    )


def plateau_action(sessions_stagnant: int) -> PlateauAction:
    """Escalate the corrective action the longer an exercise stalls."""
    if sessions_stagnant >= PLATEAU_SWAP_AFTER:
        return PlateauAction.SWAP_EXERCISE
    if sessions_stagnant >= PLATEAU_CHANGE_REPS_AFTER:
        return PlateauAction.CHANGE_REP_RANGE
    return PlateauAction.DELOAD_EXERCISE


_ACTION_MESSAGES = {
    PlateauAction.DELOAD_EXERCISE: "Deload this exercise by ~10% and build back up",
    PlateauAction.CHANGE_REP_RANGE: "Change the rep range to provide a new stimulus",
    PlateauAction.SWAP_EXERCISE: "Swap to a variation that trains the same pattern",
}


def count_stagnant_sessions(best_weights: Sequence[float]) -> int:
    """Consecutive most recent sessions that did not beat the best before them."""
    stagnant = 0
    for i in range(len(best_weights) - 1, 0, -1):
        if best_weights[i] > max(best_weights[:i]):
            break
        stagnant += 1
    return stagnant


def detect_plateau(
    exercise: str,
    best_weights: Sequence[float],
    threshold: int = DEFAULT_CONFIG.progression.plateau_threshold,
) -> Plateau | None:
    """Flag a plateau when the best working weight has stalled.

    Args:
        exercise: Exercise name.
        best_weights: Best working weight per session, oldest first.
        threshold: Stagnant sessions needed to call it a plateau.

    Returns:
        A Plateau, or None when the exercise is still progressing.
    """
    stagnant = count_stagnant_sessions(best_weights)
    if stagnant < threshold:
        return None
    action = plateau_action(stagnant)
    return Plateau(
        exercise=exercise,
        sessions_stagnant=stagnant,
        suggested_action=action,
        message=f"{exercise} has not progressed in {stagnant} sessions. {_ACTION_MESSAGES[action]}",
    )


def suggest_next_session(
    model: ProgressionModel | str,
    last_session: LastSession,
    best_weights: Sequence[float] = (),
    params: ProgressionParams = DEFAULT_CONFIG.progression,
) -> ProgressionSuggestion:
    """Model suggestion with any plateau diagnosis attached."""
    suggestion = suggest_progression(model, last_session, params)
    plateau = detect_plateau(last_session.exercise, best_weights, params.plateau_threshold)
    if plateau is None:
        return suggestion
    return dataclasses.replace(suggestion, plateau=plateau)
