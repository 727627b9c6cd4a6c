"""Custom exception hierarchy for the adaptive engine.

Only the recommendation state machine raises these. Calculation modules
degrade to documented defaults instead of raising for missing inputs.
"""

from __future__ import annotations


class AdaptiveEngineError(Exception):
    """Base exception for all adaptive_engine errors."""


class DuplicateSampleError(AdaptiveEngineError, ValueError):
    """Two daily load samples were supplied for the same calendar date."""


class RecommendationNotFoundError(AdaptiveEngineError, LookupError):
    """No recommendation exists with the requested id."""

    def __init__(self, recommendation_id: str) -> None:
        super().__init__(f"Recommendation {recommendation_id} not found")
        self.recommendation_id = recommendation_id


class InvalidReferenceError(AdaptiveEngineError):
    """A recommendation's target does not resolve, or its payload is incomplete."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class IllegalStateTransitionError(AdaptiveEngineError):
    """Attempted to respond to a recommendation that is no longer pending."""

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(
            f"Cannot {requested} recommendation with status: {current}"
        )
        self.current = current
        self.requested = requested


class ApplyFailureError(AdaptiveEngineError):
    """Persisting an applied recommendation failed; all changes were rolled back."""

    def __init__(self, recommendation_id: str, cause: Exception) -> None:
        super().__init__(
            f"Failed to apply recommendation {recommendation_id}: {cause}"
        )
        self.recommendation_id = recommendation_id
        self.cause = cause
