"""Serialization module — plain-dict records with ISO dates."""

from adaptive_engine.serialization.records import (
    changes_to_dict,
    parse_changes,
    recommendation_to_record,
    record_to_recommendation,
)

__all__ = [
    "changes_to_dict",
    "parse_changes",
    "recommendation_to_record",
    "record_to_recommendation",
]
