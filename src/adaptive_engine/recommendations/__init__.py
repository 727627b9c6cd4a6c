"""Applying and previewing plan recommendations."""

from adaptive_engine.recommendations.appliers import apply_recommendation
from adaptive_engine.recommendations.previews import build_preview

__all__ = ["apply_recommendation", "build_preview"]
