"""Adaptive training load and periodization engine."""

__version__ = "0.1.0"
