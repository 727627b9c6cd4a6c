"""Trigger rules. Any concrete TriggerRule under this package is auto-discovered."""
