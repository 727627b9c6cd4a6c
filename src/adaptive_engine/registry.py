"""Trigger registry with auto-discovery of TriggerRule subclasses."""

from __future__ import annotations

import importlib
import logging
import pkgutil

from adaptive_engine.rules.base import TriggerRule

logger = logging.getLogger(__name__)


class TriggerRegistry:
    """Discovers and manages all TriggerRule implementations.

    Auto-discovers rules by scanning the rules/ package tree for any
    concrete subclasses of TriggerRule. New triggers are added simply by
    placing a .py file in the appropriate subdirectory.
    """

    def __init__(self) -> None:
        self._rules: dict[str, TriggerRule] = {}

    def discover_rules(self) -> None:
        """Scan the rules package tree and register all TriggerRule subclasses."""
        import adaptive_engine.rules as rules_pkg

        self._scan_package(rules_pkg.__name__, list(rules_pkg.__path__))

    def _scan_package(self, package_name: str, package_path: list[str]) -> None:
        for _, module_name, _ in pkgutil.walk_packages(package_path, prefix=package_name + "."):
            module = importlib.import_module(module_name)
            for attr_name in dir(module):
                attr = getattr(module, attr_name)
                if (
                    isinstance(attr, type)
                    and issubclass(attr, TriggerRule)
                    and attr is not TriggerRule
                    and attr.__module__ == module.__name__
                    and not getattr(attr, "__abstractmethods__", set())
                ):
                    self.register(attr())
        logger.debug("Discovered %d trigger rules: %s", len(self._rules), self.rule_ids)

    def register(self, rule: TriggerRule) -> None:
        """Register a rule instance by its rule_id."""
        self._rules[rule.rule_id] = rule

    def get(self, rule_id: str) -> TriggerRule | None:
        return self._rules.get(rule_id)

    def get_all_rules(self) -> list[TriggerRule]:
        """Return all registered rules sorted by priority (lowest value first)."""
        return sorted(self._rules.values(), key=lambda r: (r.priority, r.rule_id))

    @property
    def rule_ids(self) -> list[str]:
        return list(self._rules.keys())
