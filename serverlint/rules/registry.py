"""
Rule registry: lookup of rule classes by identifier and category.

The registry stores rule *classes*; instances are created on demand with a
RuleConfiguration, so the same rule type can run with different settings in
different linters without shared mutable state.

Typical usage:
    from serverlint.rules.registry import default_registry

    registry = default_registry()
    rule = registry.create("library-design.public-import", RuleConfiguration(severity=Severity.WARNING))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Optional

from serverlint.config import RuleCategory, RuleConfiguration
from serverlint.diagnostics.models import Severity
from serverlint.rules.base import Rule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleInfo:
    """Static rule metadata, for listings and docs."""

    identifier: str
    name: str
    description: str
    category: RuleCategory
    default_severity: Severity
    documentation_url: Optional[str] = None


class RuleRegistry:
    """Registry for managing and instantiating lint rules."""

    def __init__(self, rules: Iterable[type[Rule]] = ()) -> None:
        self._rules: dict[str, type[Rule]] = {}
        for rule_cls in rules:
            self.register(rule_cls)

    def register(self, rule_cls: type[Rule]) -> type[Rule]:
        """Register a rule class. Usable as a class decorator."""
        identifier = rule_cls.identifier
        if not identifier:
            raise ValueError(f"{rule_cls.__name__} has an empty identifier")
        existing = self._rules.get(identifier)
        if existing is not None and existing is not rule_cls:
            raise ValueError(
                f"Duplicate rule identifier {identifier!r}: {existing.__name__} and {rule_cls.__name__}"
            )
        self._rules[identifier] = rule_cls
        logger.debug("Registered rule %s (%s)", identifier, rule_cls.__name__)
        return rule_cls

    @property
    def identifiers(self) -> list[str]:
        return sorted(self._rules)

    @property
    def rules(self) -> list[type[Rule]]:
        """Registered rule classes, ordered by identifier."""
        return [self._rules[i] for i in self.identifiers]

    def rules_for(self, category: RuleCategory) -> list[type[Rule]]:
        return [r for r in self.rules if r.category == category]

    def get(self, identifier: str) -> Optional[type[Rule]]:
        return self._rules.get(identifier)

    def create(self, identifier: str, configuration: Optional[RuleConfiguration] = None) -> Optional[Rule]:
        """Instantiate a rule with configuration, or None if identifier is unknown."""
        rule_cls = self._rules.get(identifier)
        if rule_cls is None:
            return None
        return rule_cls(configuration)

    def info(self, identifier: str) -> Optional[RuleInfo]:
        rule_cls = self._rules.get(identifier)
        if rule_cls is None:
            return None
        return RuleInfo(
            identifier=rule_cls.identifier,
            name=rule_cls.name,
            description=rule_cls.description,
            category=rule_cls.category,
            default_severity=rule_cls.default_severity,
            documentation_url=rule_cls.documentation_url,
        )

    def all_info(self) -> list[RuleInfo]:
        return [self.info(i) for i in self.identifiers]  # type: ignore[misc]

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._rules

    def __len__(self) -> int:
        return len(self._rules)


def builtin_rules() -> list[type[Rule]]:
    """All rules shipped with serverlint."""
    from serverlint.rules.public_import import PublicImportRule

    return [
        # Library design
        PublicImportRule,
    ]


@lru_cache(maxsize=None)
def default_registry() -> RuleRegistry:
    """Shared registry of built-in rules. Populated once; treat as read-only."""
    return RuleRegistry(builtin_rules())
