# Rule interface (abstract base classes): the contract every lint rule implements.
# Concrete rules subclass Rule and implement lint(), or subclass VisitorRule and
# supply a RuleVisitor; the shared walk() then drives the traversal.

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar, Optional, Sequence

from serverlint.config import RuleCategory, RuleConfiguration
from serverlint.context import RuleContext
from serverlint.diagnostics.models import Diagnostic, Severity
from serverlint.rules.visitor import RuleVisitor, walk


class Rule(ABC):
    """
    Abstract base class for all lint rules.

    Subclasses must define as class attributes:
    - identifier: str, "<category>.<rule-name>", e.g. "library-design.public-import"
    - name: str, human-readable rule name
    - description: str, what the rule checks and why
    - category: RuleCategory
    - default_severity: Severity

    and optionally documentation_url, triggering_examples and
    non_triggering_examples. The examples are the rule's self-test fixtures:
    every triggering example must produce at least one diagnostic, every
    non-triggering example none.

    A rule instance only holds its configuration, so one instance can lint
    any number of files, concurrently.
    """

    identifier: ClassVar[str]
    name: ClassVar[str]
    description: ClassVar[str]
    category: ClassVar[RuleCategory]
    default_severity: ClassVar[Severity]
    documentation_url: ClassVar[Optional[str]] = None
    triggering_examples: ClassVar[Sequence[str]] = ()
    non_triggering_examples: ClassVar[Sequence[str]] = ()

    def __init__(self, configuration: Optional[RuleConfiguration] = None) -> None:
        if configuration is None:
            configuration = self.default_configuration()
        self._configuration = configuration

    @classmethod
    def default_configuration(cls) -> RuleConfiguration:
        return RuleConfiguration(enabled=True, severity=cls.default_severity)

    @property
    def configuration(self) -> RuleConfiguration:
        return self._configuration

    @property
    def severity(self) -> Severity:
        """Severity for every diagnostic of this instance: override, else default."""
        return resolve_severity(self.default_severity, self._configuration.severity)

    @abstractmethod
    def lint(self, context: RuleContext) -> list[Diagnostic]:
        """
        Analyze one file and return its diagnostics.

        Args:
            context: Per-file state (tree, file path, configuration, converter).
                     Read-only; do not keep a reference to it.

        Returns:
            Diagnostics in the order they were found. An empty list if none.
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(severity={self.severity.value!r})"


class VisitorRule(Rule):
    """
    A rule expressed as a single tree traversal.

    Set visitor_class (or override make_visitor); lint() creates a fresh
    visitor, walks the tree once and returns what the visitor recorded.
    """

    visitor_class: ClassVar[type[RuleVisitor]]

    def make_visitor(self, context: RuleContext) -> RuleVisitor:
        """Return a new visitor bound to context. Never reuse one across walks."""
        return self.visitor_class(context, self.identifier, self.severity)

    def lint(self, context: RuleContext) -> list[Diagnostic]:
        visitor = self.make_visitor(context)
        walk(context.root_node, visitor)
        return visitor.diagnostics


def resolve_severity(default: Severity, override: Optional[Severity]) -> Severity:
    return override if override is not None else default
