# Traversal state for visitor-based rules: the VisitAction control value,
# the RuleVisitor base class that accumulates diagnostics, and walk(), the
# shared depth-first pre-order driver.

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Optional

from tree_sitter import Node as TSNode

from serverlint.context import RuleContext
from serverlint.diagnostics.models import Diagnostic, Fix, Note, Severity, SourceLocation

logger = logging.getLogger(__name__)


class VisitAction(Enum):
    """What the driver does after visiting a node."""

    VISIT_CHILDREN = "visit_children"
    SKIP_CHILDREN = "skip_children"
    HALT = "halt"


class RuleVisitor:
    """
    Per-walk visitor base class.

    Subclasses define ``visit_<node_type>(node) -> VisitAction`` methods for
    the node kinds they care about (e.g. ``visit_import_declaration``) and call
    record() to report. Unhandled node kinds visit their children.

    A visitor is created for one (rule, file) pair, walked once on one thread
    and then discarded; it is never reused.
    """

    def __init__(self, context: RuleContext, rule_identifier: str, severity: Severity) -> None:
        self.context = context
        self.rule_identifier = rule_identifier
        self.severity = severity
        self._diagnostics: list[Diagnostic] = []

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """Diagnostics recorded so far, in record() order."""
        return list(self._diagnostics)

    def visit(self, node: TSNode) -> VisitAction:
        if not node.is_named:
            return VisitAction.VISIT_CHILDREN
        handler = getattr(self, f"visit_{node.type}", None)
        if handler is None:
            return VisitAction.VISIT_CHILDREN
        return handler(node)

    def record(
        self,
        node: TSNode,
        message: str,
        fix: Optional[Fix] = None,
        notes: Iterable[Note] = (),
    ) -> Diagnostic:
        """Record a diagnostic spanning node's token content."""
        diagnostic = Diagnostic(
            rule_identifier=self.rule_identifier,
            severity=self.severity,
            message=message,
            file_path=self.context.file_path,
            location=SourceLocation.from_node(node, self.context.converter),
            fix=fix,
            notes=tuple(notes),
        )
        self._diagnostics.append(diagnostic)
        return diagnostic


def walk(root: TSNode, visitor: RuleVisitor) -> bool:
    """
    Walk the tree under root once, depth-first pre-order.

    Each node is passed to visitor.visit(); its return value decides whether
    the node's children are visited, skipped, or the whole walk stops.

    Returns:
        True if the walk covered the tree, False if the visitor halted it.
    """
    stack = [root]
    visited = 0
    while stack:
        node = stack.pop()
        visited += 1
        action = visitor.visit(node)
        if action is VisitAction.HALT:
            logger.debug("%s halted walk after %d node(s)", visitor.rule_identifier, visited)
            return False
        if action is VisitAction.VISIT_CHILDREN:
            stack.extend(reversed(node.children))
    logger.debug("%s visited %d node(s)", visitor.rule_identifier, visited)
    return True
