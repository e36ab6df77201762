# Public import detection: imports that re-export a dependency to library consumers

from __future__ import annotations

from typing import Optional

from tree_sitter import Node as TSNode

from serverlint.config import RuleCategory
from serverlint.context import TRIVIA_NODE_TYPES
from serverlint.diagnostics.models import Fix, Severity, SourceRange
from serverlint.rules.base import VisitorRule
from serverlint.rules.visitor import RuleVisitor, VisitAction

REEXPORT_ATTRIBUTE = "_exported"

# Access levels that make an import part of the module's public interface
LEAKING_ACCESS_LEVELS = frozenset({"public", "open"})

# `import struct Foundation.URL` style kinds; not part of the module path
IMPORT_KINDS = frozenset({"typealias", "struct", "class", "enum", "protocol", "let", "var", "func"})


def _node_text(node: TSNode) -> str:
    return (node.text or b"").decode("utf-8", errors="replace").strip()


def _descendants(node: TSNode):
    """Yield every descendant of node (not node itself) in document order."""
    for child in node.children:
        yield child
        yield from _descendants(child)


def _attribute_name(attribute: TSNode) -> str:
    """'@_exported' -> '_exported'; '@available(macOS 13, *)' -> 'available'."""
    text = _node_text(attribute).lstrip("@")
    return text.split("(", 1)[0].strip()


def _module_path(import_node: TSNode) -> Optional[str]:
    """Dotted module path of an import_declaration, e.g. 'Foundation.URL'."""
    for child in reversed(import_node.children):
        if child.type == "identifier":
            return _node_text(child)

    # No identifier node: take the tokens after the `import` keyword
    children = import_node.children
    keyword = next((i for i, c in enumerate(children) if c.type == "import"), None)
    if keyword is None:
        return None
    parts = [
        _node_text(c)
        for c in children[keyword + 1 :]
        if c.type not in IMPORT_KINDS and c.type not in TRIVIA_NODE_TYPES
    ]
    return "".join(parts) or None


def find_reexport_attribute(import_node: TSNode) -> Optional[TSNode]:
    """Return the `@_exported` attribute node of an import, if any."""
    for node in _descendants(import_node):
        if node.type == "attribute" and _attribute_name(node) == REEXPORT_ATTRIBUTE:
            return node
    return None


def find_leaking_modifier(import_node: TSNode) -> Optional[TSNode]:
    """Return the `public` or `open` visibility modifier node of an import, if any."""
    for node in _descendants(import_node):
        if node.type != "visibility_modifier":
            continue
        level = _node_text(node).split("(", 1)[0].strip()
        if level in LEAKING_ACCESS_LEVELS:
            return node
    return None


class PublicImportVisitor(RuleVisitor):
    """Reports at most one diagnostic per import declaration."""

    def _rewrite(self, node: TSNode, start: int, end: int, replacement: str) -> str:
        """Text of node's content span with source[start:end] replaced."""
        source = self.context.source
        node_start, node_end = self.context.converter.content_span(node)
        text = source[node_start:start] + replacement.encode("utf-8") + source[end:node_end]
        return text.decode("utf-8", errors="replace")

    def _fix(self, node: TSNode, description: str, replacement: str) -> Fix:
        return Fix(
            description=description,
            replacement=replacement,
            range=SourceRange.from_node(node, self.context.converter),
        )

    def visit_import_declaration(self, node: TSNode) -> VisitAction:
        module = _module_path(node)
        if module is None:
            return VisitAction.VISIT_CHILDREN

        # The re-export attribute takes precedence over the access modifier
        attribute = find_reexport_attribute(node)
        if attribute is not None:
            # Drop the attribute and the whitespace that separates it from the next token
            end = attribute.end_byte
            source = self.context.source
            while end < len(source) and source[end] in b" \t\r\n":
                end += 1
            self.record(
                node,
                f"@_exported import '{module}' leaks dependency to consumers. Remove @_exported.",
                fix=self._fix(
                    node,
                    "Remove @_exported attribute",
                    self._rewrite(node, attribute.start_byte, end, ""),
                ),
            )
            return VisitAction.SKIP_CHILDREN

        modifier = find_leaking_modifier(node)
        if modifier is not None:
            self.record(
                node,
                f"public import '{module}' leaks dependency to consumers. Use internal or package import.",
                fix=self._fix(
                    node,
                    "Change to internal import",
                    self._rewrite(node, modifier.start_byte, modifier.end_byte, "internal"),
                ),
            )
            return VisitAction.SKIP_CHILDREN

        return VisitAction.VISIT_CHILDREN


class PublicImportRule(VisitorRule):
    """Detects `public import` / `@_exported import` statements that leak dependencies."""

    identifier = "library-design.public-import"
    name = "Public Import Prevention"
    description = (
        "Public imports (using `public import` or `@_exported import`) expose internal "
        "dependencies to consumers of your library. This creates tight coupling and "
        "can cause issues with versioning and API stability. Use internal or package "
        "access level for imports, and re-export only intentionally chosen types."
    )
    category = RuleCategory.LIBRARY_DESIGN
    default_severity = Severity.ERROR

    triggering_examples = (
        "public import Foundation",
        "@_exported import NIO",
        "public import struct Foundation.URL",
    )
    non_triggering_examples = (
        "import Foundation",
        "internal import NIO",
        "package import MyInternalModule",
    )

    visitor_class = PublicImportVisitor
