# Per-file rule context: parsed tree, file path, rule configuration and the
# position -> line/column converter. Also builds contexts from files/source
# and measures trivia-free node spans for diagnostics.

from __future__ import annotations

import logging
import re
from bisect import bisect_right
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Union

from tree_sitter import Node as TSNode
from tree_sitter import Parser, Tree

from serverlint.config import RuleConfiguration
from serverlint.parser import create_parser, parse_bytes

logger = logging.getLogger(__name__)

# Comment node types in the Swift grammar
TRIVIA_NODE_TYPES = frozenset({"comment", "multiline_comment"})

_WHITESPACE = b" \t\r\n\f\v"


class SourceLocationConverter:
    """
    Map absolute byte offsets in one file to 1-based (line, column).

    Columns count bytes, the same unit as tree-sitter points, so a location
    computed here agrees with node.start_point + 1.
    """

    def __init__(self, source: bytes) -> None:
        self._source = source
        self._line_starts = [0] + [m.end() for m in re.finditer(b"\n", source)]

    @property
    def source(self) -> bytes:
        return self._source

    @property
    def line_count(self) -> int:
        """Number of lines; a final newline ends the last line rather than starting another."""
        if not self._source:
            return 0
        return len(self._line_starts) - (1 if self._source.endswith(b"\n") else 0)

    def location(self, offset: int) -> tuple[int, int]:
        """Return (line, column), both 1-based, for a byte offset (clamped to the file)."""
        offset = max(0, min(offset, len(self._source)))
        index = bisect_right(self._line_starts, offset) - 1
        return index + 1, offset - self._line_starts[index] + 1

    def content_span(self, node: TSNode) -> tuple[int, int]:
        """
        Return (start, end) byte offsets of node without leading/trailing trivia.

        Comment children at either edge and surrounding whitespace are
        excluded. A node made only of trivia keeps its raw span.
        """
        start, end = node.start_byte, node.end_byte
        tokens = [c for c in node.children if not _is_trivia(c)]
        if tokens and len(tokens) != node.child_count:
            start, end = tokens[0].start_byte, tokens[-1].end_byte

        source = self._source
        while start < end and source[start] in _WHITESPACE:
            start += 1
        while end > start and source[end - 1] in _WHITESPACE:
            end -= 1
        if start == end:
            return node.start_byte, node.end_byte
        return start, end


def _is_trivia(node: TSNode) -> bool:
    return node.type in TRIVIA_NODE_TYPES


@dataclass(frozen=True)
class RuleContext:
    """
    Read-only bundle handed to each rule invocation.

    One context is built per file; with_configuration() derives the per-rule
    view, sharing the same tree and converter. Rules must not mutate the tree
    or keep a reference to the context after lint() returns.
    """

    tree: Tree
    file_path: str
    configuration: RuleConfiguration
    converter: SourceLocationConverter

    @property
    def root_node(self) -> TSNode:
        """Convenience access to the AST root."""
        return self.tree.root_node

    @property
    def source(self) -> bytes:
        return self.converter.source

    def with_configuration(self, configuration: RuleConfiguration) -> RuleContext:
        return replace(self, configuration=configuration)


def get_source_span(context: RuleContext, node: TSNode) -> str:
    """
    Return the source text of a node's trivia-free span.

    Decodes with errors="replace" so bad UTF-8 does not crash.
    """
    start, end = context.converter.content_span(node)
    return context.source[start:end].decode("utf-8", errors="replace")


def count_nodes(node: TSNode) -> int:
    """Count node and all of its descendants."""
    count = 0
    stack = [node]
    while stack:
        current = stack.pop()
        count += 1
        stack.extend(current.children)
    return count


def context_from_source(
    source: Union[bytes, str],
    file_path: Union[str, Path] = "<memory>",
    configuration: Optional[RuleConfiguration] = None,
    parser: Optional[Parser] = None,
) -> RuleContext:
    """Parse source (bytes or text) and wrap it in a RuleContext."""
    if isinstance(source, str):
        source = source.encode("utf-8")
    tree = parse_bytes(source, parser=parser)
    return RuleContext(
        tree=tree,
        file_path=str(file_path),
        configuration=configuration if configuration is not None else RuleConfiguration(),
        converter=SourceLocationConverter(source),
    )


def create_context(
    path: Path,
    configuration: Optional[RuleConfiguration] = None,
    parser: Optional[Parser] = None,
) -> Optional[RuleContext]:
    """
    Read a Swift file and parse it into a RuleContext.

    - Unreadable file (permission, missing): returns None and logs error.
    - Malformed Swift: still returns a context; the parser logs a warning.
    """
    if parser is None:
        parser = create_parser()

    try:
        source = path.read_bytes()
    except OSError as e:
        logger.error("Failed to read file %s: %s", path, e)
        return None

    context = context_from_source(source, file_path=path, configuration=configuration, parser=parser)
    logger.info(
        "Parsed %s: %d nodes, %d line(s)%s",
        path,
        count_nodes(context.root_node),
        context.converter.line_count,
        " (with parse errors)" if context.root_node.has_error else "",
    )
    return context
