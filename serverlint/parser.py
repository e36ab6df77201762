# Tree-sitter setup and AST parsing: parse Swift source code into AST trees.

import logging
from typing import Optional

import tree_sitter
from tree_sitter import Language
from tree_sitter_language_pack import get_language

logger = logging.getLogger(__name__)

# Swift grammar bundled with tree-sitter-language-pack
_SWIFT_LANGUAGE: Language = get_language("swift")


def get_swift_language() -> Language:
    """Return the Tree-sitter Language object for Swift."""
    return _SWIFT_LANGUAGE


def create_parser() -> tree_sitter.Parser:
    """Create and return a Tree-sitter Parser configured for Swift."""
    parser = tree_sitter.Parser(_SWIFT_LANGUAGE)
    return parser


def parse_bytes(
    source: bytes,
    parser: Optional[tree_sitter.Parser] = None,
) -> tree_sitter.Tree:
    """
    Parse Swift source bytes into an AST.

    Args:
        source: UTF-8 encoded Swift source code.
        parser: Optional parser instance; if None, a new one is created.
                Parsers are not thread-safe; share one only within a thread.

    Returns:
        The parse tree. Check tree.root_node.has_error for ERROR nodes.
    """
    if parser is None:
        parser = create_parser()
    tree = parser.parse(source)
    if tree.root_node.has_error:
        logger.warning(
            "Parse completed with errors: root=%s",
            tree.root_node.type,
        )
    else:
        logger.debug(
            "Parse succeeded: root=%s",
            tree.root_node.type,
        )
    return tree
