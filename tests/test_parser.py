"""Tests for the tree-sitter Swift parser wrapper."""

import logging

from serverlint.parser import (
    create_parser,
    get_swift_language,
    parse_bytes,
)


def test_get_swift_language_returns_language():
    """get_swift_language() returns a tree-sitter Language object."""
    lang = get_swift_language()
    assert lang is not None


def test_create_parser_returns_parser():
    """create_parser() returns a configured Parser."""
    parser = create_parser()
    assert parser is not None
    assert parser.language is not None


def test_parse_bytes_success(caplog):
    """Parsing valid Swift succeeds and logs."""
    source = b"import Foundation\n\nlet answer = 42\n"
    with caplog.at_level(logging.DEBUG):
        tree = parse_bytes(source, parser=create_parser())
    assert not tree.root_node.has_error
    assert tree.root_node.type == "source_file"
    assert "Parse succeeded" in caplog.text


def test_parse_bytes_imports_are_top_level_declarations():
    tree = parse_bytes(b"import Foundation\npublic import NIO\n")
    kinds = [c.type for c in tree.root_node.children if c.is_named]
    assert kinds.count("import_declaration") == 2


def test_parse_bytes_invalid_swift_logs_failure(caplog):
    """Parsing broken Swift logs a warning when the tree has errors."""
    with caplog.at_level(logging.WARNING):
        tree = parse_bytes(b"func broken( {\n")
    assert tree.root_node is not None
    if tree.root_node.has_error:
        assert "errors" in caplog.text
