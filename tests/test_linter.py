"""Tests for serverlint.linter and the per-file isolation guarantees of the rule engine."""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from serverlint.config import LintConfig, Profile, RuleCategory, RuleConfiguration
from serverlint.context import context_from_source
from serverlint.diagnostics.models import Severity
from serverlint.linter import Linter
from serverlint.parser import create_parser
from serverlint.rules.base import Rule
from serverlint.rules.public_import import PublicImportRule
from serverlint.rules.registry import RuleRegistry

RULE = "library-design.public-import"

FILE_A = "import Logging\npublic import Foundation\n@_exported import NIO\n"
FILE_B = "\n\n    open import Vapor\ninternal import NIOCore\n"


class ExplodingRule(Rule):
    identifier = "general.exploding"
    name = "Exploding"
    description = "Always raises."
    category = RuleCategory.GENERAL
    default_severity = Severity.WARNING

    def lint(self, context):
        raise RuntimeError("boom")


class TestLinter:
    def test_default_linter_runs_builtin_rules(self):
        linter = Linter()
        assert [r.identifier for r in linter.rules] == [RULE]
        diagnostics = linter.lint_source(FILE_A, file_path="A.swift")
        assert [d.location.line for d in diagnostics] == [2, 3]
        assert {d.file_path for d in diagnostics} == {"A.swift"}

    def test_clean_file_gives_empty_list(self):
        assert Linter().lint_source("import Foundation\n") == []

    def test_disabled_rule_is_not_run(self):
        config = LintConfig(rules={RULE: RuleConfiguration(enabled=False)})
        linter = Linter(config)
        assert linter.rules == []
        assert linter.lint_source(FILE_A) == []

    def test_configured_severity(self):
        config = LintConfig(rules={RULE: RuleConfiguration(severity=Severity.WARNING)})
        diagnostics = Linter(config).lint_source(FILE_A)
        assert {d.severity for d in diagnostics} == {Severity.WARNING}

    def test_profile(self):
        config = LintConfig(profiles={"lenient": Profile(rules={RULE: RuleConfiguration(severity=Severity.INFO)})})
        assert {d.severity for d in Linter(config).lint_source(FILE_A)} == {Severity.ERROR}
        assert {d.severity for d in Linter(config, profile="lenient").lint_source(FILE_A)} == {Severity.INFO}

    def test_only_filter(self, caplog):
        registry = RuleRegistry([PublicImportRule, ExplodingRule])
        with caplog.at_level(logging.WARNING):
            linter = Linter(registry=registry, only=[RULE, "general.missing"])
        assert [r.identifier for r in linter.rules] == [RULE]
        assert "general.missing" in caplog.text

    def test_unknown_rule_in_config_is_logged(self, caplog):
        config = LintConfig(rules={"general.missing": RuleConfiguration()})
        with caplog.at_level(logging.WARNING):
            Linter(config)
        assert "unknown rule general.missing" in caplog.text

    def test_failing_rule_does_not_stop_others(self, caplog):
        registry = RuleRegistry([PublicImportRule, ExplodingRule])
        linter = Linter(registry=registry)
        with caplog.at_level(logging.ERROR):
            diagnostics = linter.lint_source(FILE_A, file_path="A.swift")
        assert [d.rule_identifier for d in diagnostics] == [RULE, RULE]
        assert "general.exploding failed on A.swift" in caplog.text

    def test_lint_file(self, tmp_path):
        swift_file = tmp_path / "Exports.swift"
        swift_file.write_text(FILE_A)
        diagnostics = Linter().lint_file(swift_file)
        assert len(diagnostics) == 2
        assert diagnostics[0].file_path == str(swift_file)

    def test_lint_file_unreadable(self, caplog):
        with caplog.at_level(logging.ERROR):
            assert Linter().lint_file(Path("/nonexistent/Exports.swift")) == []
        assert "Failed to read" in caplog.text


class TestIsolation:
    def test_determinism(self):
        ctx = context_from_source(FILE_A)
        rule = PublicImportRule()
        first = rule.lint(ctx)
        second = rule.lint(ctx)
        assert first == second
        assert [d.model_dump_json() for d in first] == [d.model_dump_json() for d in second]

    def test_sequential_order_does_not_matter(self):
        rule = PublicImportRule()
        parser = create_parser()
        a = context_from_source(FILE_A, file_path="A.swift", parser=parser)
        b = context_from_source(FILE_B, file_path="B.swift", parser=parser)
        a_then_b = (rule.lint(a), rule.lint(b))
        b_result = rule.lint(b)
        a_result = rule.lint(a)
        assert a_then_b == (a_result, b_result)

    def test_concurrent_matches_sequential(self):
        rule = PublicImportRule()
        parser = create_parser()
        contexts = {
            "A.swift": context_from_source(FILE_A, file_path="A.swift", parser=parser),
            "B.swift": context_from_source(FILE_B, file_path="B.swift", parser=parser),
        }
        expected = {path: rule.lint(ctx) for path, ctx in contexts.items()}
        assert [d.location.line for d in expected["B.swift"]] == [3]
        assert expected["B.swift"][0].location.column == 5

        jobs = [path for _ in range(25) for path in contexts]
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda path: (path, rule.lint(contexts[path])), jobs))

        for path, diagnostics in results:
            assert diagnostics == expected[path]
            assert all(d.file_path == path for d in diagnostics)

    def test_shared_context_across_rules(self):
        ctx = context_from_source(FILE_A)
        strict = PublicImportRule(RuleConfiguration(severity=Severity.ERROR))
        lenient = PublicImportRule(RuleConfiguration(severity=Severity.INFO))
        with ThreadPoolExecutor(max_workers=2) as pool:
            strict_result, lenient_result = pool.map(
                lambda rule: rule.lint(ctx.with_configuration(rule.configuration)), [strict, lenient]
            )
        assert {d.severity for d in strict_result} == {Severity.ERROR}
        assert {d.severity for d in lenient_result} == {Severity.INFO}
        assert [d.location for d in strict_result] == [d.location for d in lenient_result]
