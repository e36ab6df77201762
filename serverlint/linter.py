# Linter: run the enabled rules from a LintConfig against one file at a time.

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence, Union

from tree_sitter import Parser

from serverlint.config import LintConfig, get_default_config
from serverlint.context import RuleContext, context_from_source, create_context
from serverlint.diagnostics.models import Diagnostic
from serverlint.rules.base import Rule
from serverlint.rules.registry import RuleRegistry, default_registry

logger = logging.getLogger(__name__)


class Linter:
    """
    Per-file lint driver.

    Rules are instantiated once from the configuration (and optional
    profile) and reused for every file. lint_* calls share no mutable state,
    so one Linter may lint different files from several threads as long as
    each thread parses with its own Parser.
    """

    def __init__(
        self,
        config: Optional[LintConfig] = None,
        registry: Optional[RuleRegistry] = None,
        profile: Optional[str] = None,
        only: Optional[Sequence[str]] = None,
    ) -> None:
        self.config = config if config is not None else get_default_config()
        self.registry = registry if registry is not None else default_registry()
        self.profile = profile
        self.rules: list[Rule] = self._build_rules(only)

    def _build_rules(self, only: Optional[Sequence[str]]) -> list[Rule]:
        for identifier in self.config.rules:
            if identifier not in self.registry:
                logger.warning("Configuration refers to unknown rule %s", identifier)

        identifiers = self.registry.identifiers
        if only is not None:
            for identifier in only:
                if identifier not in self.registry:
                    logger.warning("Unknown rule %s requested", identifier)
            wanted = set(only)
            identifiers = [i for i in identifiers if i in wanted]

        rules: list[Rule] = []
        for identifier in identifiers:
            configuration = self.config.configuration_for(identifier, self.profile)
            if not configuration.enabled:
                logger.debug("Rule %s disabled by configuration", identifier)
                continue
            rule = self.registry.create(identifier, configuration)
            if rule is not None:
                rules.append(rule)
        logger.debug("Enabled rules: %s", ", ".join(r.identifier for r in rules) or "(none)")
        return rules

    def lint_context(self, context: RuleContext) -> list[Diagnostic]:
        """
        Run every enabled rule on one file.

        Each rule sees the file through its own context view carrying its
        configuration. A rule that raises is logged and skipped; the other
        rules still run. Results keep rule order, then traversal order.
        """
        diagnostics: list[Diagnostic] = []
        for rule in self.rules:
            rule_context = context.with_configuration(rule.configuration)
            try:
                rule_diagnostics = rule.lint(rule_context)
            except Exception:
                logger.exception("Rule %s failed on %s", rule.identifier, context.file_path)
                continue
            diagnostics.extend(rule_diagnostics)
        logger.info("Linted %s: %d diagnostic(s)", context.file_path, len(diagnostics))
        return diagnostics

    def lint_source(
        self,
        source: Union[bytes, str],
        file_path: Union[str, Path] = "<memory>",
        parser: Optional[Parser] = None,
    ) -> list[Diagnostic]:
        return self.lint_context(context_from_source(source, file_path=file_path, parser=parser))

    def lint_file(self, path: Path, parser: Optional[Parser] = None) -> list[Diagnostic]:
        """Lint one file; an unreadable file yields no diagnostics (error is logged)."""
        context = create_context(path, parser=parser)
        if context is None:
            return []
        return self.lint_context(context)
