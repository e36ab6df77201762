"""
Lint configuration: rule categories, per-rule settings and named profiles.

Configuration is plain data. Callers build a LintConfig in code or from a
dict (``LintConfig.model_validate({...})``); nothing here reads files or
global state. Severity resolution itself lives on the rule (default severity
plus optional override), so this module only answers "which settings apply to
rule X under profile Y".
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from serverlint.diagnostics.models import Severity

logger = logging.getLogger(__name__)


class RuleCategory(str, Enum):
    """Closed classification tag for rules; also the identifier namespace."""

    CONCURRENCY = "concurrency"
    NIO = "nio"
    POSTGRES = "postgres"
    HUMMINGBIRD = "hummingbird"
    LIBRARY_DESIGN = "library-design"
    GENERAL = "general"

    def __str__(self) -> str:
        return self.value


class RuleConfiguration(BaseModel):
    """Per-rule settings: enable flag, optional severity override, free-form options."""

    enabled: bool = True
    severity: Optional[Severity] = None
    options: Dict[str, Any] = Field(default_factory=dict)

    model_config = {"frozen": True}


class Profile(BaseModel):
    """Named overlay of rule settings (e.g. a stricter "ci" profile)."""

    rules: Dict[str, RuleConfiguration] = Field(default_factory=dict)

    model_config = {"frozen": True}


class LintConfig(BaseModel):
    """
    Top-level configuration.

    rules and profile rules are keyed by full rule identifier
    (e.g. "library-design.public-import"). Rules without an entry run with
    their default configuration.
    """

    rules: Dict[str, RuleConfiguration] = Field(default_factory=dict)
    profiles: Dict[str, Profile] = Field(default_factory=dict)

    model_config = {"frozen": True}

    def configuration_for(self, identifier: str, profile: Optional[str] = None) -> RuleConfiguration:
        """
        Return the effective RuleConfiguration for a rule.

        The base entry (or defaults) is overlaid with the profile entry: a
        profile can disable a rule, replace its severity and add options, but
        never re-enable a rule the base config disabled.
        """
        config = self.rules.get(identifier, RuleConfiguration())
        if profile is None:
            return config

        overlay_profile = self.profiles.get(profile)
        if overlay_profile is None:
            logger.warning("Unknown profile %r; using base configuration", profile)
            return config

        overlay = overlay_profile.rules.get(identifier)
        if overlay is None:
            return config

        return RuleConfiguration(
            enabled=config.enabled and overlay.enabled,
            severity=overlay.severity if overlay.severity is not None else config.severity,
            options={**config.options, **overlay.options},
        )

    def is_enabled(self, identifier: str, profile: Optional[str] = None) -> bool:
        return self.configuration_for(identifier, profile).enabled


def get_default_config() -> LintConfig:
    """Empty configuration: every registered rule runs with its defaults."""
    return LintConfig()
