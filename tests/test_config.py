"""Tests for serverlint.config: rule configuration and profile resolution."""

import logging

import pytest
from pydantic import ValidationError

from serverlint.config import LintConfig, Profile, RuleCategory, RuleConfiguration, get_default_config
from serverlint.diagnostics.models import Severity

RULE = "library-design.public-import"


def test_rule_configuration_defaults():
    config = RuleConfiguration()
    assert config.enabled is True
    assert config.severity is None
    assert config.options == {}


def test_rule_configuration_rejects_unknown_severity():
    with pytest.raises(ValidationError):
        RuleConfiguration(severity="fatal")


def test_unconfigured_rule_gets_defaults():
    assert get_default_config().configuration_for(RULE) == RuleConfiguration()


def test_base_entry_applies():
    config = LintConfig(rules={RULE: RuleConfiguration(severity=Severity.WARNING)})
    assert config.configuration_for(RULE).severity is Severity.WARNING
    assert config.configuration_for("general.other") == RuleConfiguration()


def test_from_dict():
    config = LintConfig.model_validate(
        {
            "rules": {RULE: {"severity": "info", "options": {"allow": ["Foundation"]}}},
            "profiles": {"ci": {"rules": {RULE: {"severity": "error"}}}},
        }
    )
    assert config.configuration_for(RULE).severity is Severity.INFO
    assert config.configuration_for(RULE, profile="ci").severity is Severity.ERROR


def test_profile_overrides_severity_and_merges_options():
    config = LintConfig(
        rules={RULE: RuleConfiguration(severity=Severity.INFO, options={"a": 1, "b": 2})},
        profiles={"ci": Profile(rules={RULE: RuleConfiguration(severity=Severity.ERROR, options={"b": 3})})},
    )
    resolved = config.configuration_for(RULE, profile="ci")
    assert resolved.severity is Severity.ERROR
    assert resolved.options == {"a": 1, "b": 3}
    assert resolved.enabled is True


def test_profile_without_severity_keeps_base_severity():
    config = LintConfig(
        rules={RULE: RuleConfiguration(severity=Severity.WARNING)},
        profiles={"ci": Profile(rules={RULE: RuleConfiguration(options={"x": True})})},
    )
    assert config.configuration_for(RULE, profile="ci").severity is Severity.WARNING


def test_profile_can_disable_but_not_enable():
    disabling = LintConfig(profiles={"quiet": Profile(rules={RULE: RuleConfiguration(enabled=False)})})
    assert disabling.is_enabled(RULE)
    assert not disabling.is_enabled(RULE, profile="quiet")

    base_disabled = LintConfig(
        rules={RULE: RuleConfiguration(enabled=False)},
        profiles={"loud": Profile(rules={RULE: RuleConfiguration(enabled=True)})},
    )
    assert not base_disabled.is_enabled(RULE, profile="loud")


def test_unknown_profile_logs_and_falls_back(caplog):
    config = LintConfig(rules={RULE: RuleConfiguration(severity=Severity.INFO)})
    with caplog.at_level(logging.WARNING):
        resolved = config.configuration_for(RULE, profile="missing")
    assert resolved.severity is Severity.INFO
    assert "Unknown profile" in caplog.text


def test_category_values():
    assert RuleCategory("library-design") is RuleCategory.LIBRARY_DESIGN
    assert str(RuleCategory.NIO) == "nio"
