from __future__ import annotations

import pytest

from sheetrules.models import ExcelSettings, RuleConfig, RulesConfig, SessionSettings, SheetRulesConfig


def test_rule_config_defaults_with_field():
    rule = RuleConfig(key="Required", type="required", field="amount")

    assert rule.field == "amount"
    assert rule.depends_on == []
    assert rule.params == {}
    assert rule.message is None


def test_rule_config_defaults_are_not_shared():
    first = RuleConfig(key="A", type="required")
    second = RuleConfig(key="B", type="required")

    first.depends_on.append("B")

    assert second.depends_on == []


def test_rules_config_defaults():
    cfg = RulesConfig(sheets=[SheetRulesConfig(index=0)])

    assert cfg.settings == SessionSettings()
    assert cfg.excel == ExcelSettings()
    assert cfg.sheets[0].rules == []
    assert cfg.workbook_rules == []


@pytest.mark.parametrize(
    "kwargs",
    [
        {"workers": 0},
        {"sheet_failure": "ignore"},
        {"validator_errors": "swallow"},
        {"timeout_seconds": 0},
    ],
)
def test_session_settings_rejects_invalid_values(kwargs):
    with pytest.raises(ValueError):
        SessionSettings(**kwargs)
