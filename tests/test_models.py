from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from rulecheck.schemas.models import (
    Config,
    RuleViolation,
    ValidatableItem,
    ValidationResult,
    ValidationRule,
    severity_weight,
)

UTC = timezone.utc


def test_item_minimal_and_display_title():
    item = ValidatableItem(id="E1")
    assert item.title is None
    assert item.start_date is None
    assert item.display_title == "E1"

    titled = ValidatableItem(id="E2", title="Standup")
    assert titled.display_title == "Standup"


def test_item_accepts_camel_case_and_extra_fields():
    item = ValidatableItem.model_validate(
        {
            "id": "E1",
            "startDate": "2025-01-06T09:00:00+00:00",
            "durationMinutes": 30,
            "owner": "ana",
        }
    )
    assert item.start_date == datetime(2025, 1, 6, 9, 0, tzinfo=UTC)
    assert item.duration_minutes == pytest.approx(30)
    assert item.model_extra == {"owner": "ana"}


def test_item_is_frozen():
    item = ValidatableItem(id="E1")
    with pytest.raises(ValidationError):
        item.title = "changed"  # type: ignore[misc]


def test_rule_defaults_and_aliases():
    rule = ValidationRule.model_validate(
        {
            "id": "r1",
            "name": "Rule",
            "condition": {"type": "time_conflict"},
            "isEnabled": False,
            "suggestionMessage": "fix it",
        }
    )
    assert rule.is_enabled is False
    assert rule.severity == "warning"
    assert rule.category == "custom"
    assert rule.suggestion_message == "fix it"
    assert rule.condition.parameters == {}


def test_rule_rejects_unknown_fields_and_bad_severity():
    with pytest.raises(ValidationError):
        ValidationRule.model_validate(
            {"id": "r", "name": "n", "condition": {"type": "x"}, "sevrity": "error"}
        )
    with pytest.raises(ValidationError):
        ValidationRule.model_validate(
            {"id": "r", "name": "n", "condition": {"type": "x"}, "severity": "fatal"}
        )


def test_violation_requires_parallel_titles():
    with pytest.raises(ValidationError):
        RuleViolation(
            rule_id="r",
            rule_name="n",
            severity="error",
            message="m",
            affected_items=["a", "b"],
            item_titles=["A"],
            timestamp=datetime.now(UTC),
        )


def test_result_serializes_with_camel_case_keys():
    result = ValidationResult(
        is_valid=True, validated_at=datetime.now(UTC), item_count=0, rule_count=0
    )
    data = result.model_dump(by_alias=True)
    assert {"isValid", "violations", "suggestions", "validatedAt", "itemCount"} <= set(data)


def test_severity_weight_order():
    assert severity_weight("error") > severity_weight("warning") > severity_weight("info")
    assert severity_weight("unknown") == 0


def test_config_defaults():
    cfg = Config()
    assert cfg.timezone == "UTC"
    assert cfg.isolate_evaluator_errors is True
    assert cfg.rules == []
    assert cfg.report.fail_on_warnings is False

    schema = Config.model_json_schema()
    assert "properties" in schema
