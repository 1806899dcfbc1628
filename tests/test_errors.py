from rulecheck.errors import ConfigError, DataError, EvaluatorError, RulecheckError


def test_error_str_includes_source_and_action():
    err = ConfigError("bad rule", source="ConfigLoader.load", suggested_action="fix it")

    assert isinstance(err, RulecheckError)
    assert str(err) == "[ConfigError] bad rule (source=ConfigLoader.load) | action: fix it"
    assert err.message == "bad rule"


def test_error_defaults_and_to_dict():
    err = DataError("missing file")

    data = err.to_dict()

    assert str(err) == "[DataError] missing file (source=unknown)"
    assert data["error_type"] == "DataError"
    assert data["source"] == "unknown"
    assert data["suggested_action"] is None
    assert data["timestamp"].endswith("+00:00")


def test_evaluator_error_carries_rule_context():
    err = EvaluatorError("boom", rule_id="r1", condition_type="custom_check")

    assert err.rule_id == "r1"
    assert err.to_dict()["condition_type"] == "custom_check"
