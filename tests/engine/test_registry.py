# tests/engine/test_registry.py
from rulecheck.engine.evaluators import BUILTIN_EVALUATORS, validate_time_conflicts
from rulecheck.engine.registry import RuleRegistry


def _noop(items, rule):
    return []


def test_registry_starts_with_builtins():
    registry = RuleRegistry()
    assert registry.available() == sorted(BUILTIN_EVALUATORS)
    assert registry.get("time_conflict") is validate_time_conflicts
    assert "time_conflict" in registry
    assert registry.get("nope") is None


def test_register_replaces_and_unregister_removes():
    registry = RuleRegistry()

    registry.register("time_conflict", _noop)
    registry.register("custom", _noop)

    assert registry.get("time_conflict") is _noop
    assert "custom" in registry

    registry.unregister("custom")
    registry.unregister("never-registered")
    assert "custom" not in registry


def test_register_as_decorator():
    registry = RuleRegistry(evaluators={})

    @registry.register("focus_time")
    def focus(items, rule):
        return []

    assert registry.available() == ["focus_time"]
    assert registry.get("focus_time") is focus


def test_reset_restores_builtins_only():
    registry = RuleRegistry(evaluators={})
    registry.register("custom", _noop)

    registry.reset()

    assert registry.available() == sorted(BUILTIN_EVALUATORS)


def test_registries_are_independent():
    a, b = RuleRegistry(), RuleRegistry()
    a.register("custom", _noop)
    assert "custom" not in b
