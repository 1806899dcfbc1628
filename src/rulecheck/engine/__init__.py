from rulecheck.engine.engine import (
    RuleEngine,
    default_engine,
    get_violation_stats,
    register_rule_validator,
    validate_items,
)
from rulecheck.engine.registry import RuleEvaluator, RuleRegistry

__all__ = [
    "RuleEngine",
    "RuleEvaluator",
    "RuleRegistry",
    "default_engine",
    "get_violation_stats",
    "register_rule_validator",
    "validate_items",
]
