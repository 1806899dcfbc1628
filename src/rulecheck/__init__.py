"""
rulecheck: rule-based validation for time-scoped items.

Public surface:
    validate_items(items, rules) -> ValidationResult
    register_rule_validator(condition_type, evaluator)
    get_violation_stats(result) -> ViolationStats
"""

from rulecheck.engine import (
    RuleEngine,
    RuleEvaluator,
    RuleRegistry,
    get_violation_stats,
    register_rule_validator,
    validate_items,
)
from rulecheck.errors import ConfigError, DataError, EvaluatorError, RulecheckError
from rulecheck.schemas.models import (
    RuleCondition,
    RuleViolation,
    ValidatableItem,
    ValidationResult,
    ValidationRule,
    ViolationStats,
)

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "DataError",
    "EvaluatorError",
    "RuleCondition",
    "RuleEngine",
    "RuleEvaluator",
    "RuleRegistry",
    "RuleViolation",
    "RulecheckError",
    "ValidatableItem",
    "ValidationResult",
    "ValidationRule",
    "ViolationStats",
    "get_violation_stats",
    "register_rule_validator",
    "validate_items",
]
