# src/rulecheck/engine/engine.py
from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime, timezone

from rulecheck.engine.registry import RuleEvaluator, RuleRegistry
from rulecheck.errors import EvaluatorError
from rulecheck.metrics.stats import get_violation_stats
from rulecheck.schemas.models import (
    RuleViolation,
    ValidatableItem,
    ValidationResult,
    ValidationRule,
    ViolationStats,
    severity_weight,
)

logger = logging.getLogger(__name__)


# ---------------------------
# ENGINE CLASS (instance core)
# ----------------------------
class RuleEngine:
    """
    @brief
    Rule-based validator for collections of time-scoped items.

    @details
    Filters enabled rules, dispatches each one to the evaluator registered
    for its condition type, and assembles a ValidationResult. The engine is
    stateless per call: it never mutates the items or rules it is given.

    Rules are configuration data, so rule content never aborts a call:
    unknown condition types are skipped with a warning, and (with
    `isolate_errors=True`) an evaluator that raises is logged and skipped.
    """

    def __init__(
        self, registry: RuleRegistry | None = None, *, isolate_errors: bool = True
    ) -> None:
        """
        @brief
        Initialize engine with an evaluator registry.

        @params
            registry : RuleRegistry | None
                Evaluator registry; a fresh one with the built-ins when omitted.
            isolate_errors : bool
                If False, evaluator exceptions propagate as EvaluatorError.
        """
        self.registry = registry if registry is not None else RuleRegistry()
        self.isolate_errors = isolate_errors

    # ---------- Public API ----------
    def validate_items(
        self, items: Sequence[ValidatableItem], rules: Sequence[ValidationRule]
    ) -> ValidationResult:
        """
        @brief
        Validate a collection of items against all enabled rules.

        @details
        Violations are concatenated in rule order, then stably sorted by
        descending severity weight (error > warning > info). Suggestions are
        the distinct non-empty suggestion messages in order of first occurrence.

        @params
            items : Sequence[ValidatableItem]
                Items to validate (events, tasks, bookings, ...).
            rules : Sequence[ValidationRule]
                Rule set; disabled rules are ignored.

        @returns
            Freshly built ValidationResult.
        """
        # (1) Keep enabled rules only
        enabled = [rule for rule in rules if rule.is_enabled]

        # (2) Dispatch each rule and concatenate findings
        violations: list[RuleViolation] = []
        skipped: list[str] = []
        for rule in enabled:
            found = self._validate_rule(items, rule)
            if found is None:
                skipped.append(rule.id)
                continue
            violations.extend(found)

        # (3) Order by severity; sorted() is stable so ties keep evaluator order
        violations = sorted(violations, key=lambda v: -severity_weight(v.severity))

        logger.debug(
            "Validated %d item(s) against %d rule(s): %d violation(s), %d skipped",
            len(items),
            len(enabled),
            len(violations),
            len(skipped),
        )

        return ValidationResult(
            is_valid=not violations,
            violations=violations,
            suggestions=self._generate_suggestions(violations),
            validated_at=datetime.now(timezone.utc),
            item_count=len(items),
            rule_count=len(enabled),
            skipped_rules=skipped,
        )

    def validate_candidate(
        self,
        candidate: ValidatableItem,
        existing: Sequence[ValidatableItem],
        rules: Sequence[ValidationRule],
    ) -> ValidationResult:
        """Validate an existing schedule with `candidate` appended to it."""
        return self.validate_items([*existing, candidate], rules)

    def has_conflicts(
        self, items: Sequence[ValidatableItem], rules: Sequence[ValidationRule]
    ) -> bool:
        """True iff validation yields at least one error-severity violation."""
        result = self.validate_items(items, rules)
        return any(v.severity == "error" for v in result.violations)

    def register_rule_validator(self, condition_type: str, evaluator: RuleEvaluator) -> None:
        """Add or replace the evaluator handling `condition_type`."""
        self.registry.register(condition_type, evaluator)

    def get_violation_stats(self, result: ValidationResult) -> ViolationStats:
        return get_violation_stats(result)

    # ---------- Dispatch ----------
    def _validate_rule(
        self, items: Sequence[ValidatableItem], rule: ValidationRule
    ) -> list[RuleViolation] | None:
        """
        @brief
        Run the evaluator registered for the rule's condition type.

        @returns
            Violations found, or None when the rule was skipped (unknown
            condition type, or an isolated evaluator failure). Returning
            anything other than RuleViolation instances counts as a failure.

        @raises
            EvaluatorError
                Only when isolate_errors is False and the evaluator failed.
        """
        condition_type = rule.condition.type
        evaluator = self.registry.get(condition_type)

        if evaluator is None:
            logger.warning(
                "Unknown rule condition type: %s (rule=%s), skipping", condition_type, rule.id
            )
            return None

        try:
            found = list(evaluator(items, rule))
            bad = [v for v in found if not isinstance(v, RuleViolation)]
            if bad:
                raise TypeError(
                    f"evaluator returned {type(bad[0]).__name__}, expected RuleViolation"
                )
            # (1) Stamp the rule category on violations from evaluators that omit it
            return [
                v if v.category else v.model_copy(update={"category": rule.category})
                for v in found
            ]
        except Exception as e:
            if not self.isolate_errors:
                raise EvaluatorError(
                    f"Evaluator for '{condition_type}' failed on rule {rule.id}: {e}",
                    rule_id=rule.id,
                    condition_type=condition_type,
                    source="RuleEngine._validate_rule",
                    suggested_action="Fix the custom evaluator or disable the rule.",
                ) from e
            logger.exception(
                "Evaluator for condition type %s failed on rule %s, skipping",
                condition_type,
                rule.id,
            )
            return None

    @staticmethod
    def _generate_suggestions(violations: Sequence[RuleViolation]) -> list[str]:
        return list(dict.fromkeys(v.suggestion_message for v in violations if v.suggestion_message))


# ----------------------------
# THIN FACADE (module-level default engine)
# ----------------------------
_default_engine = RuleEngine()


def default_engine() -> RuleEngine:
    """Shared engine behind the module-level functions."""
    return _default_engine


def validate_items(
    items: Sequence[ValidatableItem], rules: Sequence[ValidationRule]
) -> ValidationResult:
    """Validate `items` against `rules` with the shared default engine."""
    return _default_engine.validate_items(items, rules)


def register_rule_validator(condition_type: str, evaluator: RuleEvaluator) -> None:
    """Register a custom evaluator on the shared default engine."""
    _default_engine.register_rule_validator(condition_type, evaluator)
