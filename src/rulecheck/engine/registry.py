"""Evaluator registry: map rule condition types to evaluator callables."""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from typing import Protocol

from rulecheck.engine.evaluators import BUILTIN_EVALUATORS
from rulecheck.schemas.models import RuleViolation, ValidatableItem, ValidationRule


class RuleEvaluator(Protocol):
    """Interface every evaluator implements: one strategy for one condition type."""

    def __call__(
        self, items: Sequence[ValidatableItem], rule: ValidationRule
    ) -> Sequence[RuleViolation]: ...


class RuleRegistry:
    """
    Registry of condition-type evaluators.

    Pre-populated with the built-in evaluators. Registration is meant to
    happen at configuration time; the lock keeps concurrent lookups safe
    while a registration is in progress.
    """

    def __init__(self, evaluators: dict[str, RuleEvaluator] | None = None) -> None:
        self._lock = threading.RLock()
        self._evaluators: dict[str, RuleEvaluator] = dict(
            BUILTIN_EVALUATORS if evaluators is None else evaluators
        )

    def register(
        self, condition_type: str, evaluator: RuleEvaluator | None = None
    ) -> RuleEvaluator | Callable[[RuleEvaluator], RuleEvaluator]:
        """Add or replace the evaluator for `condition_type`. Can be used as a decorator."""
        if evaluator is None:

            def decorator(fn: RuleEvaluator) -> RuleEvaluator:
                self.register(condition_type, fn)
                return fn

            return decorator

        with self._lock:
            self._evaluators[condition_type] = evaluator
        return evaluator

    def unregister(self, condition_type: str) -> None:
        with self._lock:
            self._evaluators.pop(condition_type, None)

    def get(self, condition_type: str) -> RuleEvaluator | None:
        """Evaluator for `condition_type`, or None when it is not registered."""
        with self._lock:
            return self._evaluators.get(condition_type)

    def available(self) -> list[str]:
        """List registered condition types."""
        with self._lock:
            return sorted(self._evaluators.keys())

    def reset(self) -> None:
        """Restore the built-in evaluators only (for testing)."""
        with self._lock:
            self._evaluators = dict(BUILTIN_EVALUATORS)

    def __contains__(self, condition_type: object) -> bool:
        with self._lock:
            return condition_type in self._evaluators
