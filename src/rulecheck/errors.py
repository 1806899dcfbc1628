# src/rulecheck/errors.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any


class RulecheckError(Exception):
    """Base class for all structured rulecheck exceptions."""

    def __init__(
        self, message: str, source: str | None = None, suggested_action: str | None = None
    ):
        super().__init__(message)
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.error_type = self.__class__.__name__
        self.source = source or "unknown"
        self.suggested_action = suggested_action

    @property
    def message(self) -> str:
        return str(self.args[0])

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready form, used for machine-readable run summaries."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "source": self.source,
            "suggested_action": self.suggested_action,
            "timestamp": self.timestamp,
        }

    def __str__(self) -> str:
        base = f"[{self.error_type}] {self.message}"
        if self.source:
            base += f" (source={self.source})"
        if self.suggested_action:
            base += f" | action: {self.suggested_action}"
        return base


class ConfigError(RulecheckError):
    """Invalid or missing configuration (config.yaml, rule definitions)"""


class DataError(RulecheckError):
    """Malformed input data or failed artifact write"""


class EvaluatorError(RulecheckError):
    """
    A registered evaluator raised while isolation was disabled.

    Carries the failing rule id and condition type; the underlying
    exception is chained as __cause__.
    """

    def __init__(
        self,
        message: str,
        *,
        rule_id: str,
        condition_type: str,
        source: str | None = None,
        suggested_action: str | None = None,
    ):
        super().__init__(message, source=source, suggested_action=suggested_action)
        self.rule_id = rule_id
        self.condition_type = condition_type

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(rule_id=self.rule_id, condition_type=self.condition_type)
        return data
