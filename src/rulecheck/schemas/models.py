# src/rulecheck/schemas/models.py
"""
@brief
Pydantic data models for the rulecheck validation engine.

@details
Defines the shared vocabulary of the engine:
    - ValidatableItem: any time-scoped record (event, task, booking)
    - RuleCondition / ValidationRule: declarative rule definitions
    - RuleViolation / ValidationResult: structured validation output
    - ViolationStats / ScheduleHealth: reporting aggregates
    - Config: runtime configuration (from config.yaml)

Every model accepts both snake_case field names and their camelCase
aliases (startDate, isEnabled, suggestionMessage, ...), so rule sets and
items authored for JSON hosts load without adapter code.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel

RuleSeverity = Literal["info", "warning", "error"]
RuleCategory = Literal["time", "location", "workload", "breaks", "conflicts", "duration", "custom"]

SEVERITY_WEIGHTS: dict[str, int] = {"error": 3, "warning": 2, "info": 1}


def severity_weight(severity: str) -> int:
    """Numeric rank used for ordering violations (unknown severities rank last)."""
    return SEVERITY_WEIGHTS.get(severity, 0)


class _CamelModel(BaseModel):
    """
    @brief
    Base model accepting camelCase aliases next to field names.

    @details
    Serializes with camelCase keys when dumped with by_alias=True.
    """

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "use_enum_values": True,
    }


class _StrictModel(_CamelModel):
    """
    @brief
    Base model for configuration contracts.

    @details
    Forbids unknown fields so typos in rule files surface at load time.
    """

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "use_enum_values": True,
        "extra": "forbid",
    }


class ValidatableItem(_CamelModel):
    """
    @brief
    Any record the engine can validate.

    @details
    Only `id` is required. Domain models either subclass this type to add
    typed fields, or pass extra fields through (available via `model_extra`).
    Items are immutable once constructed.
    """

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "extra": "allow",
        "frozen": True,
    }

    id: str = Field(..., description="Unique identifier within one validation call")
    title: str | None = Field(None, description="Display title (falls back to id)")
    start_date: datetime | None = Field(None, description="Start timestamp")
    end_date: datetime | None = Field(None, description="End timestamp")
    duration_minutes: float | None = Field(None, description="Explicit duration in minutes")
    location: str | None = Field(None, description="Free-form location label")
    type: str | None = Field(None, description="Item kind, e.g. meeting | work | task")

    @property
    def display_title(self) -> str:
        return self.title or self.id


class RuleCondition(_StrictModel):
    """Selects the evaluator (`type`) and carries its tunables (`parameters`)."""

    type: str = Field(..., description="Condition type key in the evaluator registry")
    parameters: dict[str, Any] = Field(default_factory=dict)


class ValidationRule(_StrictModel):
    """
    @brief
    Declarative, data-only description of one check.

    @details
    Rules are configuration, not code: the engine never raises because of
    their content. An unknown `condition.type` is skipped with a warning.
    """

    id: str = Field(..., description="Stable rule identifier")
    name: str = Field(..., description="Human-readable rule name")
    description: str = Field("", description="Longer explanation for settings screens")
    category: RuleCategory = Field("custom", description="Grouping for reports")
    is_enabled: bool = Field(True, description="Disabled rules are not evaluated")
    severity: RuleSeverity = Field("warning", description="info | warning | error")
    condition: RuleCondition
    message: str = Field("", description="Default message for the rule")
    suggestion_message: str | None = Field(None, description="Remediation hint")


class RuleViolation(_CamelModel):
    """
    @brief
    One finding produced by evaluating one rule.

    @details
    `affected_items` and `item_titles` are parallel sequences. `category`
    mirrors the originating rule's category; `metadata` holds the
    condition type and evaluator-specific numbers.
    """

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "frozen": True,
    }

    rule_id: str
    rule_name: str
    severity: RuleSeverity
    message: str
    suggestion_message: str | None = None
    affected_items: list[str] = Field(default_factory=list)
    item_titles: list[str] = Field(default_factory=list)
    timestamp: datetime
    category: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _titles_parallel_to_items(self) -> RuleViolation:
        if len(self.item_titles) != len(self.affected_items):
            raise ValueError("item_titles must be parallel to affected_items")
        return self


class ValidationResult(_CamelModel):
    """
    @brief
    Envelope returned by one validate_items call.

    @details
    Violations are ordered error > warning > info; equal severities keep the
    order in which evaluators produced them. `rule_count` counts enabled rules.
    """

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "frozen": True,
    }

    is_valid: bool
    violations: list[RuleViolation] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    validated_at: datetime
    item_count: int = Field(ge=0)
    rule_count: int = Field(ge=0)
    skipped_rules: list[str] = Field(
        default_factory=list,
        description="Enabled rules with an unknown condition type or a failing evaluator",
    )


class ViolationStats(_CamelModel):
    """Aggregate counts derived from a ValidationResult."""

    total_violations: int = 0
    error_count: int = 0
    warning_count: int = 0
    info_count: int = 0
    by_category: dict[str, int] = Field(default_factory=dict)
    most_common_rule: str = ""
    affected_item_count: int = 0


class ScheduleHealth(_CamelModel):
    """Single-number summary of a ValidationResult for dashboards."""

    status: Literal["healthy", "warning", "critical"]
    score: int = Field(ge=0, le=100)
    summary: str


# ------------------------------------------------------------
# Runtime configuration (config.yaml)
# ------------------------------------------------------------
class ReportConfig(BaseModel):
    """
    @brief
    Controls which artifacts the run script writes.

    @details
    `fail_on_warnings` makes warning-severity violations fail the run.
    """

    write_report: bool = True
    write_stats: bool = True
    write_violations_csv: bool = True
    fail_on_warnings: bool = False


class Config(_StrictModel):
    """
    @brief
    Full runtime configuration loaded from config.yaml.

    @details
    Carries the rule set, the timezone applied to naive timestamps when
    loading items, the evaluator isolation switch and report settings.
    """

    timezone: str = Field("UTC", description="IANA timezone for naive item timestamps")
    isolate_evaluator_errors: bool = Field(
        True, description="Log and skip failing evaluators instead of aborting the call"
    )
    items_csv: str | None = None
    output_dir: str | None = "data/output"
    report: ReportConfig = Field(default_factory=ReportConfig)
    rules: list[ValidationRule] = Field(default_factory=list)


__all__ = [
    "Config",
    "ReportConfig",
    "RuleCategory",
    "RuleCondition",
    "RuleSeverity",
    "RuleViolation",
    "SEVERITY_WEIGHTS",
    "ScheduleHealth",
    "ValidatableItem",
    "ValidationResult",
    "ValidationRule",
    "ViolationStats",
    "severity_weight",
]
