# src/rulecheck/engine/evaluators.py
"""
@brief
Built-in condition evaluators.

@details
Each evaluator implements one validation strategy with the shared signature
`(items, rule) -> list[RuleViolation]`. Evaluators read only the rule's
identity, severity, messages and `condition.parameters`; they never mutate
the items. Items lacking the fields an evaluator needs are excluded from its
input set rather than reported.

Comparisons are made between chronologically adjacent items only (after
sorting by start). An item overlapping a non-adjacent one is therefore not
always reported.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from rulecheck.engine.temporal import (
    DEFAULT_DURATION_MINUTES,
    effective_duration,
    find_time_gaps,
    gap_minutes,
    overlaps,
    sorted_by_start,
)
from rulecheck.schemas.models import RuleViolation, ValidatableItem, ValidationRule

logger = logging.getLogger(__name__)

# Parameter defaults (minutes unless stated otherwise)
DEFAULT_BUFFER_MINUTES: float = 10
DEFAULT_MAX_GAP_MINUTES: float = 180
DEFAULT_MAX_ITEMS_PER_DAY: float = 8
DEFAULT_MAX_DURATION_MINUTES: float = 480
DEFAULT_MIN_DURATION_MINUTES: float = 5
DEFAULT_WORK_HOURS_THRESHOLD: float = 240
DEFAULT_REQUIRED_BREAK_MINUTES: float = 30

WORK_ITEM_TYPES: frozenset[str] = frozenset({"meeting", "work", "task"})


# ----------------------------
# AUXILIARY FUNCTIONS
# ----------------------------
def _param(rule: ValidationRule, key: str, default: float) -> float:
    """
    @brief
    Read a numeric parameter from the rule condition.

    @details
    Missing, null, boolean, non-numeric or non-finite values fall back to
    `default`. Everything but a missing value is logged at WARNING.
    """
    value: Any = rule.condition.parameters.get(key)
    if value is None:
        return default
    if (
        isinstance(value, bool)
        or not isinstance(value, (int, float))
        or (isinstance(value, float) and not math.isfinite(value))
    ):
        logger.warning(
            "Rule %s: parameter %s=%r is not a finite number, using default %s",
            rule.id,
            key,
            value,
            default,
        )
        return default
    return value


def _default_duration(rule: ValidationRule) -> float:
    return _param(rule, "defaultDurationMinutes", DEFAULT_DURATION_MINUTES)


def _fmt(value: float) -> str:
    """Render integral floats without a trailing .0 (600.0 -> '600')."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _violation(
    rule: ValidationRule,
    message: str,
    items: Sequence[ValidatableItem],
    **metadata: Any,
) -> RuleViolation:
    """Build a violation for `rule` naming `items` in order."""
    return RuleViolation(
        rule_id=rule.id,
        rule_name=rule.name,
        severity=rule.severity,
        message=message,
        suggestion_message=rule.suggestion_message,
        affected_items=[it.id for it in items],
        item_titles=[it.display_title for it in items],
        timestamp=datetime.now(timezone.utc),
        category=rule.category,
        metadata={"condition_type": rule.condition.type, **metadata},
    )


# ----------------------------
# EVALUATORS
# ----------------------------
def validate_time_conflicts(
    items: Sequence[ValidatableItem], rule: ValidationRule
) -> list[RuleViolation]:
    """Report each pair of start-adjacent items whose intervals overlap."""
    default_minutes = _default_duration(rule)
    ordered = sorted_by_start(items)
    violations: list[RuleViolation] = []

    for cur, nxt in zip(ordered, ordered[1:]):
        if overlaps(cur, nxt, default_minutes):
            violations.append(
                _violation(
                    rule,
                    f'"{cur.display_title}" overlaps with "{nxt.display_title}"',
                    [cur, nxt],
                )
            )
    return violations


def validate_meeting_buffer(
    items: Sequence[ValidatableItem], rule: ValidationRule
) -> list[RuleViolation]:
    """Require `bufferMinutes` between consecutive meetings."""
    buffer_minutes = _param(rule, "bufferMinutes", DEFAULT_BUFFER_MINUTES)
    default_minutes = _default_duration(rule)
    meetings = sorted_by_start(it for it in items if it.type == "meeting")
    violations: list[RuleViolation] = []

    for cur, nxt in zip(meetings, meetings[1:]):
        between = gap_minutes(cur, nxt, default_minutes)
        if between < buffer_minutes:
            violations.append(
                _violation(
                    rule,
                    f'Only {between} minutes between "{cur.display_title}" and '
                    f'"{nxt.display_title}" (requires {_fmt(buffer_minutes)})',
                    [cur, nxt],
                    gap_minutes=between,
                    required_minutes=buffer_minutes,
                )
            )
    return violations


def validate_location_grouping(
    items: Sequence[ValidatableItem], rule: ValidationRule
) -> list[RuleViolation]:
    """
    @brief
    Flag long idle stretches between items held at the same location.

    @details
    Items are grouped by `location` (first-seen order); within each group
    adjacent gaps larger than `maxGapMinutes` are reported.
    """
    max_gap = _param(rule, "maxGapMinutes", DEFAULT_MAX_GAP_MINUTES)
    default_minutes = _default_duration(rule)

    # (1) Group located, timed items by location
    by_location: dict[str, list[ValidatableItem]] = {}
    for it in items:
        if it.location and it.start_date is not None:
            by_location.setdefault(it.location, []).append(it)

    # (2) Check adjacent gaps inside each multi-item group
    violations: list[RuleViolation] = []
    for location, located in by_location.items():
        if len(located) < 2:
            continue
        for gap in find_time_gaps(located, default_minutes):
            if gap.gap_minutes > max_gap:
                violations.append(
                    _violation(
                        rule,
                        f"Large {gap.gap_minutes}-minute gap between items at {location}",
                        [gap.before_item, gap.after_item],
                        location=location,
                        gap_minutes=gap.gap_minutes,
                        max_gap_minutes=max_gap,
                    )
                )
    return violations


def validate_workload_limit(
    items: Sequence[ValidatableItem], rule: ValidationRule
) -> list[RuleViolation]:
    """
    @brief
    Limit the number of items per calendar day.

    @details
    Days are the date component of each item's own `start_date` (no timezone
    conversion). One violation per overloaded day lists every item of that day.
    """
    max_per_day = _param(rule, "maxItemsPerDay", DEFAULT_MAX_ITEMS_PER_DAY)

    by_date: dict[str, list[ValidatableItem]] = {}
    for it in items:
        if it.start_date is not None:
            by_date.setdefault(it.start_date.date().isoformat(), []).append(it)

    violations: list[RuleViolation] = []
    for day, day_items in by_date.items():
        if len(day_items) > max_per_day:
            violations.append(
                _violation(
                    rule,
                    f"{len(day_items)} items scheduled for {day} (limit: {_fmt(max_per_day)})",
                    day_items,
                    date=day,
                    item_count=len(day_items),
                    max_items_per_day=max_per_day,
                )
            )
    return violations


def validate_duration(
    items: Sequence[ValidatableItem], rule: ValidationRule
) -> list[RuleViolation]:
    """Check every item's effective duration against [min, max]; both may fire."""
    max_duration = _param(rule, "maxDurationMinutes", DEFAULT_MAX_DURATION_MINUTES)
    min_duration = _param(rule, "minDurationMinutes", DEFAULT_MIN_DURATION_MINUTES)
    default_minutes = _default_duration(rule)
    violations: list[RuleViolation] = []

    for it in items:
        duration = effective_duration(it, default_minutes)

        if duration > max_duration:
            violations.append(
                _violation(
                    rule,
                    f'"{it.display_title}" duration ({_fmt(duration)} min) exceeds maximum '
                    f"({_fmt(max_duration)} min)",
                    [it],
                    duration_minutes=duration,
                    max_duration_minutes=max_duration,
                )
            )

        if duration < min_duration:
            violations.append(
                _violation(
                    rule,
                    f'"{it.display_title}" duration ({_fmt(duration)} min) below minimum '
                    f"({_fmt(min_duration)} min)",
                    [it],
                    duration_minutes=duration,
                    min_duration_minutes=min_duration,
                )
            )
    return violations


def validate_break_requirement(
    items: Sequence[ValidatableItem], rule: ValidationRule
) -> list[RuleViolation]:
    """
    @brief
    Require a rest break once continuous work exceeds a threshold.

    @details
    Work items (meeting, work, task) are walked in start order while a
    running total of continuous work minutes is kept. A violation is raised
    for the item started after a short break when the running total already
    exceeds `workHoursThreshold`. An adequate break resets the total.
    """
    threshold = _param(rule, "workHoursThreshold", DEFAULT_WORK_HOURS_THRESHOLD)
    required_break = _param(rule, "requiredBreakMinutes", DEFAULT_REQUIRED_BREAK_MINUTES)
    default_minutes = _default_duration(rule)

    work_items = sorted_by_start(it for it in items if (it.type or "") in WORK_ITEM_TYPES)
    violations: list[RuleViolation] = []
    continuous: float = 0
    previous: ValidatableItem | None = None

    for it in work_items:
        if previous is not None:
            rest = gap_minutes(previous, it, default_minutes)

            if rest < required_break and continuous > threshold:
                violations.append(
                    _violation(
                        rule,
                        f"Insufficient break ({rest} min) after "
                        f"{math.floor(continuous / 60 + 0.5)} hours of work before "
                        f'"{it.display_title}"',
                        [it],
                        break_minutes=rest,
                        continuous_work_minutes=continuous,
                        required_break_minutes=required_break,
                    )
                )

            if rest >= required_break:
                continuous = 0

        continuous += effective_duration(it, default_minutes)
        previous = it

    return violations


BUILTIN_EVALUATORS = {
    "time_conflict": validate_time_conflicts,
    "meeting_buffer": validate_meeting_buffer,
    "location_grouping": validate_location_grouping,
    "workload_limit": validate_workload_limit,
    "duration_validation": validate_duration,
    "break_requirement": validate_break_requirement,
}

__all__ = [
    "BUILTIN_EVALUATORS",
    "validate_break_requirement",
    "validate_duration",
    "validate_location_grouping",
    "validate_meeting_buffer",
    "validate_time_conflicts",
    "validate_workload_limit",
]
