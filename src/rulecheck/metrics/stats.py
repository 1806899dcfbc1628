# src/rulecheck/metrics/stats.py
from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from rulecheck.schemas.models import (
    RuleViolation,
    ScheduleHealth,
    ValidationResult,
    ViolationStats,
    severity_weight,
)

UNCATEGORIZED = "uncategorized"

# Score penalty per violation, by severity
HEALTH_PENALTIES: dict[str, int] = {"error": 20, "warning": 10, "info": 5}

QUICK_FIXES: dict[str, list[str]] = {
    "time_conflict": [
        "Move one item to a different time",
        "Shorten one or both items",
        "Consider making one item virtual if possible",
    ],
    "meeting_buffer": [
        "Add a buffer between meetings",
        "End the first meeting a few minutes early",
        "Start the second meeting a few minutes later",
    ],
    "workload_limit": [
        "Move some items to the next day",
        "Combine related tasks into single blocks",
        "Delegate or reschedule non-critical items",
    ],
    "duration_validation": [
        "Adjust item duration to reasonable limits",
        "Break long items into multiple sessions",
        "Add breaks for extended work periods",
    ],
    "location_grouping": [
        "Group items at the same location together",
        "Schedule travel time between locations",
        "Consider remote alternatives when possible",
    ],
    "break_requirement": [
        "Schedule a 30-minute break",
        "Split long work sessions",
        "Add meal breaks between work blocks",
    ],
}


def get_violation_stats(result: ValidationResult) -> ViolationStats:
    """
    @brief
    Aggregate counts over the violations of one result.

    @details
    Counts by severity and by category, the number of distinct affected
    item ids, and the most frequent rule id. Ties for the most frequent
    rule go to the rule encountered first in result order.

    @params
        result : ValidationResult
            Result of a validate_items call.

    @returns
        ViolationStats with all counts (zeros for an empty result).
    """
    severity_counts: Counter[str] = Counter()
    by_category: dict[str, int] = {}
    rule_counts: Counter[str] = Counter()
    affected: set[str] = set()

    # (1) Single pass over violations in result order
    for v in result.violations:
        severity_counts[v.severity] += 1
        category = v.category or UNCATEGORIZED
        by_category[category] = by_category.get(category, 0) + 1
        rule_counts[v.rule_id] += 1
        affected.update(v.affected_items)

    # (2) Counter keeps first-encountered order for equal counts
    most_common = rule_counts.most_common(1)

    return ViolationStats(
        total_violations=len(result.violations),
        error_count=severity_counts["error"],
        warning_count=severity_counts["warning"],
        info_count=severity_counts["info"],
        by_category=by_category,
        most_common_rule=most_common[0][0] if most_common else "",
        affected_item_count=len(affected),
    )


def _plural(count: int, word: str) -> str:
    return f"{count} {word}{'s' if count != 1 else ''}"


def schedule_health(result: ValidationResult) -> ScheduleHealth:
    """
    @brief
    Summarize a result as a status, a 0-100 score and a one-line summary.

    @details
    Valid results are healthy with score 100. Otherwise every violation
    lowers the score by its severity penalty (floored at 0); any error
    makes the status critical, anything else is a warning.
    """
    if result.is_valid:
        return ScheduleHealth(
            status="healthy", score=100, summary="Schedule is valid with no issues"
        )

    stats = get_violation_stats(result)
    errors, warnings, infos = stats.error_count, stats.warning_count, stats.info_count
    score = max(
        0,
        100
        - errors * HEALTH_PENALTIES["error"]
        - warnings * HEALTH_PENALTIES["warning"]
        - infos * HEALTH_PENALTIES["info"],
    )

    if errors > 0:
        status = "critical"
        summary = f"{_plural(errors, 'critical issue')} found"
    elif warnings > 0:
        status = "warning"
        summary = f"{_plural(warnings, 'warning')} detected"
    else:
        status = "warning"
        summary = f"{_plural(infos, 'suggestion')} available"

    # Mixed non-error issues get a breakdown instead
    if errors == 0 and stats.total_violations > 1:
        parts = []
        if warnings > 0:
            parts.append(_plural(warnings, "warning"))
        if infos > 0:
            parts.append(_plural(infos, "suggestion"))
        summary = ", ".join(parts)

    return ScheduleHealth(status=status, score=score, summary=summary)


def violations_by_category(
    violations: Sequence[RuleViolation],
) -> dict[str, list[RuleViolation]]:
    """Group violations by category, preserving first-seen order."""
    groups: dict[str, list[RuleViolation]] = {}
    for v in violations:
        groups.setdefault(v.category or UNCATEGORIZED, []).append(v)
    return groups


def most_critical_violation(violations: Sequence[RuleViolation]) -> RuleViolation | None:
    """First violation with the highest severity weight, or None."""
    best: RuleViolation | None = None
    for v in violations:
        if best is None or severity_weight(v.severity) > severity_weight(best.severity):
            best = v
    return best


def quick_fixes(violation: RuleViolation) -> list[str]:
    """
    @brief
    Canned remediation hints for a violation.

    @details
    Looks up the violation's condition type (falling back to its rule id);
    unknown types yield the violation's own suggestion message, if any.
    """
    key = violation.metadata.get("condition_type") or violation.rule_id
    fixes = QUICK_FIXES.get(key)
    if fixes is not None:
        return list(fixes)
    return [violation.suggestion_message] if violation.suggestion_message else []


__all__ = [
    "QUICK_FIXES",
    "get_violation_stats",
    "most_critical_violation",
    "quick_fixes",
    "schedule_health",
    "violations_by_category",
]
