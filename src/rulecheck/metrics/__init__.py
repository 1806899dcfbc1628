from rulecheck.metrics.logger import atomic_write_text, write_stats
from rulecheck.metrics.stats import (
    get_violation_stats,
    most_critical_violation,
    quick_fixes,
    schedule_health,
    violations_by_category,
)

__all__ = [
    "atomic_write_text",
    "get_violation_stats",
    "most_critical_violation",
    "quick_fixes",
    "schedule_health",
    "violations_by_category",
    "write_stats",
]
