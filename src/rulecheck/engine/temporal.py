# src/rulecheck/engine/temporal.py
from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from rulecheck.schemas.models import ValidatableItem

# Meeting-length heuristic used when an item carries neither duration nor end.
DEFAULT_DURATION_MINUTES: float = 50


# ----------------------------
# AUXILIARY STRUCTURES / FUNCTIONS
# ----------------------------
@dataclass(frozen=True)
class TimeGap:
    """
    @brief
    Gap between two chronologically adjacent items.

    @details
    `gap_minutes` is measured from the effective end of `before_item` to the
    start of `after_item`; negative values mean the items overlap.
    """

    before_item: ValidatableItem
    after_item: ValidatableItem
    gap_minutes: int


def _ensure_timezone(dt: datetime) -> datetime:
    """
    @brief
    Ensure datetime object is timezone-aware.

    @details
    Naive datetimes are interpreted as UTC so that naive and aware
    timestamps from different hosts can be compared without TypeError.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def _minutes(delta: timedelta) -> int:
    """Whole minutes of a timedelta, rounded half-up."""
    return math.floor(delta.total_seconds() / 60.0 + 0.5)


def start_of(item: ValidatableItem) -> datetime | None:
    """Timezone-aware start of an item, or None."""
    return _ensure_timezone(item.start_date) if item.start_date is not None else None


def effective_duration(
    item: ValidatableItem, default_minutes: float = DEFAULT_DURATION_MINUTES
) -> float:
    """
    @brief
    Duration of an item in minutes.

    @details
    Resolution order: explicit `duration_minutes`, then `end_date - start_date`
    (rounded to whole minutes), then the default duration.
    """
    if item.duration_minutes is not None:
        return item.duration_minutes
    if item.end_date is not None and item.start_date is not None:
        return _minutes(_ensure_timezone(item.end_date) - _ensure_timezone(item.start_date))
    return default_minutes


def effective_end(
    item: ValidatableItem, default_minutes: float = DEFAULT_DURATION_MINUTES
) -> datetime | None:
    """
    @brief
    End timestamp of an item, derived when not given explicitly.

    @details
    Returns `end_date` when present, otherwise `start_date` plus the effective
    duration. Items with neither timestamp have no effective end (None).
    """
    if item.end_date is not None:
        return _ensure_timezone(item.end_date)
    start = start_of(item)
    if start is None:
        return None
    return start + timedelta(minutes=effective_duration(item, default_minutes))


def gap_minutes(
    before: ValidatableItem,
    after: ValidatableItem,
    default_minutes: float = DEFAULT_DURATION_MINUTES,
) -> int:
    """
    @brief
    Whole minutes between the effective end of `before` and the start of `after`.

    @details
    Negative values indicate overlap. Returns 0 when either bound is unknown.
    """
    after_start = start_of(after)
    before_end = effective_end(before, default_minutes)
    if after_start is None or before_end is None:
        return 0
    return _minutes(after_start - before_end)


def overlaps(
    a: ValidatableItem, b: ValidatableItem, default_minutes: float = DEFAULT_DURATION_MINUTES
) -> bool:
    """True iff both items have a start and their effective intervals intersect."""
    a_start, b_start = start_of(a), start_of(b)
    if a_start is None or b_start is None:
        return False
    a_end = effective_end(a, default_minutes)
    b_end = effective_end(b, default_minutes)
    return a_start < b_end and b_start < a_end  # type: ignore[operator]


def sorted_by_start(items: Iterable[ValidatableItem]) -> list[ValidatableItem]:
    """
    @brief
    Items with a start timestamp, in ascending start order.

    @details
    Items lacking `start_date` are dropped. The sort is stable, so items
    sharing a start keep their input order.
    """
    timed = [it for it in items if it.start_date is not None]
    timed.sort(key=lambda it: start_of(it))  # type: ignore[arg-type, return-value]
    return timed


def find_time_gaps(
    items: Iterable[ValidatableItem], default_minutes: float = DEFAULT_DURATION_MINUTES
) -> list[TimeGap]:
    """Gaps between each pair of adjacent items after sorting by start."""
    ordered = sorted_by_start(items)
    return [
        TimeGap(
            before_item=prev,
            after_item=cur,
            gap_minutes=gap_minutes(prev, cur, default_minutes),
        )
        for prev, cur in zip(ordered, ordered[1:])
    ]


__all__ = [
    "DEFAULT_DURATION_MINUTES",
    "TimeGap",
    "effective_duration",
    "effective_end",
    "find_time_gaps",
    "gap_minutes",
    "overlaps",
    "sorted_by_start",
    "start_of",
]
