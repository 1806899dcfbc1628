# tests/engine/test_temporal.py
from datetime import datetime, timedelta, timezone

import pytest

from rulecheck.engine.temporal import (
    DEFAULT_DURATION_MINUTES,
    effective_duration,
    effective_end,
    find_time_gaps,
    gap_minutes,
    overlaps,
    sorted_by_start,
)
from rulecheck.schemas.models import ValidatableItem

UTC = timezone.utc
T0 = datetime(2025, 1, 6, 9, 0, tzinfo=UTC)


def _at(minutes: float) -> datetime:
    return T0 + timedelta(minutes=minutes)


# ------------------------------------------------------------------------------
# effective_duration / effective_end
# ------------------------------------------------------------------------------
def test_effective_duration_prefers_explicit_value():
    item = ValidatableItem(id="a", start_date=_at(0), end_date=_at(90), duration_minutes=30)
    assert effective_duration(item) == pytest.approx(30)


def test_effective_duration_explicit_zero_is_honored():
    item = ValidatableItem(id="a", start_date=_at(0), end_date=_at(90), duration_minutes=0)
    assert effective_duration(item) == 0


def test_effective_duration_from_timestamps_rounds_half_up():
    item = ValidatableItem(id="a", start_date=_at(0), end_date=_at(0) + timedelta(seconds=90))
    assert effective_duration(item) == 2

    item = ValidatableItem(id="b", start_date=_at(0), end_date=_at(0) + timedelta(seconds=89))
    assert effective_duration(item) == 1


def test_effective_duration_falls_back_to_default():
    item = ValidatableItem(id="a", start_date=_at(0))
    assert effective_duration(item) == DEFAULT_DURATION_MINUTES
    assert effective_duration(ValidatableItem(id="b"), default_minutes=15) == 15


def test_effective_end_resolution():
    explicit = ValidatableItem(id="a", start_date=_at(0), end_date=_at(30))
    derived = ValidatableItem(id="b", start_date=_at(0), duration_minutes=45)
    defaulted = ValidatableItem(id="c", start_date=_at(0))
    untimed = ValidatableItem(id="d", duration_minutes=45)

    assert effective_end(explicit) == _at(30)
    assert effective_end(derived) == _at(45)
    assert effective_end(defaulted) == _at(DEFAULT_DURATION_MINUTES)
    assert effective_end(untimed) is None


# ------------------------------------------------------------------------------
# gap_minutes / overlaps
# ------------------------------------------------------------------------------
def test_gap_minutes_positive_negative_and_unknown():
    a = ValidatableItem(id="a", start_date=_at(0), end_date=_at(60))
    b = ValidatableItem(id="b", start_date=_at(65))
    c = ValidatableItem(id="c", start_date=_at(30))
    untimed = ValidatableItem(id="d")

    assert gap_minutes(a, b) == 5
    assert gap_minutes(a, c) == -30
    assert gap_minutes(a, untimed) == 0
    assert gap_minutes(untimed, a) == 0


def test_overlaps_is_strict_on_touching_intervals():
    a = ValidatableItem(id="a", start_date=_at(0), end_date=_at(60))
    touching = ValidatableItem(id="b", start_date=_at(60), end_date=_at(90))
    inside = ValidatableItem(id="c", start_date=_at(30), end_date=_at(45))

    assert overlaps(a, touching) is False
    assert overlaps(a, inside) is True
    assert overlaps(inside, a) is True
    assert overlaps(a, ValidatableItem(id="d")) is False


def test_naive_and_aware_timestamps_compare_as_utc():
    naive = ValidatableItem(id="a", start_date=datetime(2025, 1, 6, 9, 0), duration_minutes=60)
    aware = ValidatableItem(id="b", start_date=_at(30))

    assert overlaps(naive, aware) is True
    assert gap_minutes(naive, aware) == -30


# ------------------------------------------------------------------------------
# sorted_by_start / find_time_gaps
# ------------------------------------------------------------------------------
def test_sorted_by_start_drops_untimed_and_is_stable():
    items = [
        ValidatableItem(id="late", start_date=_at(120)),
        ValidatableItem(id="undated"),
        ValidatableItem(id="first", start_date=_at(0)),
        ValidatableItem(id="second", start_date=_at(0)),
    ]
    assert [it.id for it in sorted_by_start(items)] == ["first", "second", "late"]


def test_find_time_gaps_pairs_adjacent_items():
    items = [
        ValidatableItem(id="c", start_date=_at(200), end_date=_at(230)),
        ValidatableItem(id="a", start_date=_at(0), end_date=_at(60)),
        ValidatableItem(id="b", start_date=_at(70), end_date=_at(100)),
    ]

    gaps = find_time_gaps(items)

    assert [(g.before_item.id, g.after_item.id, g.gap_minutes) for g in gaps] == [
        ("a", "b", 10),
        ("b", "c", 100),
    ]
    assert find_time_gaps(items[:1]) == []
