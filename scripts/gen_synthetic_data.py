# scripts/gen_synthetic_data.py
"""
Synthetic calendar generator (single run -> single items CSV).

Design:
- Parameters are constants below (no CLI args).
- Time discretization: 5 minutes (ticks).
- For each day a working-hours chain of items is generated starting at
  DAY_START_HOUR: random type, random duration, then a random gap, until
  DAY_END_HOUR. Gaps may be negative (OVERLAP_PROBABILITY) so that the
  time_conflict rule has something to find.
- A fraction of items omit end_date and carry duration_minutes instead, and a
  few omit start_date entirely (undated tasks).
- Output CSV columns: id,title,start_date,end_date,duration_minutes,location,type

Edit the constants in the "CONFIG" section to produce different datasets.
"""

from __future__ import annotations

import csv
import random
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path

# =========================
# CONFIG - EDIT THESE
# =========================
DAYS: int = 5  # number of consecutive days (>= 1)
OUTPUT: str = f"data/input/synthetic_{DAYS}d_items.csv"

TICK_MINUTES: int = 5
DAY_START_HOUR: int = 8
DAY_END_HOUR: int = 18
MIN_DURATION_MIN: int = 5
MAX_DURATION_MIN: int = 3 * 60
MIN_GAP_MIN: int = 0
MAX_GAP_MIN: int = 90
OVERLAP_PROBABILITY: float = 0.1
DURATION_ONLY_PROBABILITY: float = 0.3
UNDATED_PER_DAY: int = 1

TYPES: tuple[str, ...] = ("meeting", "meeting", "work", "task", "personal")
LOCATIONS: tuple[str, ...] = ("", "", "Office", "Cafe", "Client site")

EPOCH: datetime = datetime(2025, 1, 6, 0, 0, 0, tzinfo=timezone.utc)

RANDOM_SEED: int = 42
# =========================


@dataclass(frozen=True, slots=True)
class ItemRow:
    id: str
    title: str
    start_date: datetime | None
    end_date: datetime | None
    duration_minutes: int | None
    location: str
    type: str


def _ticks(lo: int, hi: int) -> int:
    """Random multiple of TICK_MINUTES in [lo, hi]."""
    return random.randint(lo // TICK_MINUTES, hi // TICK_MINUTES) * TICK_MINUTES


def _generate_day(day_index: int, start_counter: int) -> tuple[list[ItemRow], int]:
    """
    Generate one day's chain of items.

    Returns:
        (rows, next_id_counter)
    """
    rows: list[ItemRow] = []
    day_start = EPOCH + timedelta(days=day_index)
    cursor = DAY_START_HOUR * 60
    counter = start_counter

    while cursor < DAY_END_HOUR * 60:
        counter += 1
        kind = random.choice(TYPES)
        duration = _ticks(MIN_DURATION_MIN, MAX_DURATION_MIN)
        start = day_start + timedelta(minutes=cursor)

        if random.random() < DURATION_ONLY_PROBABILITY:
            end, explicit = None, duration
        else:
            end, explicit = start + timedelta(minutes=duration), None

        rows.append(
            ItemRow(
                id=f"I{counter:05d}",
                title=f"{kind.title()} #{counter}",
                start_date=start,
                end_date=end,
                duration_minutes=explicit,
                location=random.choice(LOCATIONS),
                type=kind,
            )
        )

        gap = _ticks(MIN_GAP_MIN, MAX_GAP_MIN)
        if random.random() < OVERLAP_PROBABILITY:
            gap = -min(duration // 2, _ticks(TICK_MINUTES, 30))
        cursor += duration + gap

    for _ in range(UNDATED_PER_DAY):
        counter += 1
        rows.append(
            ItemRow(
                id=f"I{counter:05d}",
                title=f"Task #{counter}",
                start_date=None,
                end_date=None,
                duration_minutes=_ticks(15, 120),
                location="",
                type="task",
            )
        )

    return rows, counter


def _write_csv(path: Path, rows: Iterable[ItemRow]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(
            ["id", "title", "start_date", "end_date", "duration_minutes", "location", "type"]
        )
        for r in rows:
            writer.writerow(
                [
                    r.id,
                    r.title,
                    r.start_date.isoformat() if r.start_date else "",
                    r.end_date.isoformat() if r.end_date else "",
                    "" if r.duration_minutes is None else r.duration_minutes,
                    r.location,
                    r.type,
                ]
            )


def _validate_config_or_die() -> None:
    problems: list[str] = []
    if DAYS < 1:
        problems.append("DAYS must be >= 1")
    if not 0 <= DAY_START_HOUR < DAY_END_HOUR <= 24:
        problems.append("Require 0 <= DAY_START_HOUR < DAY_END_HOUR <= 24")
    if MIN_DURATION_MIN <= 0 or MAX_DURATION_MIN < MIN_DURATION_MIN:
        problems.append("Require 0 < MIN_DURATION_MIN <= MAX_DURATION_MIN")
    bounds = (MIN_DURATION_MIN, MAX_DURATION_MIN, MIN_GAP_MIN, MAX_GAP_MIN)
    if not all(x % TICK_MINUTES == 0 for x in bounds):
        problems.append(f"Durations and gaps must be multiples of TICK_MINUTES ({TICK_MINUTES})")
    if problems:
        print("Invalid generator configuration:\n- " + "\n- ".join(problems), file=sys.stderr)
        sys.exit(2)


def main() -> int:
    _validate_config_or_die()
    random.seed(RANDOM_SEED)

    all_rows: list[ItemRow] = []
    counter = 0
    for day in range(DAYS):
        rows, counter = _generate_day(day, counter)
        all_rows.extend(rows)

    output = Path(OUTPUT)
    _write_csv(output, all_rows)

    dated = sum(1 for r in all_rows if r.start_date is not None)
    print(f"[GEN] days={DAYS}, items={len(all_rows)}, dated={dated}")
    print(f"[GEN] wrote: {output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
