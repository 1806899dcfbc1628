# src/rulecheck/dataloader/items_loader.py
from __future__ import annotations

import csv
import logging
from collections.abc import Iterable
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ValidationError

from rulecheck.dataloader.types import LoadResult
from rulecheck.errors import ConfigError, DataError
from rulecheck.schemas.models import ValidatableItem

logger = logging.getLogger(__name__)

KNOWN_COLUMNS = ("id", "title", "start_date", "end_date", "duration_minutes", "location", "type")


class ItemsLoader:
    """
    CSV -> LoadResult[ValidatableItem].

    Rules:
      - Format: UTF-8 CSV, delimiter=','
      - Required column: id. Optional: title, start_date, end_date,
        duration_minutes, location, type. Any other column is carried
        through as an extension field of the item.
      - Timestamps: datetime.fromisoformat(); naive values get the loader's timezone.
      - Row-level validation (collected, never raised):
          * empty id                 -> issue + continue
          * unparsable datetime      -> issue + continue
          * non-numeric duration     -> issue + continue
          * end_date < start_date    -> issue + continue
          * duplicate id             -> issue + continue (first valid row kept)
      - On completion:
          * any issues -> success=False, items=[], errors=[...]
          * otherwise  -> success=True, items in file order

    Fatal errors (DataError raised immediately):
      - missing / unreadable file
      - missing CSV header
      - missing id column
    """

    REQUIRED_COLUMNS = ("id",)

    def __init__(self, timezone: str = "UTC") -> None:
        try:
            self.tz: tzinfo = ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigError(
                message=f"Unknown timezone: {timezone!r}",
                source="ItemsLoader.__init__",
                suggested_action="Use an IANA timezone name such as 'UTC' or 'Europe/Berlin'.",
            ) from e

    def load(self, path: Path) -> LoadResult:
        rows = self._read_csv(path)
        result = self._rows_to_result(rows)
        self._report_summary(path, result)
        return result

    # ------------------------------
    # Internal helpers
    # ------------------------------
    def _read_csv(self, path: Path) -> list[dict[str, str]]:
        if not isinstance(path, Path):
            raise DataError(
                message=f"Invalid path type: expected pathlib.Path, got {type(path).__name__}",
                source="ItemsLoader._read_csv",
                suggested_action="Pass a pathlib.Path pointing to the items CSV",
            )
        if not path.exists():
            raise DataError(
                message=f"Input CSV not found: {path}",
                source="ItemsLoader._read_csv",
                suggested_action="Verify file path and ensure the CSV is present.",
            )

        try:
            with path.open("r", encoding="utf-8", newline="") as f:
                reader = csv.DictReader(f, delimiter=",")
                if reader.fieldnames is None:
                    raise DataError(
                        message="CSV has no header row.",
                        source="ItemsLoader._read_csv",
                        suggested_action="Ensure the first line contains column names.",
                    )
                header = tuple((name or "").strip() for name in reader.fieldnames)
                self._validate_header(header)
                return [self._strip_row(r) for r in reader]
        except OSError as e:
            raise DataError(
                message=f"Unable to read CSV: {e}",
                source="ItemsLoader._read_csv",
                suggested_action="Check file permissions and that the file is not locked.",
            ) from e

    def _validate_header(self, header: Iterable[str]) -> None:
        missing = [c for c in self.REQUIRED_COLUMNS if c not in header]
        if missing:
            raise DataError(
                message=f"Invalid CSV header: missing required column(s): {', '.join(missing)}",
                source="ItemsLoader._validate_header",
                suggested_action="Add an 'id' column; start_date,end_date,... are optional",
            )

    def _strip_row(self, row: dict[str, Any]) -> dict[str, str]:
        return {
            (k or "").strip(): (v.strip() if isinstance(v, str) else "")
            for k, v in row.items()
            if k is not None
        }

    def _parse_datetime(self, raw: str) -> datetime | None:
        if not raw:
            return None
        dt = datetime.fromisoformat(raw)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=self.tz)
        return dt

    def _rows_to_result(self, rows: list[dict[str, str]]) -> LoadResult:
        issues: list[dict[str, Any]] = []
        items: list[ValidatableItem] = []
        seen_ids: set[str] = set()

        for idx, row in enumerate(rows, start=2):  # header = line 1
            item_id = row.get("id") or ""

            # empty id
            if not item_id:
                issues.append(
                    {"kind": "missing_id", "line_no": idx, "item_id": None, "message": "Missing id"}
                )
                continue

            # parse datetimes
            try:
                start_dt = self._parse_datetime(row.get("start_date", ""))
                end_dt = self._parse_datetime(row.get("end_date", ""))
            except ValueError as e:
                issues.append(
                    {
                        "kind": "invalid_datetime",
                        "line_no": idx,
                        "item_id": item_id,
                        "message": f"Invalid datetime format: {e}",
                    }
                )
                continue

            # parse duration
            duration_raw = row.get("duration_minutes", "")
            try:
                duration = float(duration_raw) if duration_raw else None
            except ValueError:
                issues.append(
                    {
                        "kind": "invalid_duration",
                        "line_no": idx,
                        "item_id": item_id,
                        "message": f"duration_minutes is not a number: {duration_raw!r}",
                    }
                )
                continue

            # end before start
            if start_dt is not None and end_dt is not None and end_dt < start_dt:
                issues.append(
                    {
                        "kind": "negative_duration",
                        "line_no": idx,
                        "item_id": item_id,
                        "message": "end_date < start_date",
                    }
                )
                continue

            # duplicates: keep first valid, later are issues
            if item_id in seen_ids:
                issues.append(
                    {
                        "kind": "duplicate_id",
                        "line_no": idx,
                        "item_id": item_id,
                        "message": "Duplicate id (later occurrence skipped)",
                    }
                )
                continue

            extra = {k: v for k, v in row.items() if k not in KNOWN_COLUMNS and k and v}
            try:
                item = ValidatableItem(
                    id=item_id,
                    title=row.get("title") or None,
                    start_date=start_dt,
                    end_date=end_dt,
                    duration_minutes=duration,
                    location=row.get("location") or None,
                    type=row.get("type") or None,
                    **extra,
                )
            except ValidationError as e:
                issues.append(
                    {
                        "kind": "schema_error",
                        "line_no": idx,
                        "item_id": item_id,
                        "message": f"Item model construction failed: {e}",
                    }
                )
                continue

            items.append(item)
            seen_ids.add(item_id)

        if issues:
            return LoadResult(
                success=False, items=[], errors=issues, total_rows=len(rows), kept_rows=0
            )

        return LoadResult(
            success=True, items=items, errors=[], total_rows=len(rows), kept_rows=len(items)
        )

    def _report_summary(self, path: Path, result: LoadResult) -> None:
        if result.success:
            logger.info(
                "ItemsLoader OK: kept=%d/%d from %s", result.kept_rows, result.total_rows, path
            )
        else:
            counts: dict[str, int] = {}
            for it in result.errors:
                counts[it["kind"]] = counts.get(it["kind"], 0) + 1
            summary = ", ".join(f"{k}={v}" for k, v in counts.items())
            logger.error(
                "ItemsLoader failed: %d issue(s) across %d row(s) in %s [%s]",
                len(result.errors),
                result.total_rows,
                path,
                summary or "no-summary",
            )
