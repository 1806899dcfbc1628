# src/rulecheck/dataloader/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from rulecheck.schemas.models import ValidatableItem


@dataclass(slots=True)
class LoadResult:
    """
    Structured result of an items loading step.

    Fields:
        success: True if no row-level issues were found, False otherwise.
        items: Parsed items in file order (empty if success=False).
        errors: Issue dicts with per-row context. Each contains at least:
                kind, line_no, message, item_id (may be None).
        total_rows: Number of data rows observed in the CSV (excludes header).
        kept_rows: Number of successfully parsed items (len(items)).
    """

    success: bool
    items: list[ValidatableItem] = field(default_factory=list)
    errors: list[dict[str, Any]] = field(default_factory=list)
    total_rows: int = 0
    kept_rows: int = 0
