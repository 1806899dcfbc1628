from __future__ import annotations

import csv
import io
import json
import logging
from pathlib import Path

from rulecheck.errors import DataError
from rulecheck.metrics.logger import atomic_write_text
from rulecheck.schemas.models import ValidationResult

logger = logging.getLogger(__name__)

VIOLATION_COLUMNS = (
    "rule_id",
    "rule_name",
    "severity",
    "category",
    "message",
    "suggestion_message",
    "affected_items",
    "item_titles",
    "timestamp",
)

# Separator for multi-valued cells (affected_items, item_titles)
LIST_SEPARATOR = "|"


def write_validation_report(
    result: ValidationResult,
    out_dir: Path | None = None,
    filename: str = "validation_report.json",
) -> Path:
    """
    @brief
    Writes the validation result envelope to disk as JSON.

    @details
    The result is dumped with camelCase keys (isValid, violations,
    suggestions, validatedAt, ...) and written atomically.

    @params
        result : ValidationResult
            Result of a validate_items call.
        out_dir : Path | None
            Target directory (defaults to 'data/output').
        filename : str
            Target filename (default 'validation_report.json').

    @returns
        Path to the written JSON file.

    @raises
        DataError
            If the result cannot be serialized or written.
    """
    if not isinstance(result, ValidationResult):
        raise DataError(
            "result must be a ValidationResult",
            source="export.write_validation_report",
            suggested_action="Pass the object returned by validate_items().",
        )

    target = (out_dir or Path("data/output")) / filename
    payload = json.dumps(
        result.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False
    )
    atomic_write_text(target, payload + "\n")

    logger.info("Validation report saved: %s", target)
    return target


def write_violations_csv(result: ValidationResult, out_path: Path) -> Path:
    """
    @brief
    Exports violations into a flat CSV file, one row per violation.

    @details
    Rows keep the result order (severity first). Multi-valued cells are
    joined with LIST_SEPARATOR; timestamps are ISO-8601. An empty result
    produces a header-only file.

    @params
        result : ValidationResult
            Result whose violations are exported.
        out_path : Path
            Destination CSV file path.

    @returns
        Path to the written CSV file.
    """
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=VIOLATION_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for v in result.violations:
        writer.writerow(
            {
                "rule_id": v.rule_id,
                "rule_name": v.rule_name,
                "severity": v.severity,
                "category": v.category or "",
                "message": v.message,
                "suggestion_message": v.suggestion_message or "",
                "affected_items": LIST_SEPARATOR.join(v.affected_items),
                "item_titles": LIST_SEPARATOR.join(v.item_titles),
                "timestamp": v.timestamp.isoformat(),
            }
        )

    atomic_write_text(Path(out_path), buf.getvalue())
    return Path(out_path)


__all__ = ["VIOLATION_COLUMNS", "write_validation_report", "write_violations_csv"]
