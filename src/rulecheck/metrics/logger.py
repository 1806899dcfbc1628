# src/rulecheck/metrics/logger.py
from __future__ import annotations

import json
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rulecheck.errors import DataError
from rulecheck.schemas.models import ViolationStats


def write_stats(
    stats: ViolationStats | dict[str, Any], out_dir: Path, filename: str = "violation_stats.json"
) -> Path:
    """
    @brief
    Writes violation_stats.json atomically in UTF-8 encoding.

    @details
    Accepts a ViolationStats model (dumped with camelCase keys) or a plain
    dict, adds a `generatedAt` timestamp, dumps it with sorted keys and
    indentation, and atomically replaces the target file.

    @params
        stats : ViolationStats | dict[str, Any]
            Aggregates produced by get_violation_stats().
        out_dir : Path
            Directory where the file will be created.
        filename : str
            Target filename (default 'violation_stats.json').

    @returns
        Path to the created file.

    @raises
        DataError
            If input has the wrong type or JSON serialization fails.
    """
    if isinstance(stats, ViolationStats):
        data: dict[str, Any] = stats.model_dump(mode="json", by_alias=True)
    elif isinstance(stats, dict):
        data = dict(stats)
    else:
        raise DataError("stats must be ViolationStats or dict", source="metrics.write_stats")

    data.setdefault("generatedAt", _utc_now_iso())

    # (1) Validate JSON serializability to ensure safe persistence
    try:
        payload = json.dumps(data, ensure_ascii=False, sort_keys=True, indent=2)
    except (TypeError, ValueError) as e:
        raise DataError(
            f"stats not JSON-serializable: {e}",
            source="metrics.write_stats",
            suggested_action="Ensure stats values are primitives (str/float/int/bool).",
        ) from e

    # (2) Atomically write validated payload
    target = Path(out_dir) / filename
    atomic_write_text(target, payload, encoding="utf-8")
    return target


def atomic_write_text(path: Path, text: str, encoding: str = "utf-8") -> None:
    """
    @brief
    Performs atomic text file writing using a temporary file swap.

    @details
    Writes text to a temporary file within the same directory, then replaces
    the destination in a single filesystem operation.

    @raises
        DataError
            On write, encoding or rename failure.
    """
    path = Path(path)
    tmp_dir = path.parent
    tmp_dir.mkdir(parents=True, exist_ok=True)

    # (1) Create temporary file near the target for atomicity
    fd, tmp_path = tempfile.mkstemp(prefix=path.name + ".", dir=str(tmp_dir))
    try:
        with open(fd, "w", encoding=encoding, newline="") as f:
            f.write(text)
        os.replace(tmp_path, path)
    except Exception as e:
        # (2) Clean up temp file on error
        try:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
        finally:
            raise DataError(
                f"atomic write failed for {path}: {e}",
                source="metrics.atomic_write_text",
                suggested_action="Check output directory permissions and disk space.",
            ) from e


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")
