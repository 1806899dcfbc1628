# src/rulecheck/dataloader/postload_handler.py
from __future__ import annotations

import json
import logging
from pathlib import Path

from rulecheck.dataloader.types import LoadResult
from rulecheck.schemas.models import ValidatableItem

logger = logging.getLogger(__name__)


class LoadResultHandler:
    """
    @brief
    Routes a LoadResult either to the engine or to an error report.

    @details
    On success the parsed items are returned for validation. On failure the
    per-row issues are written to 'load_errors.json' in the output directory
    and None is returned, so the caller can stop before validating a partial
    item set.
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = output_dir

    def handle(self, result: LoadResult) -> list[ValidatableItem] | None:
        """
        @brief
        Return loaded items, or write load_errors.json and return None.

        @details
        A failure to write the report is logged but not raised.
        """
        # (1) Success path
        if result.success:
            logger.info("PostLoad: %d item(s) ready for validation.", result.kept_rows)
            return result.items

        # (2) Failure path
        self.output_dir.mkdir(parents=True, exist_ok=True)
        out_path = self.output_dir / "load_errors.json"

        try:
            with out_path.open("w", encoding="utf-8") as f:
                json.dump(
                    {"total_rows": result.total_rows, "issues": result.errors},
                    f,
                    ensure_ascii=False,
                    indent=2,
                )
            logger.error(
                "PostLoad: input validation failed, %d issue(s). See %s",
                len(result.errors),
                out_path,
            )
        except OSError as e:
            logger.error("PostLoad: failed to write error report: %s", e)

        return None
