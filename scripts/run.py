# scripts/run.py
from __future__ import annotations

import argparse
import logging
import sys
import time
import traceback
from pathlib import Path
from typing import Any

from rulecheck.dataloader.config_loader import ConfigLoader
from rulecheck.dataloader.items_loader import ItemsLoader
from rulecheck.dataloader.postload_handler import LoadResultHandler
from rulecheck.engine import RuleEngine
from rulecheck.errors import DataError, RulecheckError
from rulecheck.export.report_export import write_validation_report, write_violations_csv
from rulecheck.metrics.logger import write_stats
from rulecheck.metrics.stats import get_violation_stats, schedule_health


def _setup_logging() -> None:
    """
    @brief
    Initializes global logging configuration.

    @details
    Sets the default logging level to INFO and defines a simple console format.
    """
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    @brief
    Parses command-line arguments for the validation run.

    @details
    - config path (YAML with the rule set),
    - input items CSV path (overrides config.items_csv),
    - output directory for generated artifacts.
    """
    parser = argparse.ArgumentParser(
        prog="rulecheck-run",
        description="Validate an items CSV against a rule set: load -> validate -> report",
    )
    parser.add_argument(
        "--config",
        type=str,
        default="config/config.yaml",
        help="Path to config YAML (default: config/config.yaml)",
    )
    parser.add_argument(
        "--input",
        type=str,
        default=None,
        help="Path to items CSV (default: items_csv from config)",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output directory for artifacts (default: output_dir from config)",
    )
    return parser.parse_args(argv)


def run_validation(
    config_path: Path, input_path: Path | None = None, output_dir: Path | None = None
) -> dict[str, Any]:
    """
    @brief
    Executes the validation run end to end.

    @details
    (1) Load configuration (rules) and items.
    (2) Validate items against the enabled rules.
    (3) Write report, stats and violations CSV as configured.
    (4) Return a summary with pass/fail flag and artifact paths.

    @returns
        Dictionary with `passed`, counts, health, and artifact paths.

    @raises
        RulecheckError
            On configuration or data issues.
    """
    t0 = time.perf_counter()

    # (1) Load configuration
    logging.info("Loading config: %s", config_path)
    cfg = ConfigLoader().load(config_path)

    input_path = input_path or (Path(cfg.items_csv) if cfg.items_csv else None)
    if input_path is None:
        raise DataError(
            message="No items CSV given",
            source="scripts.run",
            suggested_action="Pass --input or set items_csv in config.yaml.",
        )
    output_dir = output_dir or Path(cfg.output_dir or "data/output")
    output_dir.mkdir(parents=True, exist_ok=True)

    # (2) Load items
    logging.info("Loading items: %s", input_path)
    load_result = ItemsLoader(timezone=cfg.timezone).load(input_path)
    items = LoadResultHandler(output_dir=output_dir).handle(load_result)
    if items is None:
        load_errors_path = output_dir / "load_errors.json"
        raise DataError(
            message=f"Items load failed, see {load_errors_path.as_posix()}",
            source="scripts.run",
            suggested_action="Fix CSV issues reported in load_errors.json and rerun.",
        )

    # (3) Validate
    engine = RuleEngine(isolate_errors=cfg.isolate_evaluator_errors)
    result = engine.validate_items(items, cfg.rules)
    stats = get_violation_stats(result)
    health = schedule_health(result)
    logging.info(
        "Validation: %d violation(s) [%d error, %d warning, %d info], health=%s (%d)",
        stats.total_violations,
        stats.error_count,
        stats.warning_count,
        stats.info_count,
        health.status,
        health.score,
    )
    for rule_id in result.skipped_rules:
        logging.warning("Rule skipped: %s", rule_id)

    # (4) Export artifacts
    artifacts: dict[str, Path | None] = {"report": None, "stats": None, "violations_csv": None}
    if cfg.report.write_report:
        artifacts["report"] = write_validation_report(result, out_dir=output_dir)
    if cfg.report.write_stats:
        artifacts["stats"] = write_stats(stats, out_dir=output_dir)
    if cfg.report.write_violations_csv:
        artifacts["violations_csv"] = write_violations_csv(
            result, out_path=output_dir / "violations.csv"
        )

    # (5) Pass/fail: errors always fail, warnings only when configured
    passed = stats.error_count == 0 and not (
        cfg.report.fail_on_warnings and stats.warning_count > 0
    )

    logging.info("Run finished in %.2f s", time.perf_counter() - t0)
    return {
        "passed": passed,
        "is_valid": result.is_valid,
        "item_count": result.item_count,
        "rule_count": result.rule_count,
        "total_violations": stats.total_violations,
        "health": health.model_dump(),
        "artifacts": artifacts,
    }


def main(argv: list[str] | None = None) -> int:
    """
    @brief
    CLI entry point.

    @details
    Exit codes:
      0 - no blocking violations
      1 - blocking violations or controlled failure (config/data)
      2 - unexpected crash
    """
    _setup_logging()
    args = _parse_args(argv)

    try:
        summary = run_validation(
            Path(args.config),
            Path(args.input) if args.input else None,
            Path(args.output) if args.output else None,
        )
        written = [name for name, path in summary["artifacts"].items() if path]
        logging.info("Artifacts written: %s", ", ".join(written) or "none")
        return 0 if summary["passed"] else 1

    except RulecheckError as e:
        logging.error(str(e))
        logging.debug("Error details: %s", e.to_dict())
        return 1
    except Exception:
        logging.error("Unexpected error occurred:")
        traceback.print_exc()
        return 2


if __name__ == "__main__":
    sys.exit(main())
