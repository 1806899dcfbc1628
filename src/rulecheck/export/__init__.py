from rulecheck.export.report_export import write_validation_report, write_violations_csv

__all__ = ["write_validation_report", "write_violations_csv"]
