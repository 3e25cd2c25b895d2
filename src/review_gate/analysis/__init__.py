"""Analysis report input for Review Gate."""

from review_gate.analysis.report import ReportError, load_report, parse_report

__all__ = [
    "ReportError",
    "load_report",
    "parse_report",
]
