"""Package validation: rule checks, scoring, auto-fix and reports."""

from fpd_toolkit.validator.engine import PackageValidator, validate_package
from fpd_toolkit.validator.models import (
    Finding,
    PassedCheck,
    Rating,
    RuleCategory,
    Severity,
    ValidationReport,
    compute_score,
)
from fpd_toolkit.validator.report import render_markdown_report, write_report

__all__ = [
    "Finding",
    "PackageValidator",
    "PassedCheck",
    "Rating",
    "RuleCategory",
    "Severity",
    "ValidationReport",
    "compute_score",
    "render_markdown_report",
    "validate_package",
    "write_report",
]
