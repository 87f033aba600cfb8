"""Pydantic v2 models for validation findings and reports."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from fpd_toolkit.scaffolder.models import ProjectKind


SCORE_CEILING = 130
ERROR_PENALTY = 20
WARNING_PENALTY = 5


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Severity(str, enum.Enum):
    ERROR = "error"
    WARNING = "warning"


class RuleCategory(str, enum.Enum):
    """Rule categories, declared in report order."""

    REQUIRED_FILES = "required-files"
    METADATA = "metadata"
    VERSION = "version"
    PUBLISH = "publish"
    STRUCTURE = "structure"
    DOCUMENTATION = "documentation"
    LINT = "lint"

    @property
    def title(self) -> str:
        return _CATEGORY_TITLES[self]


_CATEGORY_TITLES = {
    RuleCategory.REQUIRED_FILES: "Required files",
    RuleCategory.METADATA: "Metadata fields",
    RuleCategory.VERSION: "Version format",
    RuleCategory.PUBLISH: "Publish guard",
    RuleCategory.STRUCTURE: "Directory structure",
    RuleCategory.DOCUMENTATION: "Documentation",
    RuleCategory.LINT: "Lint configuration",
}


class Rating(str, enum.Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    NEEDS_WORK = "needs work"

    @property
    def badge(self) -> str:
        return {"excellent": "🟢", "good": "🟡", "needs work": "🔴"}[self.value]


# ---------------------------------------------------------------------------
# Findings
# ---------------------------------------------------------------------------


class Finding(BaseModel):
    """One reported validation issue."""

    model_config = ConfigDict(frozen=True)

    category: RuleCategory
    severity: Severity
    message: str
    subject_path: str = Field(..., description="Path relative to the project root")
    auto_fixable: bool = False


class PassedCheck(BaseModel):
    """A check that found nothing to report."""

    model_config = ConfigDict(frozen=True)

    category: RuleCategory
    message: str


def compute_score(findings: Iterable[Finding]) -> int:
    """``130 - 20 * errors - 5 * warnings``, clamped at zero.

    An internal heuristic, not any package registry's real algorithm.
    """
    findings = list(findings)
    errors = sum(1 for f in findings if f.severity is Severity.ERROR)
    warnings = sum(1 for f in findings if f.severity is Severity.WARNING)
    return max(0, SCORE_CEILING - ERROR_PENALTY * errors - WARNING_PENALTY * warnings)


def rate(score: int) -> Rating:
    if score >= 100:
        return Rating.EXCELLENT
    if score >= 80:
        return Rating.GOOD
    return Rating.NEEDS_WORK


# ---------------------------------------------------------------------------
# Report
# ---------------------------------------------------------------------------


class ValidationReport(BaseModel):
    """Aggregated result of one validation run.

    ``findings`` are the issues found before any auto-fix was applied;
    ``files_written`` lists what the auto-fix step created and ``fix_errors``
    the fixes that could not be applied.
    """

    root: str
    strict: bool = False
    auto_fix: bool = False
    project_kind: Optional[ProjectKind] = None
    project_name: Optional[str] = None
    findings: list[Finding] = Field(default_factory=list)
    passed: list[PassedCheck] = Field(default_factory=list)
    files_written: list[str] = Field(default_factory=list)
    fix_errors: list[str] = Field(default_factory=list)
    timestamp: str = Field(default_factory=lambda: datetime.now().isoformat(timespec="seconds"))

    @computed_field  # type: ignore[prop-decorator]
    @property
    def error_count(self) -> int:
        return sum(1 for f in self.findings if f.severity is Severity.ERROR)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def warning_count(self) -> int:
        return sum(1 for f in self.findings if f.severity is Severity.WARNING)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def score(self) -> int:
        return compute_score(self.findings)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def rating(self) -> Rating:
        return rate(self.score)

    def findings_for(self, category: RuleCategory) -> list[Finding]:
        return [f for f in self.findings if f.category is category]

    def passed_for(self, category: RuleCategory) -> list[PassedCheck]:
        return [p for p in self.passed if p.category is category]
