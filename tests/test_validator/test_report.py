"""Tests for the Markdown / JSON report writer."""

from __future__ import annotations

import json

import pytest

from fpd_toolkit.errors import ConfigurationError
from fpd_toolkit.scaffolder.models import ProjectKind
from fpd_toolkit.validator.models import (
    Finding,
    PassedCheck,
    RuleCategory,
    Severity,
    ValidationReport,
)
from fpd_toolkit.validator.report import render_markdown_report, write_report


pytestmark = pytest.mark.unit


@pytest.fixture
def report() -> ValidationReport:
    return ValidationReport(
        root="/tmp/geo_sensor",
        project_kind=ProjectKind.LIBRARY_COMPONENT,
        project_name="geo_sensor",
        findings=[
            Finding(
                category=RuleCategory.REQUIRED_FILES,
                severity=Severity.ERROR,
                message="Missing required file: LICENSE",
                subject_path="LICENSE",
                auto_fixable=True,
            ),
            Finding(
                category=RuleCategory.PUBLISH,
                severity=Severity.WARNING,
                message="No 'publish_to: none' in pubspec.yaml",
                subject_path="pubspec.yaml",
            ),
        ],
        passed=[PassedCheck(category=RuleCategory.LINT, message="analysis_options.yaml present")],
        files_written=["LICENSE"],
    )


class TestValidationReport:
    def test_counts_and_score(self, report):
        assert report.error_count == 1
        assert report.warning_count == 1
        assert report.score == 105
        assert report.rating.value == "excellent"

    def test_filters(self, report):
        assert len(report.findings_for(RuleCategory.PUBLISH)) == 1
        assert report.findings_for(RuleCategory.VERSION) == []
        assert len(report.passed_for(RuleCategory.LINT)) == 1


class TestMarkdown:
    def test_sections(self, report):
        text = render_markdown_report(report)
        assert text.startswith("# Validation Report: geo_sensor")
        assert "**105/130**" in text
        assert "## Required files" in text
        assert "- **ERROR** Missing required file: LICENSE (`LICENSE`) _auto-fixable_" in text
        assert "## Publish guard" in text
        assert "## Lint configuration" in text
        assert "- OK analysis_options.yaml present" in text
        assert "## Auto-fix" in text
        assert "## Version format" not in text

    def test_write_markdown(self, report, tmp_path):
        target = write_report(report, tmp_path / "reports" / "validation.md")
        assert target.read_text(encoding="utf-8").startswith("# Validation Report")


class TestJson:
    def test_write_json(self, report, tmp_path):
        target = write_report(report, tmp_path / "validation.json")
        data = json.loads(target.read_text(encoding="utf-8"))
        assert data["score"] == 105
        assert data["rating"] == "excellent"
        assert data["error_count"] == 1
        assert data["project_kind"] == "library-component"
        assert data["findings"][0]["severity"] == "error"

    def test_unsupported_extension(self, report, tmp_path):
        with pytest.raises(ConfigurationError, match="Unsupported report format"):
            write_report(report, tmp_path / "validation.txt")


class TestFailedFixes:
    def test_section_only_when_present(self, report):
        assert "## Failed fixes" not in render_markdown_report(report)

        failed = report.model_copy(update={"fix_errors": ["lib/x.dart: lib/src: Not a directory"]})
        text = render_markdown_report(failed)
        assert "## Failed fixes" in text
        assert "- lib/x.dart: lib/src: Not a directory" in text

    def test_json_includes_fix_errors(self, report, tmp_path):
        failed = report.model_copy(update={"fix_errors": ["LICENSE: denied"]})
        data = json.loads(write_report(failed, tmp_path / "r.json").read_text(encoding="utf-8"))
        assert data["fix_errors"] == ["LICENSE: denied"]
