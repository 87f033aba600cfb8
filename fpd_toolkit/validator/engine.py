"""Validation engine.

Runs every rule concurrently against a project tree, collects findings into a
:class:`ValidationReport` and, when asked, applies the auto-fixes one after
the other once all rules are done.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from fpd_toolkit.config import ToolkitConfig
from fpd_toolkit.errors import ConfigurationError, ToolkitError
from fpd_toolkit.scaffolder.generator import render_plan
from fpd_toolkit.scaffolder.materializer import (
    ExistingPolicy,
    FileSystemMaterializer,
    Materializer,
    materialize_plan,
)
from fpd_toolkit.scaffolder.templates import TemplateRenderer
from fpd_toolkit.utils import LOGGER_NAME, console as default_console
from fpd_toolkit.validator.models import (
    Finding,
    Rating,
    RuleCategory,
    Severity,
    ValidationReport,
)
from fpd_toolkit.validator.rules import RULES, Rule, RuleContext, RuleOutcome, build_context

logger = logging.getLogger(f"{LOGGER_NAME}.validator")

_RATING_STYLE = {
    Rating.EXCELLENT: "green",
    Rating.GOOD: "yellow",
    Rating.NEEDS_WORK: "red",
}


class PackageValidator:
    """Validates a Flutter/Dart project tree against the quality rubric.

    Usage::

        validator = PackageValidator()
        report = await validator.validate("./geo_sensor", strict=True)
        validator.print_report(report)
    """

    def __init__(
        self,
        config: Optional[ToolkitConfig] = None,
        materializer: Optional[Materializer] = None,
    ) -> None:
        self.config = config or ToolkitConfig()
        self.materializer = materializer or FileSystemMaterializer()
        self.renderer = TemplateRenderer(strict=self.config.strict_templates)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def validate(
        self,
        root: str | Path,
        *,
        strict: bool = False,
        auto_fix: bool = False,
    ) -> ValidationReport:
        """Validate the project under *root*.

        Raises:
            ConfigurationError: *root* is not a directory.
            MaterializeError: An auto-fix write failed.
        """
        root = Path(root)
        if not root.is_dir():
            raise ConfigurationError(f"Not a directory: {root}")

        ctx = await asyncio.to_thread(
            build_context, root, strict, self.materializer, self.config
        )
        outcomes = await asyncio.gather(
            *(self._run_rule(category, rule, ctx) for category, rule in RULES)
        )

        report = ValidationReport(
            root=str(root),
            strict=strict,
            auto_fix=auto_fix,
            project_kind=ctx.kind if ctx.metadata is not None else None,
            project_name=ctx.name,
            findings=[f for o in outcomes for f in o.findings],
            passed=[p for o in outcomes for p in o.passed],
        )
        logger.debug(
            "%s: %d errors, %d warnings, score %d",
            root, report.error_count, report.warning_count, report.score,
        )

        if auto_fix:
            report.files_written, report.fix_errors = await self._apply_fixes(root, outcomes)
        return report

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _run_rule(
        self, category: RuleCategory, rule: Rule, ctx: RuleContext
    ) -> RuleOutcome:
        """Run one rule in a worker thread, turning a crash into a finding."""
        try:
            return await asyncio.to_thread(rule, ctx)
        except Exception as exc:
            logger.debug("rule %s failed", category.value, exc_info=True)
            return RuleOutcome(
                findings=[
                    Finding(
                        category=category,
                        severity=Severity.ERROR,
                        message=f"{category.title} check failed: {exc}",
                        subject_path=".",
                    )
                ]
            )

    async def _apply_fixes(
        self, root: Path, outcomes: list[RuleOutcome]
    ) -> tuple[list[str], list[str]]:
        """Apply every fix in turn.  A failing fix is recorded and skipped."""
        written: list[str] = []
        errors: list[str] = []
        for outcome in outcomes:
            for fix in outcome.fixes:
                entries = list(fix.entries)
                try:
                    result = await materialize_plan(
                        entries,
                        root,
                        render_plan(entries, self.renderer),
                        self.materializer,
                        existing=ExistingPolicy.SKIP,
                        max_workers=self.config.max_workers,
                    )
                except ToolkitError as exc:
                    logger.warning("could not fix %s: %s", fix.finding.subject_path, exc)
                    errors.append(f"{fix.finding.subject_path}: {exc}")
                    continue
                logger.debug("fixed %s: %s", fix.finding.subject_path, result.written)
                written.extend(p for p in result.written if p not in written)
        return written, errors

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def print_report(self, report: ValidationReport, console: Optional[Console] = None) -> None:
        """Pretty-print a report: findings table, passed checks and score."""
        console = console or default_console
        kind = report.project_kind.value if report.project_kind else "unknown"
        console.print(
            Panel(
                f"[bold]Package Validation[/bold]\n"
                f"Project: {report.root}\n"
                f"Kind: {kind}\n"
                f"Mode: {'strict' if report.strict else 'standard'}",
                border_style="blue",
            )
        )

        if report.findings:
            table = Table(title="Findings", show_lines=False)
            table.add_column("Category", width=20)
            table.add_column("Severity", width=9)
            table.add_column("Message")
            table.add_column("Path", style="dim")
            table.add_column("Fix", width=4, justify="center")
            for finding in report.findings:
                color = "red" if finding.severity is Severity.ERROR else "yellow"
                table.add_row(
                    finding.category.title,
                    f"[{color}]{finding.severity.value}[/{color}]",
                    finding.message,
                    finding.subject_path,
                    "yes" if finding.auto_fixable else "",
                )
            console.print(table)
        else:
            console.print("[green]No issues found.[/green]")

        if report.passed:
            console.print(f"\n[bold]Passed checks ({len(report.passed)})[/bold]")
            for check in report.passed:
                console.print(f"  [green]✓[/green] {check.message}")

        if report.files_written:
            console.print(f"\n[bold]Auto-fix wrote {len(report.files_written)} path(s)[/bold]")
            for path in report.files_written:
                console.print(f"  [cyan]+[/cyan] {path}")

        if report.fix_errors:
            count = len(report.fix_errors)
            console.print(f"\n[bold red]Auto-fix failed for {count} finding(s)[/bold red]")
            for error in report.fix_errors:
                console.print(f"  [red]x[/red] {error}")

        style = _RATING_STYLE[report.rating]
        console.print(
            f"\n[bold]Score:[/bold] [{style}]{report.score}/130[/{style}] "
            f"{report.rating.badge} {report.rating.value}  |  "
            f"{report.error_count} error(s), {report.warning_count} warning(s)\n"
        )


async def validate_package(
    root: str | Path,
    strict: bool = False,
    auto_fix: bool = False,
    materializer: Optional[Materializer] = None,
    config: Optional[ToolkitConfig] = None,
) -> ValidationReport:
    """Convenience wrapper around :meth:`PackageValidator.validate`."""
    validator = PackageValidator(config=config, materializer=materializer)
    return await validator.validate(root, strict=strict, auto_fix=auto_fix)
