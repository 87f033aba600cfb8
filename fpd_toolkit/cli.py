"""Command-line interface: ``fpd-toolkit create | init | validate | templates | config``."""

from __future__ import annotations

import argparse
import asyncio
import logging
from pathlib import Path
from typing import Optional, Sequence

from rich.table import Table

from fpd_toolkit import __version__
from fpd_toolkit.config import ToolkitConfig
from fpd_toolkit.errors import ToolkitError
from fpd_toolkit.initializer import ProjectInitializer
from fpd_toolkit.scaffolder.generator import ProjectGenerator
from fpd_toolkit.scaffolder.models import Platform, ProjectKind, build_project_model
from fpd_toolkit.scaffolder.planner import describe_plan
from fpd_toolkit.scaffolder.templates import TemplateRenderer
from fpd_toolkit.utils import (
    LOGGER_NAME,
    configure_logging,
    console,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    print_warning,
)
from fpd_toolkit.validator.engine import PackageValidator
from fpd_toolkit.validator.report import write_report

logger = logging.getLogger(f"{LOGGER_NAME}.cli")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_FINDINGS = 2


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fpd-toolkit",
        description="Scaffold and validate Flutter/Dart packages",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  fpd-toolkit create plugin geo_sensor --platforms android,ios\n"
            "  fpd-toolkit create package my_utils -d 'Handy helpers'\n"
            "  fpd-toolkit init ./existing_app --no-ci\n"
            "  fpd-toolkit validate ./geo_sensor --strict --fix\n"
            "  fpd-toolkit templates show app --platforms web\n"
        ),
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config", default=None, metavar="FILE",
                        help="Load settings from a JSON file (FPD_* variables still win)")

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    create = sub.add_parser("create", help="Create a new app, plugin or package")
    create.add_argument("kind", metavar="kind",
                        help="Project kind: app, plugin or package")
    create.add_argument("name", help="Package name (lowercase_with_underscores)")
    create.add_argument("--description", "-d", default=None, help="Project description")
    create.add_argument("--author", "-a", default=None, help="Author name")
    create.add_argument("--organization", "-o", default=None,
                        help="Reverse-domain organization (default: com.example)")
    create.add_argument("--platforms", "-p", default=None,
                        help="Comma-separated platforms (default: android,ios)")
    create.add_argument("--output", default=None,
                        help="Output directory (default: ./<name>)")
    create.add_argument("--force", "-f", action="store_true",
                        help="Overwrite an existing non-empty directory")
    create.add_argument("--dry-run", action="store_true",
                        help="Print the files that would be created and exit")

    init = sub.add_parser("init", help="Add lint, CI, docs and tests to an existing project")
    init.add_argument("path", nargs="?", default=".", help="Project directory (default: .)")
    init.add_argument("--force", "-f", action="store_true",
                      help="Overwrite existing files (CHANGELOG.md and LICENSE are kept)")
    init.add_argument("--no-analysis", dest="analysis", action="store_false",
                      help="Do not write analysis_options.yaml")
    init.add_argument("--no-ci", dest="ci", action="store_false",
                      help="Do not write the GitHub Actions workflow")
    init.add_argument("--no-docs", dest="docs", action="store_false",
                      help="Do not write README.md, CHANGELOG.md or LICENSE")
    init.add_argument("--no-tests", dest="tests", action="store_false",
                      help="Do not add the test placeholder")

    validate = sub.add_parser("validate", help="Validate a project against the quality rubric")
    validate.add_argument("path", nargs="?", default=".", help="Project directory (default: .)")
    validate.add_argument("--strict", "-s", action="store_true",
                          help="Also check recommended metadata and README code examples")
    validate.add_argument("--fix", "-f", action="store_true",
                          help="Create missing files and directories where possible")
    validate.add_argument("--report", default=None,
                          help="Write the report to FILE (.md or .json)")
    validate.add_argument("--fail-on-error", action="store_true",
                          help="Exit with status 2 when any error is found")

    templates = sub.add_parser("templates", help="Inspect the built-in templates")
    templates_sub = templates.add_subparsers(dest="templates_command", metavar="ACTION")
    templates_sub.add_parser("list", help="List project kinds and templates")
    show = templates_sub.add_parser("show", help="Show the file tree a kind produces")
    show.add_argument("kind", metavar="kind", help="Project kind: app, plugin or package")
    show.add_argument("--platforms", "-p", default=None,
                      help="Comma-separated platforms (default: android,ios)")
    show.add_argument("--name", default="my_project", help="Sample package name")

    config_cmd = sub.add_parser("config", help="Show the effective configuration")
    config_cmd.add_argument("--save", default=None, metavar="FILE",
                            help="Also write it to FILE as JSON")

    return parser


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_create(args: argparse.Namespace, config: ToolkitConfig) -> int:
    model = build_project_model(
        args.kind,
        args.name,
        description=args.description,
        author=args.author,
        organization=args.organization,
        platforms=args.platforms,
        output_root=args.output,
        force=args.force,
        config=config,
    )
    generator = ProjectGenerator(model, config)

    if args.dry_run:
        console.print(describe_plan(model, generator.plan()))
        print_info("[dim]Dry run: nothing was written.[/dim]")
        return EXIT_OK

    result = asyncio.run(generator.generate())
    if result.cancelled:
        print_warning("Creation was cancelled before all files were written")
        return EXIT_FAILURE

    print_success(f"Created {model.kind.label} '{model.name}' in {result.root}")
    summary = {
        "Kind": model.kind.value,
        "Organization": model.organization,
        "Directories": str(len(result.directories)),
        "Files": str(len(result.files)),
    }
    platforms = getattr(model, "platforms", ())
    if platforms:
        summary["Platforms"] = ", ".join(p.value for p in platforms)
    print_summary_table(summary, title="Project")

    pub = "dart" if model.kind is ProjectKind.PURE_LIBRARY else "flutter"
    print_info("Next steps:")
    print_info(f"  cd {result.root}")
    print_info(f"  {pub} pub get")
    print_info("  fpd-toolkit validate .")
    return EXIT_OK


def cmd_init(args: argparse.Namespace, config: ToolkitConfig) -> int:
    initializer = ProjectInitializer(config)
    result = asyncio.run(
        initializer.initialize(
            args.path,
            force=args.force,
            analysis=args.analysis,
            ci=args.ci,
            docs=args.docs,
            tests=args.tests,
        )
    )

    name = result.project_name or "project"
    print_success(f"Initialized {result.project_kind.label} '{name}' in {result.root}")
    summary = {
        "Kind": result.project_kind.value,
        "Written": ", ".join(result.files) or "-",
        "Kept": ", ".join(result.skipped) or "-",
    }
    print_summary_table(summary, title="Init")
    if result.skipped and not args.force:
        print_info("[dim]Existing files were kept; use --force to overwrite them.[/dim]")

    pub = "dart" if result.project_kind is ProjectKind.PURE_LIBRARY else "flutter"
    print_info("Next steps:")
    print_info(f"  {pub} pub get")
    print_info("  fpd-toolkit validate .")
    return EXIT_OK


def cmd_validate(args: argparse.Namespace, config: ToolkitConfig) -> int:
    path = Path(args.path)
    if not path.is_dir():
        print_error(f"Error: not a directory: {path}")
        return EXIT_FAILURE

    validator = PackageValidator(config)
    report = asyncio.run(validator.validate(path, strict=args.strict, auto_fix=args.fix))
    validator.print_report(report)

    if args.report:
        target = write_report(report, args.report)
        print_success(f"Report written to {target}")

    if (args.fail_on_error or config.fail_on_error) and report.error_count:
        return EXIT_FINDINGS
    return EXIT_OK


def cmd_templates(args: argparse.Namespace, config: ToolkitConfig) -> int:
    if args.templates_command == "show":
        model = build_project_model(
            args.kind, args.name, platforms=args.platforms, config=config
        )
        console.print(describe_plan(model))
        return EXIT_OK

    kinds = Table(title="Project kinds", header_style="bold cyan")
    kinds.add_column("Alias")
    kinds.add_column("Kind")
    kinds.add_column("Platforms")
    for kind in ProjectKind:
        platforms = "-" if kind is ProjectKind.PURE_LIBRARY else ", ".join(p.value for p in Platform)
        kinds.add_row(kind.alias, kind.value, platforms)
    console.print(kinds)

    renderer = TemplateRenderer()
    names = Table(title="Templates", header_style="bold cyan")
    names.add_column("Name")
    names.add_column("Variables", style="dim")
    for name in renderer.list_templates():
        names.add_row(name, ", ".join(renderer.variables(name)))
    console.print(names)
    return EXIT_OK


def cmd_config(args: argparse.Namespace, config: ToolkitConfig) -> int:
    summary = {
        key: ", ".join(value) if isinstance(value, list) else str(value)
        for key, value in config.model_dump().items()
    }
    print_summary_table(summary, title="Configuration")
    if args.save:
        target = config.save(Path(args.save))
        print_success(f"Configuration written to {target}")
    return EXIT_OK


_COMMANDS = {
    "create": cmd_create,
    "init": cmd_init,
    "validate": cmd_validate,
    "templates": cmd_templates,
    "config": cmd_config,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """CLI entry point for ``fpd-toolkit`` and ``python -m fpd_toolkit``."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return EXIT_FAILURE

    try:
        base = ToolkitConfig.load(Path(args.config)) if args.config else None
        config = ToolkitConfig.from_env(base)
        logger.debug("configuration: %s", config.model_dump())
        return _COMMANDS[args.command](args, config)
    except ToolkitError as exc:
        print_error(f"Error: {exc}")
        return EXIT_FAILURE


if __name__ == "__main__":
    raise SystemExit(main())
