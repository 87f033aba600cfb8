"""Validation report writer.

Markdown reports are rendered with Jinja2 from ``templates/report.md.j2``;
JSON reports are the pydantic dump of the :class:`ValidationReport`.
"""

from __future__ import annotations

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from fpd_toolkit.errors import ConfigurationError, MaterializeError
from fpd_toolkit.validator.models import RuleCategory, ValidationReport

_TEMPLATE_DIR = Path(__file__).parent / "templates"

_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=select_autoescape([]),
    keep_trailing_newline=True,
    trim_blocks=True,
    lstrip_blocks=True,
)


def render_markdown_report(report: ValidationReport) -> str:
    template = _env.get_template("report.md.j2")
    return template.render(report=report, categories=list(RuleCategory))


def write_report(report: ValidationReport, path: str | Path) -> Path:
    """Write *report* to *path* as Markdown (``.md``) or JSON (``.json``).

    Raises:
        ConfigurationError: Unsupported file extension.
        MaterializeError: The file could not be written.
    """
    target = Path(path)
    suffix = target.suffix.lower()
    if suffix in (".md", ".markdown"):
        content = render_markdown_report(report)
    elif suffix == ".json":
        content = report.model_dump_json(indent=2)
    else:
        raise ConfigurationError(
            f"Unsupported report format '{target.suffix}'. Use .md or .json"
        )
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise MaterializeError(target, exc.strerror or str(exc)) from exc
    return target
