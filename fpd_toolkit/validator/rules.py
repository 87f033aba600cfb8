"""Validation rules.

Each rule is a plain function taking the shared :class:`RuleContext` and
returning a :class:`RuleOutcome`.  Rules never depend on each other and only
read from the file system; corrective writes are described as plan entries
and applied by the engine afterwards.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from fpd_toolkit.config import ToolkitConfig
from fpd_toolkit.errors import ConfigurationError, MaterializeError, ParseError
from fpd_toolkit.scaffolder.materializer import Materializer
from fpd_toolkit.scaffolder.models import (
    PlanEntry,
    Platform,
    ProjectKind,
    build_project_model,
    is_valid_organization,
    is_valid_package_name,
)
from fpd_toolkit.scaffolder.planner import (
    build_bindings,
    directory_entry,
    expand_path,
    file_entry,
    library_entries,
    plugin_component_entries,
    plugin_platform_entry,
    test_entry,
)
from fpd_toolkit.utils import LOGGER_NAME
from fpd_toolkit.validator.models import Finding, PassedCheck, RuleCategory, Severity

logger = logging.getLogger(f"{LOGGER_NAME}.validator")

METADATA_FILE = "pubspec.yaml"
README_FILE = "README.md"
LINT_FILE = "analysis_options.yaml"

REQUIRED_FILES: list[tuple[str, Optional[str]]] = [
    (METADATA_FILE, None),
    (README_FILE, "docs/readme"),
    ("CHANGELOG.md", "docs/changelog"),
    ("LICENSE", "docs/license_mit"),
]

REQUIRED_FIELDS = ["name", "description", "version", "environment"]
STRICT_FIELDS = ["homepage", "repository", "issue_tracker", "documentation"]

VERSION_RE = re.compile(r"^\d+\.\d+\.\d+(\+\d+)?(-[\w.-]+)?$")

MIN_README_LENGTH = 100

# Fallback identifier for templates when the metadata has no usable name.
FALLBACK_NAME = "package_name"

# Where each platform's native subtree lives in a plugin.
PLUGIN_SUBTREES: dict[Platform, str] = {
    Platform.ANDROID: "android",
    Platform.IOS: "ios",
    Platform.WEB: "lib/{{project_name}}_web.dart",
    Platform.WINDOWS: "windows",
    Platform.LINUX: "linux",
    Platform.MACOS: "macos",
}


# ---------------------------------------------------------------------------
# Context and outcome
# ---------------------------------------------------------------------------


@dataclass
class RuleContext:
    """Everything the rules need to know about the tree being validated."""

    root: Path
    strict: bool
    materializer: Materializer
    metadata: Optional[dict[str, Any]] = None
    metadata_error: Optional[str] = None
    name: Optional[str] = None
    kind: ProjectKind = ProjectKind.PURE_LIBRARY
    platforms: tuple[Platform, ...] = ()
    bindings: dict[str, Any] = field(default_factory=dict)

    def exists(self, rel: str) -> bool:
        return self.materializer.exists(self.root / rel)

    def read(self, rel: str) -> str:
        return self.materializer.read_file(self.root / rel)

    def is_dir(self, rel: str) -> bool:
        return self.materializer.is_directory(self.root / rel)

    def has_content(self, rel: str) -> bool:
        """A file, or a directory with at least one entry."""
        if not self.exists(rel):
            return False
        if not self.is_dir(rel):
            return True
        return bool(self.materializer.list_directory(self.root / rel))


@dataclass(frozen=True)
class Fix:
    """The corrective plan for one auto-fixable finding."""

    finding: Finding
    entries: tuple[PlanEntry, ...]


@dataclass
class RuleOutcome:
    findings: list[Finding] = field(default_factory=list)
    passed: list[PassedCheck] = field(default_factory=list)
    fixes: list[Fix] = field(default_factory=list)

    def fail(
        self,
        category: RuleCategory,
        severity: Severity,
        message: str,
        subject_path: str,
        fix: Optional[list[PlanEntry]] = None,
    ) -> None:
        finding = Finding(
            category=category,
            severity=severity,
            message=message,
            subject_path=subject_path,
            auto_fixable=bool(fix),
        )
        self.findings.append(finding)
        if fix:
            self.fixes.append(Fix(finding, tuple(fix)))

    def ok(self, category: RuleCategory, message: str) -> None:
        self.passed.append(PassedCheck(category=category, message=message))


# ---------------------------------------------------------------------------
# Metadata loading
# ---------------------------------------------------------------------------


def parse_metadata(text: str) -> dict[str, Any]:
    """Parse pubspec text into a mapping.

    Raises:
        ParseError: The text is not YAML, or not a key/value mapping.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ParseError(f"{METADATA_FILE} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ParseError(f"{METADATA_FILE} is not a key/value mapping")
    return data


def declared_platforms(metadata: Mapping[str, Any]) -> tuple[Platform, ...]:
    """Platforms listed under ``flutter.plugin.platforms``, in file order."""
    flutter = metadata.get("flutter")
    plugin = flutter.get("plugin") if isinstance(flutter, Mapping) else None
    platforms = plugin.get("platforms") if isinstance(plugin, Mapping) else None
    if not isinstance(platforms, Mapping):
        return ()
    known = {p.value: p for p in Platform}
    return tuple(known[key] for key in platforms if key in known)


def _organization_from(metadata: Mapping[str, Any], name: str) -> Optional[str]:
    flutter = metadata.get("flutter")
    try:
        package = flutter["plugin"]["platforms"]["android"]["package"]
    except (KeyError, TypeError):
        return None
    if not isinstance(package, str):
        return None
    org = package[: -len(name) - 1] if package.endswith(f".{name}") else package
    return org if is_valid_organization(org) else None


def build_context(
    root: Path,
    strict: bool,
    materializer: Materializer,
    config: Optional[ToolkitConfig] = None,
) -> RuleContext:
    """Read the metadata once and derive the template bindings for fixes."""
    config = config or ToolkitConfig()
    ctx = RuleContext(root=root, strict=strict, materializer=materializer)

    if ctx.exists(METADATA_FILE):
        try:
            ctx.metadata = parse_metadata(ctx.read(METADATA_FILE))
        except (ParseError, MaterializeError) as exc:
            ctx.metadata_error = str(exc)
            logger.debug("metadata unreadable: %s", exc)

    metadata = ctx.metadata or {}
    ctx.kind = ProjectKind.from_metadata(metadata)
    ctx.platforms = declared_platforms(metadata)
    raw_name = metadata.get("name")
    if isinstance(raw_name, str) and is_valid_package_name(raw_name):
        ctx.name = raw_name

    description = metadata.get("description")
    name = ctx.name or FALLBACK_NAME
    try:
        model = build_project_model(
            ctx.kind,
            name,
            description=description if isinstance(description, str) and description else None,
            organization=_organization_from(metadata, name),
            platforms=ctx.platforms or None,
            output_root=root,
            config=config,
        )
    except ConfigurationError as exc:
        logger.debug("falling back to default bindings: %s", exc)
        model = build_project_model(ctx.kind, name, output_root=root)
    ctx.bindings = build_bindings(model)
    return ctx


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------


def check_required_files(ctx: RuleContext) -> RuleOutcome:
    out = RuleOutcome()
    cat = RuleCategory.REQUIRED_FILES
    for path, template in REQUIRED_FILES:
        if ctx.exists(path):
            out.ok(cat, f"{path} present")
            continue
        fix = [file_entry(path, template, ctx.bindings)] if template else None
        out.fail(cat, Severity.ERROR, f"Missing required file: {path}", path, fix)
    return out


def check_metadata_fields(ctx: RuleContext) -> RuleOutcome:
    out = RuleOutcome()
    cat = RuleCategory.METADATA
    if ctx.metadata_error is not None:
        out.fail(cat, Severity.ERROR, ctx.metadata_error, METADATA_FILE)
        return out
    if ctx.metadata is None:
        return out

    for key in REQUIRED_FIELDS:
        if ctx.metadata.get(key) in (None, ""):
            out.fail(
                cat, Severity.ERROR, f"Missing required field '{key}' in {METADATA_FILE}",
                METADATA_FILE,
            )
        else:
            out.ok(cat, f"'{key}' field present")

    if ctx.strict:
        for key in STRICT_FIELDS:
            if ctx.metadata.get(key) in (None, ""):
                out.fail(
                    cat, Severity.WARNING,
                    f"Missing recommended field '{key}' in {METADATA_FILE}",
                    METADATA_FILE,
                )
            else:
                out.ok(cat, f"'{key}' field present")
    return out


def check_version_format(ctx: RuleContext) -> RuleOutcome:
    out = RuleOutcome()
    cat = RuleCategory.VERSION
    version = (ctx.metadata or {}).get("version")
    if version is None:
        return out
    if VERSION_RE.match(str(version)):
        out.ok(cat, f"version {version} follows semantic versioning")
    else:
        out.fail(
            cat, Severity.WARNING,
            f"Version '{version}' does not follow semantic versioning (x.y.z)",
            METADATA_FILE,
        )
    return out


def check_publish_guard(ctx: RuleContext) -> RuleOutcome:
    out = RuleOutcome()
    cat = RuleCategory.PUBLISH
    if ctx.metadata is None:
        return out
    if str(ctx.metadata.get("publish_to", "")).strip() == "none":
        out.ok(cat, "publish_to: none is set")
    else:
        out.fail(
            cat, Severity.WARNING,
            "No 'publish_to: none' in pubspec.yaml; the package can be published by accident",
            METADATA_FILE,
        )
    return out


def check_directory_structure(ctx: RuleContext) -> RuleOutcome:
    out = RuleOutcome()
    cat = RuleCategory.STRUCTURE
    b = ctx.bindings

    if ctx.is_dir("lib"):
        out.ok(cat, "lib/ directory present")
    elif ctx.exists("lib"):
        out.fail(cat, Severity.ERROR, "lib exists but is not a directory", "lib")
    else:
        out.fail(cat, Severity.ERROR, "Missing lib/ directory", "lib", [directory_entry("lib")])

    # Checked even without lib/ so that a single fix pass repairs both.
    if ctx.name is not None:
        main_file = f"lib/{ctx.name}.dart"
        if ctx.exists(main_file):
            out.ok(cat, f"{main_file} present")
        else:
            out.fail(
                cat, Severity.ERROR, f"Missing main library file: {main_file}",
                main_file, library_entries(b),
            )

    if ctx.is_dir("test"):
        out.ok(cat, "test/ directory present")
    elif ctx.exists("test"):
        out.fail(cat, Severity.WARNING, "test exists but is not a directory", "test")
    else:
        fix = None
        if ctx.name is not None:
            fix = [directory_entry("test"), test_entry(b, placeholder=True)]
        out.fail(cat, Severity.WARNING, "Missing test/ directory", "test", fix)

    if ctx.kind is ProjectKind.LIBRARY_COMPONENT and ctx.name is not None:
        _check_plugin_components(ctx, out)
    return out


def _check_plugin_components(ctx: RuleContext, out: RuleOutcome) -> None:
    cat = RuleCategory.STRUCTURE
    for entry, label in zip(
        plugin_component_entries(ctx.bindings),
        ["platform interface", "method channel implementation"],
    ):
        if ctx.exists(entry.path):
            out.ok(cat, f"{label} present ({entry.path})")
        else:
            out.fail(
                cat, Severity.ERROR, f"Missing plugin {label}: {entry.path}",
                entry.path, [entry],
            )

    for platform in ctx.platforms:
        subtree = expand_path(PLUGIN_SUBTREES[platform], ctx.bindings)
        if ctx.has_content(subtree):
            out.ok(cat, f"{platform.value} platform present ({subtree})")
        else:
            out.fail(
                cat, Severity.WARNING,
                f"Missing native code for declared platform '{platform.value}': {subtree}",
                subtree, [plugin_platform_entry(platform, ctx.bindings)],
            )


def check_documentation(ctx: RuleContext) -> RuleOutcome:
    out = RuleOutcome()
    cat = RuleCategory.DOCUMENTATION
    if not ctx.exists(README_FILE):
        return out
    readme = ctx.read(README_FILE)

    if len(readme) < MIN_README_LENGTH:
        out.fail(
            cat, Severity.WARNING,
            f"README.md is too short ({len(readme)} characters, minimum {MIN_README_LENGTH})",
            README_FILE,
        )
    else:
        out.ok(cat, "README.md has substantial content")

    if "#" not in readme:
        out.fail(cat, Severity.WARNING, "README.md has no section headings", README_FILE)
    else:
        out.ok(cat, "README.md has section headings")

    if ctx.strict:
        if "```" not in readme:
            out.fail(cat, Severity.WARNING, "README.md has no code examples", README_FILE)
        else:
            out.ok(cat, "README.md has code examples")
    return out


def check_lint_configuration(ctx: RuleContext) -> RuleOutcome:
    out = RuleOutcome()
    cat = RuleCategory.LINT
    if ctx.exists(LINT_FILE):
        out.ok(cat, f"{LINT_FILE} present")
    else:
        out.fail(
            cat, Severity.WARNING, f"Missing {LINT_FILE}", LINT_FILE,
            [file_entry(LINT_FILE, "config/analysis_options", ctx.bindings)],
        )
    return out


Rule = Callable[[RuleContext], RuleOutcome]

RULES: list[tuple[RuleCategory, Rule]] = [
    (RuleCategory.REQUIRED_FILES, check_required_files),
    (RuleCategory.METADATA, check_metadata_fields),
    (RuleCategory.VERSION, check_version_format),
    (RuleCategory.PUBLISH, check_publish_guard),
    (RuleCategory.STRUCTURE, check_directory_structure),
    (RuleCategory.DOCUMENTATION, check_documentation),
    (RuleCategory.LINT, check_lint_configuration),
]
