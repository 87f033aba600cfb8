"""Scaffold planner: resolve a project model into an ordered file plan.

Everything here is pure.  :func:`plan_project` only returns
:class:`~fpd_toolkit.scaffolder.models.PlanEntry` values; rendering and
writing are left to the generator and the materializer.
"""

from __future__ import annotations

import datetime as _dt
import json
from collections.abc import Iterable, Mapping
from pathlib import PurePosixPath
from typing import Any, Optional

from rich.tree import Tree

from fpd_toolkit.scaffolder.expander import expand
from fpd_toolkit.scaffolder.models import (
    EntryKind,
    PlanEntry,
    Platform,
    ProjectKind,
    platforms_of,
)
from fpd_toolkit.scaffolder.templates import TemplateRenderer, to_camel_case, to_pascal_case
from fpd_toolkit.utils import build_path_tree


SDK_CONSTRAINT = "^3.7.0-0"
FLUTTER_CONSTRAINT = ">=3.24.0"

# Plan paths never pass unresolved tokens through.
_PATH_RENDERER = TemplateRenderer(strict=True)

_INITIAL_VERSIONS: dict[ProjectKind, str] = {
    ProjectKind.APPLICATION: "1.0.0",
    ProjectKind.LIBRARY_COMPONENT: "0.0.1",
    ProjectKind.PURE_LIBRARY: "1.0.0",
}

_FEATURES: dict[ProjectKind, list[str]] = {
    ProjectKind.APPLICATION: [
        "Material 3 starter UI",
        "Widget test for the home page",
        "Continuous integration workflow",
    ],
    ProjectKind.LIBRARY_COMPONENT: [
        "Federated platform interface",
        "Method channel default implementation",
        "Native stubs for every supported platform",
    ],
    ProjectKind.PURE_LIBRARY: [
        "Pure Dart, no Flutter dependency",
        "Public API separated from implementation",
        "Unit tests with package:test",
    ],
}

# Native plugin class names, keyed by platform.
_PLUGIN_CLASS: dict[Platform, str] = {
    Platform.ANDROID: "{{pascal_name}}Plugin",
    Platform.IOS: "Swift{{pascal_name}}Plugin",
    Platform.WEB: "{{pascal_name}}Web",
    Platform.WINDOWS: "{{pascal_name}}PluginCApi",
    Platform.LINUX: "{{pascal_name}}Plugin",
    Platform.MACOS: "{{pascal_name}}Plugin",
}

# Path of the native stub for each platform.  Paths are templates themselves.
_PLUGIN_STUBS: dict[Platform, str] = {
    Platform.ANDROID: "android/src/main/java/{{android_package_path}}/{{pascal_name}}Plugin.java",
    Platform.IOS: "ios/Classes/Swift{{pascal_name}}Plugin.swift",
    Platform.WEB: "lib/{{project_name}}_web.dart",
    Platform.WINDOWS: "windows/{{project_name}}_plugin.cpp",
    Platform.LINUX: "linux/{{project_name}}_plugin.cc",
    Platform.MACOS: "macos/Classes/{{pascal_name}}Plugin.swift",
}

_APP_STUBS: dict[Platform, str] = {
    Platform.ANDROID: "android/app/src/main/kotlin/{{android_package_path}}/MainActivity.kt",
    Platform.IOS: "ios/Runner/AppDelegate.swift",
    Platform.WEB: "web/index.html",
    Platform.WINDOWS: "windows/runner/main.cpp",
    Platform.LINUX: "linux/main.cc",
    Platform.MACOS: "macos/Runner/AppDelegate.swift",
}

_COMMON_FILES: list[tuple[str, str]] = [
    ("README.md", "docs/readme"),
    ("CHANGELOG.md", "docs/changelog"),
    ("LICENSE", "docs/license_mit"),
    ("analysis_options.yaml", "config/analysis_options"),
    (".gitignore", "config/gitignore"),
    (".github/workflows/ci.yml", "config/ci_workflow"),
]

_PUBSPEC_TEMPLATES: dict[ProjectKind, str] = {
    ProjectKind.APPLICATION: "pubspec/app",
    ProjectKind.LIBRARY_COMPONENT: "pubspec/plugin",
    ProjectKind.PURE_LIBRARY: "pubspec/package",
}


# ---------------------------------------------------------------------------
# Bindings
# ---------------------------------------------------------------------------


def _platform_record(platform: Platform, base: Mapping[str, Any]) -> dict[str, Any]:
    record: dict[str, Any] = {p.value: p is platform for p in Platform}
    record["platform"] = platform.value
    record["plugin_class"] = expand(_PLUGIN_CLASS[platform], base)
    record["package"] = base["android_package"] if platform is Platform.ANDROID else ""
    record["file_name"] = f"{base['project_name']}_web.dart" if platform is Platform.WEB else ""
    return record


def build_bindings(model: Any, today: Optional[_dt.date] = None) -> dict[str, Any]:
    """Compute the binding context shared by every template of *model*.

    Args:
        model: A project variant from :mod:`fpd_toolkit.scaffolder.models`.
        today: Date stamped into the changelog and licence; defaults to today.
    """
    today = today or _dt.date.today()
    kind: ProjectKind = model.kind
    name: str = model.name
    pascal = to_pascal_case(name)
    is_app = kind is ProjectKind.APPLICATION
    is_plugin = kind is ProjectKind.LIBRARY_COMPONENT
    is_package = kind is ProjectKind.PURE_LIBRARY
    platforms = platforms_of(model)
    android_package = f"{model.organization}.{name}"
    repository = f"https://github.com/yourorg/{name}"

    bindings: dict[str, Any] = {
        "project_name": name,
        "pascal_name": pascal,
        "camel_name": to_camel_case(name),
        "upper_name": name.upper(),
        "description": model.description,
        "description_yaml": json.dumps(model.description, ensure_ascii=False),
        "author": model.author,
        "organization": model.organization,
        "version": _INITIAL_VERSIONS[kind],
        "year": str(today.year),
        "date": today.isoformat(),
        "kind_label": kind.label,
        "is_app": is_app,
        "is_plugin": is_plugin,
        "is_package": is_package,
        "is_dart": is_package,
        "is_flutter": not is_package,
        "is_library": not is_app,
        "has_web": Platform.WEB in platforms,
        "has_assets": is_app,
        "assets": [{"path": "assets/images/"}] if is_app else [],
        "homepage": repository,
        "repository": repository,
        "issue_tracker": f"{repository}/issues",
        "documentation": f"https://pub.dev/documentation/{name}/latest/",
        "sdk_constraint": SDK_CONSTRAINT,
        "flutter_constraint": FLUTTER_CONSTRAINT,
        "lints_include": "lints/recommended.yaml" if is_package else "flutter_lints/flutter.yaml",
        "pub_command": "dart" if is_package else "flutter",
        "android_package": android_package,
        "android_package_path": android_package.replace(".", "/"),
        "features": [{"feature": f} for f in _FEATURES[kind]],
        "dependencies": [],
        "dev_dependencies": [],
        "exports": [{"export": f"src/{name}_base.dart"}] if is_package else [],
    }
    bindings["platforms"] = [_platform_record(p, bindings) for p in platforms]
    bindings["usage_example"] = _usage_example(kind, name, pascal)
    return bindings


def _usage_example(kind: ProjectKind, name: str, pascal: str) -> str:
    if kind is ProjectKind.APPLICATION:
        return f"// Start the app\nvoid main() => runApp(const {pascal}App());"
    if kind is ProjectKind.LIBRARY_COMPONENT:
        return (
            f"import 'package:{name}/{name}.dart';\n\n"
            f"final version = await {pascal}().getPlatformVersion();"
        )
    return (
        f"import 'package:{name}/{name}.dart';\n\n"
        f"const instance = {pascal}();\n"
        "print(instance.hello());"
    )


# ---------------------------------------------------------------------------
# Entry helpers
# ---------------------------------------------------------------------------


def expand_path(path_template: str, bindings: Mapping[str, Any]) -> str:
    """Expand a templated relative path such as ``lib/{{project_name}}.dart``.

    Raises:
        TemplateError: A token in the path has no binding.
    """
    return _PATH_RENDERER.render_string(path_template, bindings)


def file_entry(path_template: str, template: str, bindings: Mapping[str, Any]) -> PlanEntry:
    """A file entry whose path is itself expanded against *bindings*."""
    return PlanEntry(
        path=expand_path(path_template, bindings),
        kind=EntryKind.FILE,
        template=template,
        bindings=bindings,
    )


def directory_entry(path: str) -> PlanEntry:
    return PlanEntry(path=path.rstrip("/"), kind=EntryKind.DIRECTORY)


def library_entries(bindings: Mapping[str, Any]) -> list[PlanEntry]:
    """Public library file plus its ``src/<name>_base.dart`` implementation.

    Used for pure packages and for repairing a missing main library file.
    """
    context = dict(bindings)
    context["exports"] = [{"export": f"src/{bindings['project_name']}_base.dart"}]
    return [
        file_entry("lib/{{project_name}}.dart", "dart/library", context),
        file_entry("lib/src/{{project_name}}_base.dart", "dart/base_class", context),
    ]


def plugin_component_entries(bindings: Mapping[str, Any]) -> list[PlanEntry]:
    """Platform interface and method-channel implementation of a plugin."""
    return [
        file_entry(
            "lib/src/{{project_name}}_platform_interface.dart",
            "dart/platform_interface",
            bindings,
        ),
        file_entry(
            "lib/src/{{project_name}}_method_channel.dart",
            "dart/method_channel",
            bindings,
        ),
    ]


def plugin_platform_entry(platform: Platform, bindings: Mapping[str, Any]) -> PlanEntry:
    """Native stub of one plugin platform."""
    return file_entry(
        _PLUGIN_STUBS[platform], f"native/plugin/{platform.value}", bindings
    )


def app_platform_entry(platform: Platform, bindings: Mapping[str, Any]) -> PlanEntry:
    """Runner stub of one application platform."""
    return file_entry(_APP_STUBS[platform], f"native/app/{platform.value}", bindings)


def test_entry(bindings: Mapping[str, Any], *, placeholder: bool = False) -> PlanEntry:
    template = "dart/test_placeholder" if placeholder else "dart/test"
    return file_entry("test/{{project_name}}_test.dart", template, bindings)


def with_directories(
    files: Iterable[PlanEntry], extra_dirs: Iterable[str] = ()
) -> list[PlanEntry]:
    """Prefix *files* with one directory entry per parent they need.

    Directories come first, shallowest first, so that each one is created
    before anything beneath it.
    """
    files = list(files)
    dirs: set[str] = set()
    for raw in [*(e.path for e in files), *(f"{d.rstrip('/')}/_" for d in extra_dirs)]:
        for parent in PurePosixPath(raw).parents:
            if str(parent) != ".":
                dirs.add(str(parent))
    ordered = sorted(dirs, key=lambda d: (d.count("/"), d))
    return [directory_entry(d) for d in ordered] + files


def init_entries(
    bindings: Mapping[str, Any],
    *,
    analysis: bool = True,
    ci: bool = True,
    docs: bool = True,
    tests: bool = True,
    has_name: bool = True,
) -> list[PlanEntry]:
    """Files that bring an existing project up to the toolkit's conventions.

    The test placeholder needs a real package name; without one only the
    ``test/`` directory is planned.
    """
    files: list[PlanEntry] = []
    extra_dirs: list[str] = []
    if analysis:
        files.append(file_entry("analysis_options.yaml", "config/analysis_options", bindings))
    if ci:
        files.append(file_entry(".github/workflows/ci.yml", "config/ci_workflow", bindings))
    if docs:
        files.append(file_entry("README.md", "docs/readme", bindings))
        files.append(file_entry("CHANGELOG.md", "docs/changelog", bindings))
        files.append(file_entry("LICENSE", "docs/license_mit", bindings))
    if tests:
        if has_name:
            files.append(test_entry(bindings, placeholder=True))
        else:
            extra_dirs.append("test")
    files.append(file_entry(".gitignore", "config/gitignore", bindings))
    return with_directories(files, extra_dirs=extra_dirs)


# ---------------------------------------------------------------------------
# Plans per kind
# ---------------------------------------------------------------------------


def _common_entries(kind: ProjectKind, bindings: Mapping[str, Any]) -> list[PlanEntry]:
    entries = [file_entry("pubspec.yaml", _PUBSPEC_TEMPLATES[kind], bindings)]
    entries.extend(file_entry(path, template, bindings) for path, template in _COMMON_FILES)
    return entries


def _plan_application(model: Any, bindings: Mapping[str, Any]) -> list[PlanEntry]:
    files = _common_entries(ProjectKind.APPLICATION, bindings)
    files.append(file_entry("lib/main.dart", "dart/app_main", bindings))
    files.append(file_entry("lib/{{project_name}}.dart", "dart/app_library", bindings))
    files.append(test_entry(bindings))
    files.extend(app_platform_entry(p, bindings) for p in platforms_of(model))
    return with_directories(files, extra_dirs=["assets/images"])


def _plan_plugin(model: Any, bindings: Mapping[str, Any]) -> list[PlanEntry]:
    files = _common_entries(ProjectKind.LIBRARY_COMPONENT, bindings)
    files.append(file_entry("lib/{{project_name}}.dart", "dart/plugin_library", bindings))
    files.extend(plugin_component_entries(bindings))
    files.append(test_entry(bindings))
    files.append(file_entry("example/pubspec.yaml", "pubspec/example", bindings))
    files.append(file_entry("example/lib/main.dart", "example/plugin_main", bindings))
    files.append(file_entry("example/README.md", "example/plugin_readme", bindings))
    files.extend(plugin_platform_entry(p, bindings) for p in platforms_of(model))
    return with_directories(files)


def _plan_package(model: Any, bindings: Mapping[str, Any]) -> list[PlanEntry]:
    files = _common_entries(ProjectKind.PURE_LIBRARY, bindings)
    files.extend(library_entries(bindings))
    files.append(test_entry(bindings))
    files.append(
        file_entry("example/{{project_name}}_example.dart", "example/package_main", bindings)
    )
    return with_directories(files)


_PLANNERS = {
    ProjectKind.APPLICATION: _plan_application,
    ProjectKind.LIBRARY_COMPONENT: _plan_plugin,
    ProjectKind.PURE_LIBRARY: _plan_package,
}


def plan_project(model: Any, today: Optional[_dt.date] = None) -> list[PlanEntry]:
    """Return the ordered plan of directories and files for *model*.

    Raises:
        ConfigurationError: If the model's kind is not a known project kind.
    """
    kind = ProjectKind.parse(model.kind)
    bindings = build_bindings(model, today)
    return _PLANNERS[kind](model, bindings)


def describe_plan(model: Any, entries: Optional[list[PlanEntry]] = None) -> Tree:
    """Render a plan as a Rich tree (used by ``--dry-run`` and ``templates show``)."""
    entries = entries if entries is not None else plan_project(model)
    paths = [e.path + "/" if e.is_directory else e.path for e in entries]
    return build_path_tree(model.name, paths)
