"""Shared pytest fixtures for the FPD Toolkit test suite.

Provides reusable fixtures for:
- Temporary output directories
- Project models for each kind
- A fully valid package tree on disk
- A recording materializer
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from fpd_toolkit.config import ToolkitConfig
from fpd_toolkit.scaffolder.materializer import FileSystemMaterializer
from fpd_toolkit.scaffolder.models import build_project_model


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------


@pytest.fixture
def tmp_output_dir(tmp_path: Path) -> Path:
    """Parent directory that generated projects are written into."""
    out = tmp_path / "out"
    out.mkdir()
    yield out


@pytest.fixture
def config() -> ToolkitConfig:
    return ToolkitConfig(default_author="Test Author", default_organization="dev.fpd")


# ---------------------------------------------------------------------------
# Project models
# ---------------------------------------------------------------------------


@pytest.fixture
def app_model(tmp_output_dir: Path, config: ToolkitConfig):
    return build_project_model(
        "app", "todo_app", output_root=tmp_output_dir / "todo_app", config=config
    )


@pytest.fixture
def plugin_model(tmp_output_dir: Path, config: ToolkitConfig):
    return build_project_model(
        "plugin",
        "geo_sensor",
        platforms="android,ios",
        output_root=tmp_output_dir / "geo_sensor",
        config=config,
    )


@pytest.fixture
def package_model(tmp_output_dir: Path, config: ToolkitConfig):
    return build_project_model(
        "package", "string_utils", output_root=tmp_output_dir / "string_utils", config=config
    )


# ---------------------------------------------------------------------------
# On-disk trees
# ---------------------------------------------------------------------------

VALID_PUBSPEC = textwrap.dedent("""\
    name: sample_pkg
    description: A sample package used by the validator tests.
    version: 1.2.3
    publish_to: none
    homepage: https://example.com/sample_pkg
    repository: https://example.com/sample_pkg.git
    issue_tracker: https://example.com/sample_pkg/issues
    documentation: https://example.com/sample_pkg/docs

    environment:
      sdk: ^3.7.0
    """)

VALID_README = textwrap.dedent("""\
    # sample_pkg

    A sample package used by the validator tests. It has enough text to pass
    the minimum length heuristic.

    ## Usage

    ```dart
    import 'package:sample_pkg/sample_pkg.dart';
    ```
    """)


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Write *files* (relative path -> content) below *root*."""
    for rel, content in files.items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def make_tree():
    """Fixture form of :func:`write_tree` for test modules."""
    return write_tree


@pytest.fixture
def valid_package(tmp_path: Path) -> Path:
    """A package tree that passes every rule, strict mode included."""
    root = tmp_path / "sample_pkg"
    root.mkdir()
    return write_tree(
        root,
        {
            "pubspec.yaml": VALID_PUBSPEC,
            "README.md": VALID_README,
            "CHANGELOG.md": "# Changelog\n\n## 1.2.3\n\n- Initial release\n",
            "LICENSE": "MIT License\n",
            "analysis_options.yaml": "include: package:lints/recommended.yaml\n",
            "lib/sample_pkg.dart": "library sample_pkg;\n",
            "test/sample_pkg_test.dart": "void main() {}\n",
        },
    )


class RecordingMaterializer(FileSystemMaterializer):
    """File-system materializer that remembers every write."""

    def __init__(self) -> None:
        self.writes: list[Path] = []
        self.directories: list[Path] = []

    def ensure_directory(self, path: Path) -> None:
        self.directories.append(Path(path))
        super().ensure_directory(path)

    def write_file(self, path: Path, content: str, overwrite: bool) -> None:
        super().write_file(path, content, overwrite)
        self.writes.append(Path(path))


@pytest.fixture
def recording_materializer() -> RecordingMaterializer:
    return RecordingMaterializer()
