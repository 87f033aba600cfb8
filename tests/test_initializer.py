"""Tests for adding tooling to an existing project (fpd_toolkit.initializer)."""

from __future__ import annotations

import textwrap

import pytest

from fpd_toolkit.errors import ConfigurationError, ParseError
from fpd_toolkit.initializer import PRESERVED_FILES, ProjectInitializer
from fpd_toolkit.scaffolder.models import ProjectKind
from fpd_toolkit.validator.engine import validate_package


pytestmark = pytest.mark.unit

INIT_FILES = [
    "analysis_options.yaml",
    ".github/workflows/ci.yml",
    "README.md",
    "CHANGELOG.md",
    "LICENSE",
    "test/pkg_test.dart",
    ".gitignore",
]


@pytest.fixture
def bare_package(tmp_path, make_tree):
    """A project holding nothing but its metadata file."""
    return make_tree(tmp_path, {"pubspec.yaml": "name: pkg\ndescription: Small helpers.\n"})


class TestInitialize:
    async def test_writes_tooling_files(self, bare_package, config):
        result = await ProjectInitializer(config).initialize(bare_package)

        assert result.project_kind is ProjectKind.PURE_LIBRARY
        assert result.project_name == "pkg"
        assert sorted(result.files) == sorted(INIT_FILES)
        assert result.skipped == []
        for rel in INIT_FILES:
            assert (bare_package / rel).is_file(), rel
        assert "Test Author" in (bare_package / "LICENSE").read_text(encoding="utf-8")
        assert "# pkg" in (bare_package / "README.md").read_text(encoding="utf-8")

    async def test_ci_workflow_keeps_actions_expressions(self, bare_package):
        await ProjectInitializer().initialize(bare_package)
        workflow = (bare_package / ".github/workflows/ci.yml").read_text(encoding="utf-8")
        assert "${{ matrix.os }}" in workflow
        assert "dart pub get" in workflow

    async def test_existing_files_are_kept(self, bare_package, make_tree):
        make_tree(bare_package, {"README.md": "# mine\n"})
        result = await ProjectInitializer().initialize(bare_package)
        assert result.skipped == ["README.md"]
        assert "README.md" not in result.files
        assert (bare_package / "README.md").read_text(encoding="utf-8") == "# mine\n"

    async def test_force_never_replaces_changelog_or_license(self, bare_package, make_tree):
        make_tree(
            bare_package,
            {"README.md": "# mine\n", "CHANGELOG.md": "# history\n", "LICENSE": "Apache\n"},
        )
        result = await ProjectInitializer().initialize(bare_package, force=True)

        assert "README.md" in result.files
        assert sorted(result.skipped) == sorted(PRESERVED_FILES)
        assert (bare_package / "README.md").read_text(encoding="utf-8") != "# mine\n"
        assert (bare_package / "CHANGELOG.md").read_text(encoding="utf-8") == "# history\n"
        assert (bare_package / "LICENSE").read_text(encoding="utf-8") == "Apache\n"

    async def test_switches(self, bare_package):
        result = await ProjectInitializer().initialize(
            bare_package, analysis=False, ci=False, docs=False
        )
        assert sorted(result.files) == [".gitignore", "test/pkg_test.dart"]
        assert not (bare_package / ".github").exists()

    async def test_invalid_name_gets_only_a_test_directory(self, tmp_path, make_tree):
        make_tree(tmp_path, {"pubspec.yaml": "name: Bad-Name\n"})
        result = await ProjectInitializer().initialize(tmp_path, docs=False)
        assert result.project_name is None
        assert (tmp_path / "test").is_dir()
        assert list((tmp_path / "test").iterdir()) == []

    async def test_plugin_kind_is_detected(self, tmp_path, make_tree):
        make_tree(
            tmp_path,
            {
                "pubspec.yaml": textwrap.dedent("""\
                    name: geo
                    flutter:
                      plugin:
                        platforms:
                          ios:
                            pluginClass: SwiftGeoPlugin
                    """),
            },
        )
        result = await ProjectInitializer().initialize(tmp_path)
        assert result.project_kind is ProjectKind.LIBRARY_COMPONENT
        workflow = (tmp_path / ".github/workflows/ci.yml").read_text(encoding="utf-8")
        assert "flutter pub get" in workflow

    async def test_result_validates_without_file_findings(self, bare_package):
        await ProjectInitializer().initialize(bare_package)
        report = await validate_package(bare_package)
        paths = {f.subject_path for f in report.findings}
        assert paths.isdisjoint(INIT_FILES)


class TestPlanErrors:
    async def test_missing_metadata(self, tmp_path):
        with pytest.raises(ConfigurationError, match="No pubspec.yaml"):
            await ProjectInitializer().initialize(tmp_path)
        assert list(tmp_path.iterdir()) == []

    async def test_not_a_directory(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Not a directory"):
            await ProjectInitializer().initialize(tmp_path / "missing")

    async def test_unparseable_metadata(self, tmp_path, make_tree):
        make_tree(tmp_path, {"pubspec.yaml": "name: [oops"})
        with pytest.raises(ParseError):
            await ProjectInitializer().initialize(tmp_path)
        assert [p.name for p in tmp_path.iterdir()] == ["pubspec.yaml"]

    def test_plan_is_pure(self, bare_package):
        ctx, entries = ProjectInitializer().plan(bare_package, ci=False)
        assert ctx.name == "pkg"
        assert ".github/workflows/ci.yml" not in {e.path for e in entries}
        assert [p.name for p in bare_package.iterdir()] == ["pubspec.yaml"]
