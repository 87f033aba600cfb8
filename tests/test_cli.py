"""Tests for the command-line interface (fpd_toolkit.cli).

Commands are invoked through ``main(argv)`` and their exit codes checked.
Console output is captured with ``capsys``.
"""

from __future__ import annotations

import json
import os
from unittest.mock import patch

import pytest
import yaml

from fpd_toolkit import __version__
from fpd_toolkit.cli import EXIT_FAILURE, EXIT_FINDINGS, EXIT_OK, build_parser, main


pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def clean_env():
    """Keep FPD_* variables from the developer's shell out of the tests."""
    env = {k: v for k, v in os.environ.items() if not k.startswith("FPD_")}
    with patch.dict(os.environ, env, clear=True):
        yield


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class TestParser:
    def test_create_arguments(self):
        args = build_parser().parse_args(
            ["create", "plugin", "geo", "-p", "web", "-o", "io.acme", "--dry-run"]
        )
        assert args.command == "create"
        assert (args.kind, args.name, args.platforms) == ("plugin", "geo", "web")
        assert args.organization == "io.acme"
        assert args.dry_run is True

    def test_validate_defaults(self):
        args = build_parser().parse_args(["validate"])
        assert args.path == "."
        assert not (args.strict or args.fix or args.fail_on_error)

    def test_init_switches(self):
        args = build_parser().parse_args(["init", "--no-ci", "--no-docs", "-f"])
        assert args.command == "init"
        assert args.path == "."
        assert args.force is True
        assert (args.analysis, args.ci, args.docs, args.tests) == (True, False, False, True)

    def test_global_config_option(self):
        args = build_parser().parse_args(["--config", "fpd.json", "config"])
        assert args.config == "fpd.json"
        assert args.save is None

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_no_command(self):
        assert main([]) == EXIT_FAILURE


# ---------------------------------------------------------------------------
# create
# ---------------------------------------------------------------------------


class TestCreate:
    def test_creates_package(self, tmp_path):
        out = tmp_path / "utils"
        assert main(["create", "package", "utils", "--output", str(out)]) == EXIT_OK
        data = yaml.safe_load((out / "pubspec.yaml").read_text(encoding="utf-8"))
        assert data["name"] == "utils"

    def test_defaults_to_directory_named_after_project(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert main(["create", "app", "my_app", "-a", "Ada"]) == EXIT_OK
        assert (tmp_path / "my_app" / "lib" / "main.dart").is_file()
        assert "Ada" in (tmp_path / "my_app" / "LICENSE").read_text(encoding="utf-8")

    @pytest.mark.parametrize("name", ["", "my-app", "MyApp", "1app", "a@b"])
    def test_invalid_name(self, name, tmp_path, capsys):
        out = tmp_path / "out"
        assert main(["create", "package", name, "--output", str(out)]) == EXIT_FAILURE
        assert not out.exists()
        assert "Invalid package name" in capsys.readouterr().err

    def test_invalid_kind(self, tmp_path, capsys):
        assert main(["create", "widget", "x", "--output", str(tmp_path / "x")]) == EXIT_FAILURE
        assert "Unknown project kind" in capsys.readouterr().err

    def test_invalid_platform(self, tmp_path, capsys):
        argv = ["create", "plugin", "x", "-p", "android,amiga", "--output", str(tmp_path / "x")]
        assert main(argv) == EXIT_FAILURE
        assert "amiga" in capsys.readouterr().err

    def test_existing_output_without_force(self, tmp_path, capsys):
        out = tmp_path / "utils"
        out.mkdir()
        (out / "file.txt").write_text("x", encoding="utf-8")
        assert main(["create", "package", "utils", "--output", str(out)]) == EXIT_FAILURE
        assert "--force" in capsys.readouterr().err
        assert main(["create", "package", "utils", "--output", str(out), "-f"]) == EXIT_OK

    def test_dry_run_writes_nothing(self, tmp_path, capsys):
        out = tmp_path / "geo"
        assert main(["create", "plugin", "geo", "--output", str(out), "--dry-run"]) == EXIT_OK
        assert not out.exists()
        assert "geo_platform_interface.dart" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------


class TestInit:
    def test_adds_tooling(self, tmp_path, capsys):
        (tmp_path / "pubspec.yaml").write_text("name: pkg\n", encoding="utf-8")
        assert main(["init", str(tmp_path)]) == EXIT_OK
        assert (tmp_path / "analysis_options.yaml").is_file()
        assert (tmp_path / ".github/workflows/ci.yml").is_file()
        assert (tmp_path / "test/pkg_test.dart").is_file()
        assert "Initialized" in capsys.readouterr().out

    def test_switches_and_kept_files(self, tmp_path, capsys):
        (tmp_path / "pubspec.yaml").write_text("name: pkg\n", encoding="utf-8")
        (tmp_path / ".gitignore").write_text("build/\n", encoding="utf-8")
        assert main(["init", str(tmp_path), "--no-ci", "--no-tests"]) == EXIT_OK
        assert not (tmp_path / ".github").exists()
        assert not (tmp_path / "test").exists()
        assert (tmp_path / ".gitignore").read_text(encoding="utf-8") == "build/\n"
        assert "--force" in capsys.readouterr().out

    def test_without_metadata(self, tmp_path, capsys):
        assert main(["init", str(tmp_path)]) == EXIT_FAILURE
        assert "No pubspec.yaml" in capsys.readouterr().err
        assert list(tmp_path.iterdir()) == []


# ---------------------------------------------------------------------------
# config
# ---------------------------------------------------------------------------


class TestConfig:
    def test_show(self, capsys):
        assert main(["config"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "default_author" in out
        assert "max_workers" in out

    def test_save_then_load(self, tmp_path):
        saved = tmp_path / "fpd.json"
        with patch.dict(os.environ, {"FPD_AUTHOR": "Grace"}):
            assert main(["config", "--save", str(saved)]) == EXIT_OK
        assert json.loads(saved.read_text(encoding="utf-8"))["default_author"] == "Grace"

        out = tmp_path / "utils"
        argv = ["--config", str(saved), "create", "package", "utils", "--output", str(out)]
        assert main(argv) == EXIT_OK
        assert "Grace" in (out / "LICENSE").read_text(encoding="utf-8")

    def test_environment_overrides_file(self, tmp_path):
        saved = tmp_path / "fpd.json"
        saved.write_text(json.dumps({"default_author": "Grace"}), encoding="utf-8")
        out = tmp_path / "utils"
        argv = ["--config", str(saved), "create", "package", "utils", "--output", str(out)]
        with patch.dict(os.environ, {"FPD_AUTHOR": "Ada"}):
            assert main(argv) == EXIT_OK
        assert "Ada" in (out / "LICENSE").read_text(encoding="utf-8")

    def test_missing_config_file(self, tmp_path, capsys):
        assert main(["--config", str(tmp_path / "nope.json"), "config"]) == EXIT_FAILURE
        assert "Cannot read config file" in capsys.readouterr().err

    def test_invalid_config_file(self, tmp_path, capsys):
        saved = tmp_path / "fpd.json"
        saved.write_text(json.dumps({"max_workers": 0}), encoding="utf-8")
        assert main(["--config", str(saved), "config"]) == EXIT_FAILURE
        assert "Invalid config file" in capsys.readouterr().err

    @pytest.mark.parametrize("value", ["0", "abc"])
    def test_invalid_environment(self, value, tmp_path, capsys):
        with patch.dict(os.environ, {"FPD_MAX_WORKERS": value}):
            assert main(["validate", str(tmp_path)]) == EXIT_FAILURE
        assert "Invalid FPD_* environment setting" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


class TestValidate:
    def test_valid_package(self, valid_package, capsys):
        assert main(["validate", str(valid_package)]) == EXIT_OK
        assert "130/130" in capsys.readouterr().out

    def test_errors_still_exit_zero(self, tmp_path):
        assert main(["validate", str(tmp_path)]) == EXIT_OK

    def test_fail_on_error(self, tmp_path):
        assert main(["validate", str(tmp_path), "--fail-on-error"]) == EXIT_FINDINGS

    def test_fail_on_error_from_env(self, tmp_path):
        with patch.dict(os.environ, {"FPD_FAIL_ON_ERROR": "true"}):
            assert main(["validate", str(tmp_path)]) == EXIT_FINDINGS

    def test_not_a_directory(self, tmp_path, capsys):
        assert main(["validate", str(tmp_path / "missing")]) == EXIT_FAILURE
        assert "not a directory" in capsys.readouterr().err

    def test_failed_fix_still_reports(self, tmp_path, capsys):
        (tmp_path / "pubspec.yaml").write_text("name: pkg\n", encoding="utf-8")
        (tmp_path / "lib").write_text("not a directory", encoding="utf-8")
        assert main(["validate", str(tmp_path), "--fix"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "/130" in out
        assert "Auto-fix failed" in out
        assert (tmp_path / "README.md").is_file()

    def test_fix_and_report(self, valid_package, tmp_path):
        (valid_package / "LICENSE").unlink()
        report_path = tmp_path / "report.json"
        argv = ["validate", str(valid_package), "--fix", "--report", str(report_path)]
        assert main(argv) == EXIT_OK
        assert (valid_package / "LICENSE").exists()
        data = json.loads(report_path.read_text(encoding="utf-8"))
        assert data["score"] == 110
        assert data["files_written"] == ["LICENSE"]


# ---------------------------------------------------------------------------
# templates
# ---------------------------------------------------------------------------


class TestTemplates:
    def test_list(self, capsys):
        assert main(["templates", "list"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "library-component" in out
        assert "pubspec/plugin" in out

    def test_list_shows_variables(self, capsys):
        assert main(["templates", "list"]) == EXIT_OK
        assert "pub_command" in capsys.readouterr().out

    def test_show(self, capsys):
        assert main(["templates", "show", "app", "--platforms", "web"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "index.html" in out
        assert "AppDelegate.swift" not in out

    def test_show_unknown_kind(self):
        assert main(["templates", "show", "nope"]) == EXIT_FAILURE


def test_verbose_does_not_change_behaviour(tmp_path):
    quiet = tmp_path / "quiet"
    loud = tmp_path / "loud"
    assert main(["create", "package", "p", "--output", str(quiet)]) == EXIT_OK
    assert main(["--verbose", "create", "package", "p", "--output", str(loud)]) == EXIT_OK
    assert sorted(p.relative_to(quiet) for p in quiet.rglob("*")) == sorted(
        p.relative_to(loud) for p in loud.rglob("*")
    )
