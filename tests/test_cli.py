# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI tests for the nmapenv commands."""

from __future__ import annotations

import shlex
from pathlib import Path

import pytest
from typer.testing import CliRunner

from nmapenv.cli.app import app

CATALOG = """
[packages.gcc]
version = "13.2.0"
prefix = "/opt/gcc"

[packages.zlib]
version = "1.3.1"
prefix = "/opt/zlib"
include = "include"
lib = "lib"
pkgconfig = "lib/pkgconfig"
"""


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Create a project whose catalog only provides a compiler and zlib."""
    (tmp_path / "catalog.toml").write_text(CATALOG.strip(), encoding="utf-8")
    (tmp_path / ".nmapenv.toml").write_text('catalog = "catalog.toml"\n', encoding="utf-8")
    return tmp_path


def test_profiles_lists_builtin_profiles(project: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["profiles", "--root", str(project), "--platform", "linux"])

    assert result.exit_code == 0
    for profile_id in ("default", "minimal", "static", "cross-windows", "nmap-dev"):
        assert profile_id in result.stdout


def test_env_reports_missing_dependencies(project: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["env", "minimal", "--root", str(project), "--platform", "linux"])

    assert result.exit_code == 1
    assert "Profile 'minimal' references dependencies missing from the catalog" in result.output
    assert "openssl" in result.output


def test_env_unknown_profile(project: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["env", "nightly", "--root", str(project)])

    assert result.exit_code == 1
    assert "Unknown profile 'nightly'" in result.output


def test_env_prints_exports_with_system_catalog(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NMAPENV_CATALOG_PREFIX", "/opt/sys")
    monkeypatch.delenv("PKG_CONFIG_PATH", raising=False)
    runner = CliRunner()

    result = runner.invoke(app, ["env", "minimal", "--root", str(tmp_path), "--platform", "linux"])

    assert result.exit_code == 0
    exports = dict(
        line.removeprefix("export ").split("=", 1) for line in result.stdout.splitlines() if line.startswith("export ")
    )
    assert shlex.split(exports["PKG_CONFIG_PATH"])[0].startswith("/opt/sys/lib/pkgconfig")
    assert "LUA_PATH" in exports


def test_doctor_flags_unresolved_profiles(project: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["doctor", "--root", str(project), "--platform", "darwin"])

    assert result.exit_code == 1
    assert "unresolved" in result.stdout


def test_doctor_passes_with_system_catalog(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["doctor", "--root", str(tmp_path), "--platform", "linux"])

    assert result.exit_code == 0
    assert "unresolved" not in result.stdout


def test_generate_stdout_prints_build_script(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["generate", "build", "--profile", "static", "--root", str(tmp_path), "--platform", "linux", "--stdout"],
    )

    assert result.exit_code == 0
    assert "if [ ! -f Makefile ]; then" in result.stdout
    assert "static" in result.stdout
    assert not (tmp_path / ".nmapenv").exists()


def test_generate_writes_wrapper(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["generate", "configure", "--profile", "minimal", "--root", str(tmp_path), "--platform", "linux", "--no-emoji"],
    )

    assert result.exit_code == 0
    assert (tmp_path / ".nmapenv" / "bin" / "configure-nmap").is_file()
    assert "Wrote configure wrapper" in result.stdout
    assert "✅" not in result.stdout


def test_run_build_without_makefile_fails(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[object] = []
    monkeypatch.setattr("nmapenv.dispatch.run_command", lambda *args, **kwargs: calls.append(args))
    runner = CliRunner()

    result = runner.invoke(app, ["run", "build", "--root", str(tmp_path), "--platform", "linux", "--no-emoji"])

    assert result.exit_code == 1
    assert "No Makefile found" in result.output
    assert calls == []


def test_run_scanner_forwards_arguments(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    executable = tmp_path / "install" / "bin" / "nmap"
    executable.parent.mkdir(parents=True)
    executable.write_text("#!/bin/sh\n", encoding="utf-8")
    seen: list[list[str]] = []

    class Completed:
        returncode = 0

    def fake_run(args, *, options=None):
        seen.append(list(args))
        return Completed()

    monkeypatch.setattr("nmapenv.dispatch.run_command", fake_run)
    runner = CliRunner()

    result = runner.invoke(app, ["run", "--root", str(tmp_path), "--platform", "linux", "scanner", "-sV", "localhost"])

    assert result.exit_code == 0
    assert seen == [[str(executable.resolve()), "-sV", "localhost"]]


def test_shell_no_spawn_prints_summary(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        app,
        ["shell", "minimal", "--root", str(tmp_path), "--platform", "linux", "--no-spawn", "--no-emoji"],
    )

    assert result.exit_code == 0
    assert "Available tools" in result.stdout
    assert "openssl" in result.stdout
    assert "./configure" in result.stdout
    assert "Environment configured successfully!" in result.stdout
