# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for configure and build wrapper generation."""

from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import replace
from pathlib import Path

import pytest

from nmapenv.catalog import DependencyDescriptor, PackageCatalog
from nmapenv.environment import ResolvedEnvironment, materialize
from nmapenv.errors import UnknownDependencyError
from nmapenv.platform import PlatformTag
from nmapenv.profiles import DEFAULT_REGISTRY
from nmapenv.scripts import (
    ScriptKind,
    ScriptParameters,
    configure_arguments,
    generate,
    make_arguments,
    render_configure_flags,
    write_script,
)


@pytest.fixture
def default_env(fake_catalog: PackageCatalog) -> ResolvedEnvironment:
    return materialize("default", PlatformTag.LINUX, catalog=fake_catalog)


def test_configure_flags_substitute_dependency_prefixes(default_env: ResolvedEnvironment) -> None:
    flags = render_configure_flags(DEFAULT_REGISTRY.get("default").configure_flags, default_env)

    assert "--with-openssl=/store/openssl" in flags
    assert "--with-libssh2=/store/libssh2" in flags
    assert "--with-libpcap=yes" in flags


def test_configure_flags_fall_back_to_autodetect_without_prefix() -> None:
    catalog = PackageCatalog([DependencyDescriptor(name="openssl", header_path="/usr/include")])
    env = ResolvedEnvironment(
        profile_id="p",
        platform=PlatformTag.LINUX,
        dependencies={"openssl": catalog.lookup("openssl")},
        variables={},
    )

    assert render_configure_flags(("--with-openssl=${openssl}",), env) == ["--with-openssl=yes"]


def test_configure_flags_unknown_placeholder(default_env: ResolvedEnvironment) -> None:
    with pytest.raises(UnknownDependencyError) as excinfo:
        render_configure_flags(("--with-libdnet=${libdnet}",), default_env)

    assert excinfo.value.name == "libdnet"


def test_configure_arguments_add_debug_and_prefix(default_env: ResolvedEnvironment) -> None:
    params = ScriptParameters(configure_flags=("--with-liblua=yes",), extra_configure_args=("--without-zenmap",))

    arguments = configure_arguments(default_env, params)

    assert arguments == ["--with-liblua=yes", "--without-zenmap", "--enable-debug", '--prefix="$PWD/install"']


def test_configure_arguments_absolute_install_dir(default_env: ResolvedEnvironment) -> None:
    params = ScriptParameters(debug=False, install_dir="/opt/nmap dev")

    assert configure_arguments(default_env, params) == ["--prefix='/opt/nmap dev'"]


def test_make_arguments_parallel_and_target() -> None:
    assert make_arguments(ScriptParameters()) == ['-j"$(nproc)"']
    assert make_arguments(ScriptParameters(jobs=4, build_target="static")) == ["-j4", "static"]
    assert make_arguments(ScriptParameters(parallel=False, extra_make_args=("V=1",))) == ["V=1"]


def test_generate_configure_script(default_env: ResolvedEnvironment) -> None:
    script = generate(ScriptKind.CONFIGURE, default_env)

    assert script.startswith("#!/usr/bin/env bash\nset -e\n")
    assert "./configure \\\n    --with-openssl=/store/openssl" in script
    assert "--enable-debug" in script
    assert "nmapenv run build" in script


def test_minimal_configure_script_passes_library_prefixes(fake_catalog: PackageCatalog) -> None:
    env = materialize("minimal", PlatformTag.LINUX, catalog=fake_catalog)

    script = generate(ScriptKind.CONFIGURE, env)

    assert "--with-openssl=/store/openssl" in script
    assert "--with-libssh2=/store/libssh2" in script
    assert "--with-libpcre=yes" in script
    assert "--with-liblua=yes" in script


def test_generate_build_script_guards_on_makefile(default_env: ResolvedEnvironment) -> None:
    script = generate(ScriptKind.BUILD, default_env)

    assert "if [ ! -f Makefile ]; then" in script
    assert "Run 'nmapenv run configure' first." in script
    assert "exit 1" in script
    assert 'make -j"$(nproc)"' in script


def test_generate_static_build_target(fake_catalog: PackageCatalog) -> None:
    env = materialize("static", PlatformTag.LINUX, catalog=fake_catalog)

    script = generate("build", env, replace(ScriptParameters.for_profile(DEFAULT_REGISTRY.get("static")), jobs=2))

    assert "make -j2 static" in script


def test_write_script_marks_executable(tmp_path: Path) -> None:
    path = write_script("#!/bin/sh\nexit 0\n", tmp_path / "bin" / "configure-nmap")

    assert path.read_text(encoding="utf-8") == "#!/bin/sh\nexit 0\n"
    assert os.access(path, os.X_OK)


@pytest.mark.skipif(shutil.which("bash") is None, reason="bash is required to execute wrappers")
def test_build_script_exits_without_makefile(default_env: ResolvedEnvironment, tmp_path: Path) -> None:
    script = write_script(generate(ScriptKind.BUILD, default_env), tmp_path / "build-nmap")

    completed = subprocess.run([str(script)], cwd=tmp_path, capture_output=True, text=True, check=False)

    assert completed.returncode == 1
    assert "No Makefile found" in completed.stderr
