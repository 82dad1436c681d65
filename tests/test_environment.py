# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for environment materialisation."""

from __future__ import annotations

import shlex

import pytest

from nmapenv.catalog import DependencyDescriptor, PackageCatalog
from nmapenv.environment import (
    GENERATED_VARIABLES,
    EnvironmentMaterializer,
    derive_variables,
    materialize,
)
from nmapenv.errors import UnknownDependencyError, UnknownProfileError, UnresolvedProfileError
from nmapenv.platform import PlatformTag
from nmapenv.profiles import BUILD_TOOLS, CORE_LIBRARIES, Profile, ProfileRegistry


def store_prefix(name: str) -> str:
    return f"/store/{name}"


def _registry(*profiles: Profile) -> ProfileRegistry:
    return ProfileRegistry(profiles)


def _library(name: str) -> DependencyDescriptor:
    return DependencyDescriptor.under_prefix(name, f"/opt/{name}", include="include", lib="lib", pkgconfig="lib/pkgconfig")


def test_materialize_is_deterministic(fake_catalog: PackageCatalog) -> None:
    first = materialize("default", PlatformTag.LINUX, catalog=fake_catalog, ambient={"PATH": "/bin"})
    second = materialize("default", PlatformTag.LINUX, catalog=fake_catalog, ambient={"PATH": "/bin"})

    assert first == second
    assert first.export_lines() == second.export_lines()


def test_paths_follow_profile_declaration_order() -> None:
    catalog = PackageCatalog([_library("zlib"), _library("openssl")])
    registry = _registry(Profile(id="p", description="P", required=("openssl", "zlib")))

    env = materialize("p", PlatformTag.LINUX, catalog=catalog, registry=registry)

    assert env.variables["C_INCLUDE_PATH"] == "/opt/openssl/include:/opt/zlib/include"
    assert env.variables["CPLUS_INCLUDE_PATH"] == env.variables["C_INCLUDE_PATH"]
    assert env.variables["LIBRARY_PATH"] == "/opt/openssl/lib:/opt/zlib/lib"
    assert env.variables["PKG_CONFIG_PATH"] == "/opt/openssl/lib/pkgconfig:/opt/zlib/lib/pkgconfig"
    assert env.variables["CPPFLAGS"] == "-I/opt/openssl/include -I/opt/zlib/include"
    assert env.variables["LDFLAGS"] == "-L/opt/openssl/lib -L/opt/zlib/lib"
    assert list(env.dependencies) == ["openssl", "zlib"]


def test_ambient_value_is_appended_after_derived_entries() -> None:
    catalog = PackageCatalog([DependencyDescriptor(name="zlib", pkg_config_path="/y")])
    registry = _registry(Profile(id="p", description="P", required=("zlib",)))

    env = materialize("p", PlatformTag.LINUX, catalog=catalog, registry=registry, ambient={"PKG_CONFIG_PATH": "/x"})

    assert env.variables["PKG_CONFIG_PATH"] == "/y:/x"


def test_ambient_flags_are_space_joined() -> None:
    catalog = PackageCatalog([_library("zlib")])
    registry = _registry(Profile(id="p", description="P", required=("zlib",)))

    env = materialize("p", PlatformTag.DARWIN, catalog=catalog, registry=registry, ambient={"LDFLAGS": "-Wl,-O1"})

    assert env.variables["LDFLAGS"] == "-L/opt/zlib/lib -Wl,-O1"


def test_other_platform_uses_semicolon_separator() -> None:
    catalog = PackageCatalog([_library("zlib"), _library("pcre2")])
    registry = _registry(Profile(id="p", description="P", required=("zlib", "pcre2")))

    env = materialize("p", PlatformTag.OTHER, catalog=catalog, registry=registry)

    assert env.variables["LIBRARY_PATH"] == "/opt/zlib/lib;/opt/pcre2/lib"


def test_lua_search_paths_keep_interpreter_defaults(fake_catalog: PackageCatalog) -> None:
    env = materialize("minimal", PlatformTag.LINUX, catalog=fake_catalog)
    lua = store_prefix("lua")

    assert env.variables["LUA_PATH"] == f"{lua}/share/lua/5.4/?.lua;{lua}/share/lua/5.4/?/init.lua;;"
    assert env.variables["LUA_CPATH"] == f"{lua}/lib/lua/5.4/?.so;;"


def test_lua_ambient_path_replaces_default_marker(fake_catalog: PackageCatalog) -> None:
    env = materialize("minimal", PlatformTag.LINUX, catalog=fake_catalog, ambient={"LUA_CPATH": "./?.so"})

    assert env.variables["LUA_CPATH"] == f"{store_prefix('lua')}/lib/lua/5.4/?.so;./?.so"


def test_pythonpath_only_for_profiles_with_python_modules(fake_catalog: PackageCatalog) -> None:
    full = materialize("default", PlatformTag.LINUX, catalog=fake_catalog)
    minimal = materialize("minimal", PlatformTag.LINUX, catalog=fake_catalog)

    assert full.variables["PYTHONPATH"] == f"{store_prefix('python3-setuptools')}/lib/python3/dist-packages"
    assert "PYTHONPATH" not in minimal.variables


def test_variables_without_contributions_are_omitted() -> None:
    catalog = PackageCatalog([DependencyDescriptor(name="gcc", prefix="/opt/gcc")])
    registry = _registry(Profile(id="tools", description="Tools", required=("gcc",)))

    env = materialize("tools", PlatformTag.LINUX, catalog=catalog, registry=registry, ambient={"CPPFLAGS": "-DNDEBUG"})

    assert env.variables == {"CPPFLAGS": "-DNDEBUG"}


def test_variables_listed_in_generation_order(fake_catalog: PackageCatalog) -> None:
    env = materialize("default", PlatformTag.LINUX, catalog=fake_catalog)

    assert tuple(env.variables) == tuple(name for name in GENERATED_VARIABLES if name in env.variables)


def test_unresolved_profile_lists_exactly_the_missing_names(fake_catalog: PackageCatalog) -> None:
    catalog = PackageCatalog(descriptor for descriptor in fake_catalog if descriptor.name not in {"libssh2", "pcre2"})

    with pytest.raises(UnresolvedProfileError) as excinfo:
        EnvironmentMaterializer(catalog).materialize("minimal", PlatformTag.LINUX)

    assert excinfo.value.profile_id == "minimal"
    assert excinfo.value.missing == ("pcre2", "libssh2")
    assert "pcre2, libssh2" in str(excinfo.value)


def test_unknown_profile_raises(fake_catalog: PackageCatalog) -> None:
    with pytest.raises(UnknownProfileError):
        materialize("nightly", PlatformTag.LINUX, catalog=fake_catalog)


def test_apply_overlays_variables_without_mutating_base(fake_catalog: PackageCatalog) -> None:
    env = materialize("minimal", PlatformTag.LINUX, catalog=fake_catalog)
    base = {"PATH": "/bin", "LIBRARY_PATH": "/old"}

    applied = env.apply(base)

    assert applied["PATH"] == "/bin"
    assert applied["LIBRARY_PATH"] == env.variables["LIBRARY_PATH"]
    assert base["LIBRARY_PATH"] == "/old"


def test_export_lines_are_shell_quoted(fake_catalog: PackageCatalog) -> None:
    env = materialize("minimal", PlatformTag.LINUX, catalog=fake_catalog)

    lines = env.export_lines()

    assert len(lines) == len(env.variables)
    for line in lines:
        name, _, value = line.removeprefix("export ").partition("=")
        assert shlex.split(value) == [env.variables[name]]


def test_descriptor_lookup_within_environment(fake_catalog: PackageCatalog) -> None:
    env = materialize("minimal", PlatformTag.LINUX, catalog=fake_catalog)

    assert env.descriptor("openssl").prefix == store_prefix("openssl")
    with pytest.raises(UnknownDependencyError):
        env.descriptor("ncurses")


def test_derive_variables_empty_inputs() -> None:
    assert derive_variables([], PlatformTag.LINUX, {}) == {}


def test_minimal_linux_environment_has_toolchain_and_core_libraries(fake_catalog: PackageCatalog) -> None:
    env = materialize("minimal", PlatformTag.LINUX, catalog=fake_catalog)

    assert set(env.dependencies) == set(BUILD_TOOLS + CORE_LIBRARIES)
    assert "glibc-static" not in env.dependencies


def test_resolved_environment_cannot_be_mutated(fake_catalog: PackageCatalog) -> None:
    env = materialize("minimal", PlatformTag.LINUX, catalog=fake_catalog)
    before = env.model_dump_json()

    with pytest.raises(TypeError):
        env.variables["LDFLAGS"] = "-L/tmp"  # type: ignore[index]
    with pytest.raises(TypeError):
        env.dependencies["openssl"] = DependencyDescriptor(name="openssl")  # type: ignore[index]
    with pytest.raises(AttributeError):
        env.dependencies.pop("openssl")  # type: ignore[attr-defined]

    assert env.model_dump_json() == before
    assert env.model_dump()["variables"]["LIBRARY_PATH"] == env.variables["LIBRARY_PATH"]
