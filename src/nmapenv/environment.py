# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Turn a profile selection into the environment variables a build needs.

Materialisation is a pure function of the profile, the catalog, the platform
tag and a snapshot of the ambient environment. Nothing here reads or writes
process state: callers pass the ambient snapshot in and apply the returned
:class:`ResolvedEnvironment` themselves.

Merge convention for ambient values: derived entries come first and the
ambient value is appended after them, so the profile's dependencies win the
search order while host configuration stays reachable.
"""

from __future__ import annotations

import logging
import shlex
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Final, Literal

from pydantic import BaseModel, ConfigDict, field_serializer, field_validator

from .catalog import DependencyDescriptor, PackageCatalog
from .errors import UnknownDependencyError, UnresolvedProfileError
from .platform import PlatformTag, path_separator
from .profiles import DEFAULT_REGISTRY, ProfileRegistry

LOGGER = logging.getLogger(__name__)

PKG_CONFIG_PATH: Final[str] = "PKG_CONFIG_PATH"
C_INCLUDE_PATH: Final[str] = "C_INCLUDE_PATH"
CPLUS_INCLUDE_PATH: Final[str] = "CPLUS_INCLUDE_PATH"
LIBRARY_PATH: Final[str] = "LIBRARY_PATH"
CPPFLAGS: Final[str] = "CPPFLAGS"
LDFLAGS: Final[str] = "LDFLAGS"
PYTHONPATH: Final[str] = "PYTHONPATH"
LUA_PATH: Final[str] = "LUA_PATH"
LUA_CPATH: Final[str] = "LUA_CPATH"

LUA_SEPARATOR: Final[str] = ";"
# Two separators in a row make Lua splice in its compiled-in default path.
LUA_DEFAULT_MARKER: Final[str] = ";;"
FLAG_SEPARATOR: Final[str] = " "

Extractor = Callable[[DependencyDescriptor], Iterable[str]]
VariableKind = Literal["path", "flags", "lua"]


def _single(value: str | None) -> tuple[str, ...]:
    return () if value is None else (value,)


def _headers(descriptor: DependencyDescriptor) -> tuple[str, ...]:
    return _single(descriptor.header_path)


def _libraries(descriptor: DependencyDescriptor) -> tuple[str, ...]:
    return _single(descriptor.library_path)


def _pkg_config(descriptor: DependencyDescriptor) -> tuple[str, ...]:
    return _single(descriptor.pkg_config_path)


def _interpreter_paths(interpreter: str, *, native: bool) -> Extractor:
    def extract(descriptor: DependencyDescriptor) -> tuple[str, ...]:
        if descriptor.interpreter != interpreter:
            return ()
        return descriptor.native_module_paths if native else descriptor.runtime_data_paths

    return extract


def _flagged(flag: str, extractor: Extractor) -> Extractor:
    def extract(descriptor: DependencyDescriptor) -> tuple[str, ...]:
        return tuple(f"{flag}{path}" for path in extractor(descriptor))

    return extract


@dataclass(frozen=True, slots=True)
class VariableRule:
    """Describe how one environment variable is derived from descriptors."""

    name: str
    extract: Extractor
    kind: VariableKind


VARIABLE_RULES: Final[tuple[VariableRule, ...]] = (
    VariableRule(PKG_CONFIG_PATH, _pkg_config, "path"),
    VariableRule(C_INCLUDE_PATH, _headers, "path"),
    VariableRule(CPLUS_INCLUDE_PATH, _headers, "path"),
    VariableRule(LIBRARY_PATH, _libraries, "path"),
    VariableRule(CPPFLAGS, _flagged("-I", _headers), "flags"),
    VariableRule(LDFLAGS, _flagged("-L", _libraries), "flags"),
    VariableRule(PYTHONPATH, _interpreter_paths("python", native=False), "path"),
    VariableRule(LUA_PATH, _interpreter_paths("lua", native=False), "lua"),
    VariableRule(LUA_CPATH, _interpreter_paths("lua", native=True), "lua"),
)

GENERATED_VARIABLES: Final[tuple[str, ...]] = tuple(rule.name for rule in VARIABLE_RULES)


class ResolvedEnvironment(BaseModel):
    """Immutable result of materialising one profile."""

    model_config = ConfigDict(frozen=True)

    profile_id: str
    platform: PlatformTag
    dependencies: Mapping[str, DependencyDescriptor]
    variables: Mapping[str, str]

    @field_validator("dependencies", "variables", mode="after")
    @classmethod
    def _freeze_mapping(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("dependencies", "variables")
    def _serialize_mapping(self, value: Mapping[str, Any]) -> dict[str, Any]:
        return dict(value)

    def descriptor(self, name: str) -> DependencyDescriptor:
        """Return the resolved descriptor for ``name``.

        Raises:
            UnknownDependencyError: If ``name`` is not part of this environment.
        """

        try:
            return self.dependencies[name]
        except KeyError:
            raise UnknownDependencyError(name) from None

    def apply(self, base: Mapping[str, str]) -> dict[str, str]:
        """Return a copy of ``base`` with the derived variables set.

        Args:
            base: Environment the derived variables are layered onto.

        Returns:
            dict[str, str]: New environment mapping suitable for subprocesses.
        """

        merged = dict(base)
        merged.update(self.variables)
        return merged

    def export_lines(self) -> list[str]:
        """Return POSIX ``export`` statements for every derived variable."""

        return [f"export {name}={shlex.quote(value)}" for name, value in self.variables.items()]


def _merge(entries: list[str], ambient: str | None, *, kind: VariableKind, separator: str) -> str | None:
    """Join ``entries`` and append the ambient value according to ``kind``."""

    if kind == "flags":
        joiner = FLAG_SEPARATOR
    elif kind == "lua":
        joiner = LUA_SEPARATOR
    else:
        joiner = separator
    if ambient:
        return joiner.join([*entries, ambient])
    if not entries:
        return None
    joined = joiner.join(entries)
    if kind == "lua":
        return f"{joined}{LUA_DEFAULT_MARKER}"
    return joined


def derive_variables(
    descriptors: Iterable[DependencyDescriptor],
    platform: PlatformTag,
    ambient: Mapping[str, str],
) -> dict[str, str]:
    """Compute the derived variables for ``descriptors`` in their given order.

    Args:
        descriptors: Resolved descriptors in profile declaration order.
        platform: Platform selecting the path-list separator.
        ambient: Snapshot of the invoking environment.

    Returns:
        dict[str, str]: Variables in :data:`GENERATED_VARIABLES` order; variables with
        neither contributions nor an ambient value are omitted.
    """

    ordered = tuple(descriptors)
    separator = path_separator(platform)
    variables: dict[str, str] = {}
    for rule in VARIABLE_RULES:
        entries = [entry for descriptor in ordered for entry in rule.extract(descriptor)]
        value = _merge(entries, ambient.get(rule.name), kind=rule.kind, separator=separator)
        if value is not None:
            variables[rule.name] = value
    return variables


class EnvironmentMaterializer:
    """Resolve profiles against a catalog and derive their environment."""

    def __init__(self, catalog: PackageCatalog, registry: ProfileRegistry = DEFAULT_REGISTRY) -> None:
        self._catalog = catalog
        self._registry = registry

    @property
    def registry(self) -> ProfileRegistry:
        """Return the registry profiles are resolved from."""

        return self._registry

    def materialize(
        self,
        profile_id: str,
        platform: PlatformTag,
        ambient: Mapping[str, str] | None = None,
    ) -> ResolvedEnvironment:
        """Materialise ``profile_id`` for ``platform``.

        Args:
            profile_id: Identifier of the requested profile.
            platform: Host platform selecting conditional dependencies and separators.
            ambient: Snapshot of the invoking environment; ``None`` means empty.

        Returns:
            ResolvedEnvironment: Descriptors and derived variables for the profile.

        Raises:
            UnknownProfileError: If ``profile_id`` is not registered.
            UnresolvedProfileError: If any dependency is missing; every missing
                name is reported at once.
        """

        names = self._registry.resolve(profile_id, platform)
        resolved: dict[str, DependencyDescriptor] = {}
        missing: list[str] = []
        for name in names:
            try:
                resolved[name] = self._catalog.lookup(name)
            except UnknownDependencyError:
                missing.append(name)
        if missing:
            raise UnresolvedProfileError(profile_id, missing)

        variables = derive_variables(resolved.values(), platform, ambient or {})
        LOGGER.debug(
            "materialized profile=%s platform=%s dependencies=%d variables=%s",
            profile_id,
            platform,
            len(resolved),
            ",".join(variables),
        )
        return ResolvedEnvironment(
            profile_id=profile_id,
            platform=platform,
            dependencies=resolved,
            variables=variables,
        )


def materialize(
    profile_id: str,
    platform: PlatformTag,
    *,
    catalog: PackageCatalog,
    registry: ProfileRegistry = DEFAULT_REGISTRY,
    ambient: Mapping[str, str] | None = None,
) -> ResolvedEnvironment:
    """Materialise ``profile_id`` with a one-off :class:`EnvironmentMaterializer`."""

    return EnvironmentMaterializer(catalog, registry).materialize(profile_id, platform, ambient)


__all__ = [
    "CPLUS_INCLUDE_PATH",
    "CPPFLAGS",
    "C_INCLUDE_PATH",
    "EnvironmentMaterializer",
    "GENERATED_VARIABLES",
    "LDFLAGS",
    "LIBRARY_PATH",
    "LUA_CPATH",
    "LUA_PATH",
    "PKG_CONFIG_PATH",
    "PYTHONPATH",
    "ResolvedEnvironment",
    "derive_variables",
    "materialize",
]
