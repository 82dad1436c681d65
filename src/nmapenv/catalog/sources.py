# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Concrete catalog sources (built-in system prefix, TOML documents)."""

from __future__ import annotations

import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final, cast

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import CatalogError
from .catalog import PackageCatalog
from .constants import DEFAULT_SYSTEM_PREFIX, SYSTEM_LAYOUTS
from .models import DependencyDescriptor, Interpreter

PACKAGES_KEY: Final[str] = "packages"

LOGGER = logging.getLogger(__name__)


class CatalogEntry(BaseModel):
    """One ``[packages.<name>]`` table of a catalog document."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    version: str | None = None
    prefix: str | None = None
    include: str | None = None
    lib: str | None = None
    pkgconfig: str | None = None
    runtime_paths: tuple[str, ...] = Field(default_factory=tuple)
    native_paths: tuple[str, ...] = Field(default_factory=tuple)
    interpreter: Interpreter | None = None

    def to_descriptor(self, name: str) -> DependencyDescriptor:
        """Return the descriptor for ``name`` with sub-paths anchored on ``prefix``.

        Raises:
            CatalogError: If a relative path is declared without a prefix.
        """

        if self.prefix is None:
            relative = [
                value
                for value in (self.include, self.lib, self.pkgconfig, *self.runtime_paths, *self.native_paths)
                if value is not None and not value.startswith("/")
            ]
            if relative:
                raise CatalogError(f"Catalog entry '{name}' uses relative paths without a prefix: {', '.join(relative)}")
            return DependencyDescriptor(
                name=name,
                version=self.version,
                header_path=self.include,
                library_path=self.lib,
                pkg_config_path=self.pkgconfig,
                runtime_data_paths=self.runtime_paths,
                native_module_paths=self.native_paths,
                interpreter=self.interpreter,
            )
        return DependencyDescriptor.under_prefix(
            name,
            self.prefix,
            version=self.version,
            include=self.include,
            lib=self.lib,
            pkgconfig=self.pkgconfig,
            runtime_paths=self.runtime_paths,
            native_paths=self.native_paths,
            interpreter=self.interpreter,
        )


def system_catalog(prefix: str = DEFAULT_SYSTEM_PREFIX) -> PackageCatalog:
    """Return a catalog of every known dependency installed beneath ``prefix``.

    Args:
        prefix: Install prefix shared by all dependencies (``/usr`` by default).

    Returns:
        PackageCatalog: Catalog with unset versions and conventional Unix layouts.
    """

    descriptors = []
    for name, layout in SYSTEM_LAYOUTS.items():
        entry = CatalogEntry.model_validate({"prefix": prefix, **layout})
        descriptors.append(entry.to_descriptor(name))
    return PackageCatalog(descriptors)


def catalog_from_mapping(document: Mapping[str, Any], *, origin: str = "<mapping>") -> PackageCatalog:
    """Build a catalog from a parsed catalog document.

    Args:
        document: Parsed document containing a ``packages`` table.
        origin: Description of the document used in error messages.

    Returns:
        PackageCatalog: Catalog preserving the document's entry order.

    Raises:
        CatalogError: If the document is malformed.
    """

    packages = document.get(PACKAGES_KEY)
    if not isinstance(packages, Mapping):
        raise CatalogError(f"Catalog at {origin} must define a [{PACKAGES_KEY}] table")
    descriptors: list[DependencyDescriptor] = []
    for name, raw in packages.items():
        if not isinstance(raw, Mapping):
            raise CatalogError(f"Catalog entry '{name}' in {origin} must be a table")
        try:
            entry = CatalogEntry.model_validate(dict(cast(Mapping[str, Any], raw)))
        except ValidationError as exc:
            raise CatalogError(f"Invalid catalog entry '{name}' in {origin}: {exc}") from exc
        descriptors.append(entry.to_descriptor(str(name)))
    LOGGER.debug("loaded %d catalog entries from %s", len(descriptors), origin)
    return PackageCatalog(descriptors)


def load_catalog(path: Path) -> PackageCatalog:
    """Load a catalog TOML document from ``path``.

    Args:
        path: Location of the catalog document.

    Returns:
        PackageCatalog: Catalog described by the document.

    Raises:
        CatalogError: If the file is missing, unreadable or malformed.
    """

    try:
        with path.open("rb") as handle:
            document = tomllib.load(handle)
    except FileNotFoundError as exc:
        raise CatalogError(f"Catalog file {path} does not exist") from exc
    except tomllib.TOMLDecodeError as exc:
        raise CatalogError(f"Catalog file {path} is not valid TOML: {exc}") from exc
    return catalog_from_mapping(document, origin=str(path))


__all__ = [
    "CatalogEntry",
    "PACKAGES_KEY",
    "catalog_from_mapping",
    "load_catalog",
    "system_catalog",
]
