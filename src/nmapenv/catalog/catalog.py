# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Name to descriptor registry backing every profile lookup."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from ..errors import CatalogError, UnknownDependencyError
from .models import DependencyDescriptor


class PackageCatalog:
    """Read-only mapping of dependency names to installed descriptors."""

    def __init__(self, descriptors: Iterable[DependencyDescriptor]) -> None:
        """Index ``descriptors`` by name.

        Args:
            descriptors: Descriptors supplied by the package manager or a catalog file.

        Raises:
            CatalogError: If two descriptors share a name.
        """

        entries: dict[str, DependencyDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.name in entries:
                raise CatalogError(f"Duplicate catalog entry for '{descriptor.name}'")
            entries[descriptor.name] = descriptor
        self._entries: Mapping[str, DependencyDescriptor] = MappingProxyType(entries)

    def lookup(self, name: str) -> DependencyDescriptor:
        """Return the descriptor registered under ``name``.

        Args:
            name: Symbolic dependency name (for example ``openssl``).

        Returns:
            DependencyDescriptor: Descriptor recorded for ``name``.

        Raises:
            UnknownDependencyError: If ``name`` is not registered.
        """

        try:
            return self._entries[name]
        except KeyError:
            raise UnknownDependencyError(name) from None

    def names(self) -> tuple[str, ...]:
        """Return registered names in insertion order."""

        return tuple(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[DependencyDescriptor]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["PackageCatalog"]
