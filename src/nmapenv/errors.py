# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exceptions raised while resolving and materialising build environments."""

from __future__ import annotations

from collections.abc import Iterable


class DevEnvError(RuntimeError):
    """Base class for every failure that terminates an nmapenv invocation."""


class ConfigError(DevEnvError):
    """Raised when configuration input is invalid."""


class CatalogError(DevEnvError):
    """Raised when a catalog document fails structural validation."""


class UnknownProfileError(DevEnvError):
    """Raised when a profile identifier is not present in the registry."""

    def __init__(self, profile_id: str, known: Iterable[str] = ()) -> None:
        """Initialise the error for ``profile_id``.

        Args:
            profile_id: Identifier requested by the caller.
            known: Identifiers the registry does recognise.
        """

        known_ids = tuple(known)
        message = f"Unknown profile '{profile_id}'"
        if known_ids:
            message += f" (available: {', '.join(known_ids)})"
        super().__init__(message)
        self.profile_id = profile_id
        self.known = known_ids


class UnknownDependencyError(DevEnvError):
    """Raised when a catalog lookup misses."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Dependency '{name}' is not registered in the package catalog")
        self.name = name


class UnresolvedProfileError(DevEnvError):
    """Raised when one or more dependencies of a profile are missing from the catalog."""

    def __init__(self, profile_id: str, missing: Iterable[str]) -> None:
        """Initialise the error with every missing dependency name.

        Args:
            profile_id: Profile whose materialisation failed.
            missing: Dependency names the catalog could not resolve, in profile order.
        """

        missing_names = tuple(missing)
        super().__init__(
            f"Profile '{profile_id}' references dependencies missing from the catalog: {', '.join(missing_names)}",
        )
        self.profile_id = profile_id
        self.missing = missing_names


class PreconditionUnmetError(DevEnvError):
    """Raised when a command runs before the step it depends on."""


__all__ = [
    "CatalogError",
    "ConfigError",
    "DevEnvError",
    "PreconditionUnmetError",
    "UnknownDependencyError",
    "UnknownProfileError",
    "UnresolvedProfileError",
]
