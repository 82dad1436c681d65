# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""nmapenv: per-profile build environments, wrapper scripts and app dispatch for nmap."""

from __future__ import annotations

from .catalog import DependencyDescriptor, PackageCatalog, load_catalog, system_catalog
from .config import Settings, load_settings
from .dispatch import Activation, AppName, Dispatcher
from .environment import EnvironmentMaterializer, ResolvedEnvironment, materialize
from .errors import (
    CatalogError,
    ConfigError,
    DevEnvError,
    PreconditionUnmetError,
    UnknownDependencyError,
    UnknownProfileError,
    UnresolvedProfileError,
)
from .platform import PlatformTag, detect_platform
from .profiles import DEFAULT_REGISTRY, Profile, ProfileRegistry
from .scripts import ScriptKind, ScriptParameters, generate

__all__ = [
    "Activation",
    "AppName",
    "CatalogError",
    "ConfigError",
    "DEFAULT_REGISTRY",
    "DependencyDescriptor",
    "DevEnvError",
    "Dispatcher",
    "EnvironmentMaterializer",
    "PackageCatalog",
    "PlatformTag",
    "PreconditionUnmetError",
    "Profile",
    "ProfileRegistry",
    "ResolvedEnvironment",
    "ScriptKind",
    "ScriptParameters",
    "Settings",
    "UnknownDependencyError",
    "UnknownProfileError",
    "UnresolvedProfileError",
    "detect_platform",
    "generate",
    "load_catalog",
    "load_settings",
    "materialize",
    "system_catalog",
]
