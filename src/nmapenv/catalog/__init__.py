# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Package catalog mapping dependency names to installed descriptors."""

from __future__ import annotations

from .catalog import PackageCatalog
from .constants import DEFAULT_SYSTEM_PREFIX
from .models import DependencyDescriptor
from .sources import CatalogEntry, catalog_from_mapping, load_catalog, system_catalog

__all__ = [
    "CatalogEntry",
    "DEFAULT_SYSTEM_PREFIX",
    "DependencyDescriptor",
    "PackageCatalog",
    "catalog_from_mapping",
    "load_catalog",
    "system_catalog",
]
