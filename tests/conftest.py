# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from nmapenv.catalog import DependencyDescriptor, PackageCatalog
from nmapenv.catalog.constants import SYSTEM_LAYOUTS
from nmapenv.config import ENV_PREFIX, Settings, load_settings

STORE_ROOT = "/store"


def store_prefix(name: str) -> str:
    """Return the fake install prefix used for ``name`` in test catalogs."""
    return f"{STORE_ROOT}/{name}"


@pytest.fixture
def fake_catalog() -> PackageCatalog:
    """Return a catalog holding every known dependency under its own prefix."""
    return PackageCatalog(
        DependencyDescriptor.under_prefix(name, store_prefix(name), version="1.0", **layout)  # type: ignore[arg-type]
        for name, layout in SYSTEM_LAYOUTS.items()
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Return settings rooted at an empty temporary project."""
    return load_settings(tmp_path, env={})


@pytest.fixture(autouse=True)
def _isolate_nmapenv_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop ``NMAPENV_*`` overrides inherited from the invoking shell."""
    for name in list(os.environ):
        if name.startswith(ENV_PREFIX):
            monkeypatch.delenv(name)
