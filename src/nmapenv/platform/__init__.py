# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Platform-specific heuristics (tags, path separators)."""

from __future__ import annotations

from .constants import PATH_SEPARATORS
from .tags import PlatformTag, detect_platform, path_separator

__all__ = [
    "PATH_SEPARATORS",
    "PlatformTag",
    "detect_platform",
    "path_separator",
]
