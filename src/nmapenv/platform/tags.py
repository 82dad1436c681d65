# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Platform tags selecting conditional dependencies and path conventions."""

from __future__ import annotations

import sys
from enum import StrEnum


class PlatformTag(StrEnum):
    """Host platforms distinguished by profile declarations."""

    LINUX = "linux"
    DARWIN = "darwin"
    OTHER = "other"


def detect_platform(sys_platform: str | None = None) -> PlatformTag:
    """Return the tag describing ``sys_platform`` (defaults to the running host).

    Args:
        sys_platform: Value formatted like :data:`sys.platform`.

    Returns:
        PlatformTag: Matching tag, ``OTHER`` for anything not Linux or macOS.
    """

    from .constants import SYS_PLATFORM_PREFIXES

    value = sys.platform if sys_platform is None else sys_platform
    for prefix, tag in SYS_PLATFORM_PREFIXES.items():
        if value.startswith(prefix):
            return tag
    return PlatformTag.OTHER


def path_separator(platform: PlatformTag) -> str:
    """Return the separator used for path-list variables on ``platform``."""

    from .constants import PATH_SEPARATORS

    return PATH_SEPARATORS[platform]


__all__ = ["PlatformTag", "detect_platform", "path_separator"]
