# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Platform-specific constants used when deriving environment variables."""

from __future__ import annotations

from typing import Final

from .tags import PlatformTag

PATH_SEPARATORS: Final[dict[PlatformTag, str]] = {
    PlatformTag.LINUX: ":",
    PlatformTag.DARWIN: ":",
    PlatformTag.OTHER: ";",
}

SYS_PLATFORM_PREFIXES: Final[dict[str, PlatformTag]] = {
    "linux": PlatformTag.LINUX,
    "darwin": PlatformTag.DARWIN,
}

__all__ = [
    "PATH_SEPARATORS",
    "SYS_PLATFORM_PREFIXES",
]
