# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Install layouts for dependencies found in a conventional Unix prefix."""

from __future__ import annotations

from typing import Final

DEFAULT_SYSTEM_PREFIX: Final[str] = "/usr"
LUA_VERSION: Final[str] = "5.4"

_LIBRARY: Final[dict[str, object]] = {
    "include": "include",
    "lib": "lib",
    "pkgconfig": "lib/pkgconfig",
}

# Tools only contribute a prefix; their binaries are found through PATH.
TOOLCHAIN_NAMES: Final[tuple[str, ...]] = (
    "gcc",
    "gnumake",
    "autoconf",
    "automake",
    "libtool",
    "pkg-config",
    "git",
    "m4",
    "perl",
    "python3",
    "python3-pip",
    "groff",
    "gzip",
    "gnutar",
    "upx",
    "mingw-w64-cc",
)

SYSTEM_LAYOUTS: Final[dict[str, dict[str, object]]] = {
    **{name: {} for name in TOOLCHAIN_NAMES},
    "python3-setuptools": {
        "runtime_paths": ("lib/python3/dist-packages",),
        "interpreter": "python",
    },
    "openssl": dict(_LIBRARY),
    "libpcap": dict(_LIBRARY),
    "pcre2": dict(_LIBRARY),
    "libssh2": dict(_LIBRARY),
    "zlib": dict(_LIBRARY),
    "lua": {
        **_LIBRARY,
        "runtime_paths": (f"share/lua/{LUA_VERSION}/?.lua", f"share/lua/{LUA_VERSION}/?/init.lua"),
        "native_paths": (f"lib/lua/{LUA_VERSION}/?.so",),
        "interpreter": "lua",
    },
    "ncurses": dict(_LIBRARY),
    "readline": dict(_LIBRARY),
    "glibc-dev": {"include": "include"},
    "linux-headers": {"include": "include"},
    "glibc-static": {"lib": "lib"},
}

__all__ = [
    "DEFAULT_SYSTEM_PREFIX",
    "LUA_VERSION",
    "SYSTEM_LAYOUTS",
    "TOOLCHAIN_NAMES",
]
