# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Declarative build profiles.

Profiles are data, not code: each one lists the catalog names it needs in the
order their paths must appear in derived variables, the extra names pulled in
on particular platforms, and the flags handed to nmap's configure script and
Makefile. To add a build scenario, add a :class:`Profile` to
:data:`BUILTIN_PROFILES`.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .catalog import PackageCatalog
from .errors import UnknownProfileError
from .platform import PlatformTag


class Profile(BaseModel):
    """Named bundle of dependencies and flags for one build scenario."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    description: str
    required: tuple[str, ...]
    platform_extras: Mapping[PlatformTag, tuple[str, ...]] = Field(default_factory=dict, validate_default=True)
    configure_flags: tuple[str, ...] = Field(default_factory=tuple)
    build_target: str | None = None
    parallel: bool = True
    packaged: bool = False

    def dependency_names(self, platform: PlatformTag) -> tuple[str, ...]:
        """Return required names followed by the extras declared for ``platform``."""

        return self.required + self.platform_extras.get(platform, ())

    @field_validator("platform_extras", mode="after")
    @classmethod
    def _freeze_extras(cls, value: Mapping[PlatformTag, tuple[str, ...]]) -> Mapping[PlatformTag, tuple[str, ...]]:
        return MappingProxyType(dict(value))


BUILD_TOOLS: Final[tuple[str, ...]] = (
    "gcc",
    "gnumake",
    "autoconf",
    "automake",
    "libtool",
    "pkg-config",
)
DEVELOPER_TOOLS: Final[tuple[str, ...]] = (
    "git",
    "m4",
    "perl",
    "python3",
    "python3-setuptools",
    "python3-pip",
    "groff",
    "gzip",
    "gnutar",
)
CORE_LIBRARIES: Final[tuple[str, ...]] = (
    "openssl",
    "libpcap",
    "pcre2",
    "libssh2",
    "zlib",
    "lua",
)
TERMINAL_LIBRARIES: Final[tuple[str, ...]] = ("ncurses", "readline")

SYSTEM_CONFIGURE_FLAGS: Final[tuple[str, ...]] = (
    "--with-openssl=${openssl}",
    "--with-libpcap=yes",
    "--with-libpcre=yes",
    "--with-libssh2=${libssh2}",
    "--with-liblua=yes",
)
STATIC_CONFIGURE_FLAGS: Final[tuple[str, ...]] = (
    "--with-openssl=${openssl}",
    "--with-libdnet=included",
    "--with-libpcap=included",
    "--with-libpcre=included",
    "--with-liblua=included",
    "--with-libz=included",
)
MINGW_HOST: Final[str] = "x86_64-w64-mingw32"

PACKAGED_PROFILE_ID: Final[str] = "nmap-dev"

BUILTIN_PROFILES: Final[tuple[Profile, ...]] = (
    Profile(
        id="default",
        description="Full development environment",
        required=BUILD_TOOLS + DEVELOPER_TOOLS + CORE_LIBRARIES + TERMINAL_LIBRARIES,
        platform_extras={
            PlatformTag.LINUX: ("glibc-dev", "linux-headers"),
            PlatformTag.DARWIN: (),
        },
        configure_flags=SYSTEM_CONFIGURE_FLAGS,
    ),
    Profile(
        id="minimal",
        description="Minimal build environment for CI and automated builds",
        required=BUILD_TOOLS + CORE_LIBRARIES,
        configure_flags=SYSTEM_CONFIGURE_FLAGS,
    ),
    Profile(
        id="static",
        description="Static build environment for portable binaries",
        required=BUILD_TOOLS + ("upx",) + CORE_LIBRARIES,
        platform_extras={PlatformTag.LINUX: ("glibc-static",)},
        configure_flags=STATIC_CONFIGURE_FLAGS,
        build_target="static",
    ),
    Profile(
        id="cross-windows",
        description="Windows cross-compilation environment",
        required=("mingw-w64-cc",) + BUILD_TOOLS[1:],
        configure_flags=(f"--host={MINGW_HOST}",),
    ),
    Profile(
        id=PACKAGED_PROFILE_ID,
        description="Packaged development build of the scanner",
        required=BUILD_TOOLS + CORE_LIBRARIES,
        configure_flags=SYSTEM_CONFIGURE_FLAGS,
        build_target="install",
        packaged=True,
    ),
)


class ProfileRegistry:
    """Fixed lookup table of build profiles keyed by identifier."""

    def __init__(self, profiles: Iterable[Profile] = BUILTIN_PROFILES) -> None:
        self._profiles: Mapping[str, Profile] = MappingProxyType({profile.id: profile for profile in profiles})

    def ids(self) -> tuple[str, ...]:
        """Return profile identifiers in declaration order."""

        return tuple(self._profiles)

    def get(self, profile_id: str) -> Profile:
        """Return the profile registered as ``profile_id``.

        Raises:
            UnknownProfileError: If ``profile_id`` is not registered.
        """

        profile = self._profiles.get(profile_id)
        if profile is None:
            raise UnknownProfileError(profile_id, self.ids())
        return profile

    def resolve(self, profile_id: str, platform: PlatformTag) -> tuple[str, ...]:
        """Return the ordered dependency names of ``profile_id`` on ``platform``.

        Args:
            profile_id: Identifier of the requested profile.
            platform: Host platform selecting conditional dependencies.

        Returns:
            tuple[str, ...]: Required names followed by platform extras, as declared.

        Raises:
            UnknownProfileError: If ``profile_id`` is not registered.
        """

        return self.get(profile_id).dependency_names(platform)

    def missing_dependencies(
        self,
        catalog: PackageCatalog,
        platform: PlatformTag,
    ) -> Mapping[str, tuple[str, ...]]:
        """Return, per profile, the names ``catalog`` cannot resolve on ``platform``."""

        report: dict[str, tuple[str, ...]] = {}
        for profile_id, profile in self._profiles.items():
            missing = tuple(name for name in profile.dependency_names(platform) if name not in catalog)
            if missing:
                report[profile_id] = missing
        return report

    def __iter__(self) -> Iterator[Profile]:
        return iter(self._profiles.values())


DEFAULT_REGISTRY: Final[ProfileRegistry] = ProfileRegistry()

__all__ = [
    "BUILTIN_PROFILES",
    "DEFAULT_REGISTRY",
    "PACKAGED_PROFILE_ID",
    "Profile",
    "ProfileRegistry",
]
