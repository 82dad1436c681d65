# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render the configure and build wrapper scripts for a resolved environment.

Every interpolation into shell text happens in this module. Values are quoted
with :func:`shlex.quote` unless they are deliberate shell expressions such as
``"$PWD/install"`` or ``$(nproc)``.
"""

from __future__ import annotations

import shlex
import stat
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from string import Template
from typing import Final

from .environment import ResolvedEnvironment
from .errors import UnknownDependencyError
from .profiles import DEFAULT_REGISTRY, Profile, ProfileRegistry


class ScriptKind(StrEnum):
    """Wrapper scripts the generator can emit."""

    CONFIGURE = "configure"
    BUILD = "build"


SCRIPT_NAMES: Final[dict[ScriptKind, str]] = {
    ScriptKind.CONFIGURE: "configure-nmap",
    ScriptKind.BUILD: "build-nmap",
}

BUILD_CONTROL_FILE: Final[str] = "Makefile"
DEFAULT_INSTALL_DIR: Final[str] = "install"
NPROC_EXPRESSION: Final[str] = '"$(nproc)"'
# Used when a flag names a dependency whose catalog entry has no prefix.
AUTODETECT_VALUE: Final[str] = "yes"
CONTINUATION: Final[str] = " \\\n    "

CONFIGURE_TEMPLATE: Final[Template] = Template(
    """#!/usr/bin/env bash
set -e
echo "Configuring nmap (profile: ${profile})..."
./configure${arguments}
echo "Configuration complete! Run '${build_hint}' to build."
""",
)

BUILD_TEMPLATE: Final[Template] = Template(
    """#!/usr/bin/env bash
set -e
echo "Building nmap (profile: ${profile})..."
if [ ! -f ${control_file} ]; then
  echo "No ${control_file} found. Run '${configure_hint}' first." >&2
  exit 1
fi
make${make_arguments}
echo "Build complete!"
""",
)


@dataclass(frozen=True, slots=True)
class ScriptParameters:
    """Typed inputs interpolated into wrapper scripts."""

    configure_flags: tuple[str, ...] = ()
    build_target: str | None = None
    parallel: bool = True
    debug: bool = True
    install_dir: str = DEFAULT_INSTALL_DIR
    jobs: int | None = None
    configure_hint: str = "nmapenv run configure"
    build_hint: str = "nmapenv run build"
    extra_configure_args: tuple[str, ...] = field(default_factory=tuple)
    extra_make_args: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def for_profile(cls, profile: Profile) -> ScriptParameters:
        """Return parameters seeded from ``profile``'s flags."""

        return cls(
            configure_flags=profile.configure_flags,
            build_target=profile.build_target,
            parallel=profile.parallel,
        )


def _dependency_values(environment: ResolvedEnvironment) -> Mapping[str, str]:
    return {
        name: descriptor.prefix or AUTODETECT_VALUE for name, descriptor in environment.dependencies.items()
    }


def render_configure_flags(flags: tuple[str, ...], environment: ResolvedEnvironment) -> list[str]:
    """Substitute ``${dependency}`` placeholders in ``flags`` with install prefixes.

    Args:
        flags: Configure flags possibly referencing dependencies by name.
        environment: Environment providing the dependency descriptors.

    Returns:
        list[str]: Flags with every placeholder replaced.

    Raises:
        UnknownDependencyError: If a flag names a dependency outside the environment.
    """

    values = _dependency_values(environment)
    rendered: list[str] = []
    for flag in flags:
        try:
            rendered.append(Template(flag).substitute(values))
        except KeyError as exc:
            raise UnknownDependencyError(str(exc.args[0])) from None
    return rendered


def _prefix_argument(install_dir: str) -> str:
    if install_dir.startswith("/"):
        return f"--prefix={shlex.quote(install_dir)}"
    return f'--prefix="$PWD/{install_dir}"'


def configure_arguments(environment: ResolvedEnvironment, params: ScriptParameters) -> list[str]:
    """Return the shell-ready argument list passed to ``./configure``."""

    arguments = [shlex.quote(flag) for flag in render_configure_flags(params.configure_flags, environment)]
    arguments.extend(shlex.quote(arg) for arg in params.extra_configure_args)
    if params.debug:
        arguments.append("--enable-debug")
    arguments.append(_prefix_argument(params.install_dir))
    return arguments


def make_arguments(params: ScriptParameters) -> list[str]:
    """Return the shell-ready argument list passed to ``make``."""

    arguments: list[str] = []
    if params.parallel:
        jobs = str(params.jobs) if params.jobs is not None else NPROC_EXPRESSION
        arguments.append(f"-j{jobs}")
    if params.build_target:
        arguments.append(shlex.quote(params.build_target))
    arguments.extend(shlex.quote(arg) for arg in params.extra_make_args)
    return arguments


def generate(
    kind: ScriptKind,
    environment: ResolvedEnvironment,
    params: ScriptParameters | None = None,
    *,
    registry: ProfileRegistry = DEFAULT_REGISTRY,
) -> str:
    """Return the text of the ``kind`` wrapper for ``environment``.

    Args:
        kind: Wrapper to render.
        environment: Materialised environment whose descriptors feed the flags.
        params: Explicit parameters; defaults to the environment profile's flags.
        registry: Registry used to look up the profile when ``params`` is omitted.

    Returns:
        str: Executable shell script text.
    """

    if params is None:
        params = ScriptParameters.for_profile(registry.get(environment.profile_id))
    profile = shlex.quote(environment.profile_id)
    if ScriptKind(kind) is ScriptKind.CONFIGURE:
        arguments = configure_arguments(environment, params)
        return CONFIGURE_TEMPLATE.substitute(
            profile=profile,
            arguments="".join(f"{CONTINUATION}{argument}" for argument in arguments),
            build_hint=params.build_hint,
        )
    return BUILD_TEMPLATE.substitute(
        profile=profile,
        control_file=BUILD_CONTROL_FILE,
        configure_hint=params.configure_hint,
        make_arguments="".join(f" {argument}" for argument in make_arguments(params)),
    )


def write_script(text: str, path: Path) -> Path:
    """Write ``text`` to ``path`` and mark it executable.

    Args:
        text: Script contents.
        path: Destination of the executable artefact.

    Returns:
        Path: The written path.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    current_mode = path.stat().st_mode
    path.chmod(current_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


__all__ = [
    "BUILD_CONTROL_FILE",
    "SCRIPT_NAMES",
    "ScriptKind",
    "ScriptParameters",
    "configure_arguments",
    "generate",
    "make_arguments",
    "render_configure_flags",
    "write_script",
]
