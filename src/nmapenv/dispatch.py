# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Map profile and app requests onto materialisation, scripts and processes."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace
from enum import StrEnum
from pathlib import Path
from typing import Final

from .catalog import PackageCatalog, load_catalog, system_catalog
from .config import Settings
from .environment import EnvironmentMaterializer, ResolvedEnvironment
from .errors import PreconditionUnmetError
from .platform import PlatformTag, detect_platform
from .process import CommandOptions, run_command
from .profiles import DEFAULT_REGISTRY, PACKAGED_PROFILE_ID, Profile, ProfileRegistry
from .scripts import (
    BUILD_CONTROL_FILE,
    SCRIPT_NAMES,
    ScriptKind,
    ScriptParameters,
    generate,
    make_arguments,
    render_configure_flags,
    write_script,
)

LOGGER = logging.getLogger(__name__)

SCANNER_EXECUTABLE: Final[str] = "bin/nmap"
PROFILE_ENV_VAR: Final[str] = "NMAPENV_PROFILE"
DEFAULT_SHELL: Final[str] = "/bin/sh"
UNKNOWN_VERSION: Final[str] = "system"


class AppName(StrEnum):
    """Externally invocable actions."""

    SCANNER = "scanner"
    CONFIGURE = "configure"
    BUILD = "build"


@dataclass(frozen=True, slots=True)
class Activation:
    """Environment plus the human-readable summary shown when a shell is entered."""

    profile: Profile
    environment: ResolvedEnvironment
    versions: tuple[tuple[str, str], ...]
    next_commands: tuple[str, ...]


class Dispatcher:
    """Resolve named profiles and apps against configured settings."""

    def __init__(
        self,
        settings: Settings,
        *,
        catalog: PackageCatalog | None = None,
        registry: ProfileRegistry = DEFAULT_REGISTRY,
        platform: PlatformTag | None = None,
        ambient: Mapping[str, str] | None = None,
    ) -> None:
        """Bind the dispatcher to its inputs.

        Args:
            settings: Effective configuration.
            catalog: Catalog override; loaded from ``settings`` when omitted.
            registry: Profile registry.
            platform: Platform override; detected from the host when omitted.
            ambient: Ambient environment snapshot; copied from ``os.environ`` when omitted.
        """

        self.settings = settings
        self.registry = registry
        self.platform = detect_platform() if platform is None else platform
        self.ambient: dict[str, str] = dict(os.environ if ambient is None else ambient)
        self._catalog = catalog

    @property
    def catalog(self) -> PackageCatalog:
        """Return the catalog, loading it from settings on first use."""

        if self._catalog is None:
            if self.settings.catalog is not None:
                self._catalog = load_catalog(self.settings.catalog)
            else:
                self._catalog = system_catalog(self.settings.catalog_prefix)
        return self._catalog

    def _profile_id(self, profile_id: str | None) -> str:
        return self.settings.default_profile if profile_id is None else profile_id

    def materialize(self, profile_id: str | None = None) -> ResolvedEnvironment:
        """Materialise ``profile_id`` (or the configured default) for this host."""

        materializer = EnvironmentMaterializer(self.catalog, self.registry)
        return materializer.materialize(self._profile_id(profile_id), self.platform, self.ambient)

    def activate(self, profile_id: str | None = None) -> Activation:
        """Materialise a profile and describe it for an interactive shell.

        Args:
            profile_id: Profile to activate; the configured default when ``None``.

        Returns:
            Activation: Environment, dependency versions and suggested commands.
        """

        environment = self.materialize(profile_id)
        profile = self.registry.get(environment.profile_id)
        params = self.script_parameters(profile)
        versions = tuple(
            (name, descriptor.version or UNKNOWN_VERSION) for name, descriptor in environment.dependencies.items()
        )
        configure_line = " ".join(["./configure", *render_configure_flags(params.configure_flags, environment)])
        make_line = " ".join(["make", *make_arguments(params)])
        return Activation(
            profile=profile,
            environment=environment,
            versions=versions,
            next_commands=(configure_line, make_line),
        )

    def script_parameters(self, profile: Profile) -> ScriptParameters:
        """Return wrapper parameters for ``profile`` with configured overrides."""

        return replace(
            ScriptParameters.for_profile(profile),
            debug=self.settings.debug,
            jobs=self.settings.jobs,
            install_dir=str(self.settings.package_prefix),
            configure_hint=f"nmapenv run configure --profile {profile.id}",
            build_hint=f"nmapenv run build --profile {profile.id}",
        )

    def write_wrapper(
        self,
        kind: ScriptKind,
        profile_id: str | None = None,
        extra_args: Sequence[str] = (),
    ) -> tuple[ResolvedEnvironment, Path]:
        """Materialise the profile and write the ``kind`` wrapper script.

        Args:
            kind: Wrapper to emit.
            profile_id: Profile supplying paths and flags.
            extra_args: Extra arguments appended to ``./configure`` or ``make``.

        Returns:
            tuple[ResolvedEnvironment, Path]: Environment used and the written script path.
        """

        environment = self.materialize(profile_id)
        return environment, self._write_wrapper(ScriptKind(kind), environment, extra_args)

    def render_wrapper(
        self,
        kind: ScriptKind,
        profile_id: str | None = None,
        extra_args: Sequence[str] = (),
    ) -> str:
        """Return the ``kind`` wrapper text for a profile without writing it."""

        return self._render(ScriptKind(kind), self.materialize(profile_id), extra_args)

    def _render(self, kind: ScriptKind, environment: ResolvedEnvironment, extra_args: Sequence[str]) -> str:
        params = self.script_parameters(self.registry.get(environment.profile_id))
        if kind is ScriptKind.CONFIGURE:
            params = replace(params, extra_configure_args=tuple(extra_args))
        else:
            params = replace(params, extra_make_args=tuple(extra_args))
        return generate(kind, environment, params, registry=self.registry)

    def _write_wrapper(
        self,
        kind: ScriptKind,
        environment: ResolvedEnvironment,
        extra_args: Sequence[str],
    ) -> Path:
        text = self._render(kind, environment, extra_args)
        path = write_script(text, self.settings.script_dir / SCRIPT_NAMES[kind])
        LOGGER.debug("wrote %s wrapper for profile=%s to %s", kind, environment.profile_id, path)
        return path

    def run_app(self, app: AppName, profile_id: str | None = None, args: Sequence[str] = ()) -> int:
        """Run ``app`` and return its exit status.

        Args:
            app: Action to perform.
            profile_id: Profile for the configure and build wrappers; the packaged
                profile is always used for the scanner.
            args: Arguments forwarded to the scanner, ``./configure`` or ``make``.

        Returns:
            int: Exit status of the executed process.

        Raises:
            PreconditionUnmetError: If the build runs before configuration or the
                packaged scanner has not been installed.
        """

        app = AppName(app)
        if app is AppName.SCANNER:
            return self._run_scanner(args)
        kind = ScriptKind.CONFIGURE if app is AppName.CONFIGURE else ScriptKind.BUILD
        source_root = self.settings.source_root
        environment = self.materialize(profile_id)
        if kind is ScriptKind.BUILD and not (source_root / BUILD_CONTROL_FILE).is_file():
            raise PreconditionUnmetError(
                f"No {BUILD_CONTROL_FILE} found in {source_root}. "
                f"Run 'nmapenv run configure --profile {environment.profile_id}' first.",
            )
        script = self._write_wrapper(kind, environment, args)
        completed = run_command(
            [str(script)],
            options=CommandOptions(cwd=source_root, env=self._process_env(environment), check=False),
        )
        return completed.returncode

    def _run_scanner(self, args: Sequence[str]) -> int:
        environment = self.materialize(PACKAGED_PROFILE_ID)
        executable = self.settings.package_prefix / SCANNER_EXECUTABLE
        if not executable.is_file():
            raise PreconditionUnmetError(
                f"Packaged scanner not found at {executable}. "
                f"Run 'nmapenv run configure --profile {PACKAGED_PROFILE_ID}' and "
                f"'nmapenv run build --profile {PACKAGED_PROFILE_ID}' first.",
            )
        completed = run_command(
            [str(executable), *args],
            options=CommandOptions(env=self._process_env(environment), check=False),
        )
        return completed.returncode

    def spawn_shell(self, activation: Activation) -> int:
        """Start the user's shell inside ``activation``'s environment."""

        shell = self.ambient.get("SHELL") or DEFAULT_SHELL
        completed = run_command(
            [shell],
            options=CommandOptions(env=self._process_env(activation.environment), check=False),
        )
        return completed.returncode

    def _process_env(self, environment: ResolvedEnvironment) -> dict[str, str]:
        env = environment.apply(self.ambient)
        env[PROFILE_ENV_VAR] = environment.profile_id
        return env


__all__ = [
    "Activation",
    "AppName",
    "Dispatcher",
    "SCANNER_EXECUTABLE",
]
