# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration model and layered loading (defaults, TOML, environment)."""

from __future__ import annotations

import os
import tomllib
from abc import abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .catalog import DEFAULT_SYSTEM_PREFIX
from .errors import ConfigError

PYPROJECT_FILENAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "nmapenv"
CONFIG_FILENAME: Final[str] = ".nmapenv.toml"
ENV_PREFIX: Final[str] = "NMAPENV_"
PATH_FIELDS: Final[tuple[str, ...]] = ("catalog", "source_root", "script_dir", "package_prefix")
DEFAULT_PATHS: Final[dict[str, str]] = {
    "source_root": ".",
    "script_dir": ".nmapenv/bin",
    "package_prefix": "install",
}


class Settings(BaseModel):
    """Effective configuration for one nmapenv invocation."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    catalog: Path | None = None
    catalog_prefix: str = DEFAULT_SYSTEM_PREFIX
    default_profile: str = "default"
    source_root: Path = Path(DEFAULT_PATHS["source_root"])
    script_dir: Path = Path(DEFAULT_PATHS["script_dir"])
    package_prefix: Path = Path(DEFAULT_PATHS["package_prefix"])
    jobs: int | None = Field(default=None, ge=1)
    debug: bool = True
    emoji: bool = True


@runtime_checkable
class ConfigSource(Protocol):
    """Provide one configuration fragment from disk or the environment."""

    name: str
    """Identifier describing the configuration source."""

    @abstractmethod
    def load(self) -> Mapping[str, Any]:
        """Return the configuration values contributed by this source.

        Returns:
            Mapping[str, Any]: Settings keys mapped to raw values.
        """

    @abstractmethod
    def describe(self) -> str:
        """Return a human-readable description used in error messages."""


class TomlConfigSource(ConfigSource):
    """Load configuration from a standalone TOML document."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self.name = str(path)

    def _read(self) -> Mapping[str, Any]:
        if not self.path.is_file():
            return {}
        try:
            with self.path.open("rb") as handle:
                return tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Configuration at {self.path} is not valid TOML: {exc}") from exc

    def load(self) -> Mapping[str, Any]:
        return self._read()

    def describe(self) -> str:
        return f"TOML configuration at {self.name}"


class PyProjectConfigSource(TomlConfigSource):
    """Read configuration from ``[tool.nmapenv]`` within ``pyproject.toml``."""

    def load(self) -> Mapping[str, Any]:
        tool_section = self._read().get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY)
        if not isinstance(section, Mapping):
            return {}
        return section

    def describe(self) -> str:
        return f"pyproject.toml ({self.name})"


class EnvironmentConfigSource(ConfigSource):
    """Read ``NMAPENV_*`` overrides from an environment mapping."""

    name = "environment"

    def __init__(self, env: Mapping[str, str]) -> None:
        self._env = env

    def load(self) -> Mapping[str, Any]:
        fragment: dict[str, Any] = {}
        for field_name in Settings.model_fields:
            value = self._env.get(f"{ENV_PREFIX}{field_name.upper()}")
            if value is not None and value != "":
                fragment[field_name] = value
        return fragment

    def describe(self) -> str:
        return f"{ENV_PREFIX}* environment variables"


class ConfigLoader:
    """Merge configuration sources, later sources overriding earlier ones."""

    def __init__(self, root: Path, sources: list[ConfigSource]) -> None:
        self.root = root
        self.sources = sources

    @classmethod
    def for_root(cls, root: Path, env: Mapping[str, str] | None = None) -> ConfigLoader:
        """Return the standard loader for ``root``.

        Args:
            root: Project root containing optional ``pyproject.toml`` and ``.nmapenv.toml``.
            env: Environment mapping consulted for overrides; defaults to ``os.environ``.

        Returns:
            ConfigLoader: Loader configured with the standard source order.
        """

        return cls(
            root,
            [
                PyProjectConfigSource(root / PYPROJECT_FILENAME),
                TomlConfigSource(root / CONFIG_FILENAME),
                EnvironmentConfigSource(os.environ if env is None else env),
            ],
        )

    def load(self) -> Settings:
        """Return validated settings with relative paths anchored on the root.

        Raises:
            ConfigError: If a source is malformed or a value fails validation.
        """

        merged: dict[str, Any] = {}
        for source in self.sources:
            fragment = source.load()
            unknown = sorted(set(fragment) - set(Settings.model_fields))
            if unknown:
                raise ConfigError(f"Unknown configuration keys in {source.describe()}: {', '.join(unknown)}")
            merged.update(fragment)
        for key, default in DEFAULT_PATHS.items():
            merged.setdefault(key, default)
        for key in PATH_FIELDS:
            value = merged.get(key)
            if value is None:
                continue
            if not isinstance(value, (str, Path)):
                raise ConfigError(f"Configuration key '{key}' must be a path string")
            merged[key] = self._anchor(Path(value))
        try:
            return Settings.model_validate(merged)
        except ValidationError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc

    def _anchor(self, path: Path) -> Path:
        expanded = path.expanduser()
        return expanded if expanded.is_absolute() else (self.root / expanded).resolve()


def load_settings(root: Path, env: Mapping[str, str] | None = None) -> Settings:
    """Load settings for ``root`` using the standard source order."""

    return ConfigLoader.for_root(root, env).load()


__all__ = [
    "CONFIG_FILENAME",
    "ENV_PREFIX",
    "ConfigLoader",
    "ConfigSource",
    "EnvironmentConfigSource",
    "PyProjectConfigSource",
    "Settings",
    "TomlConfigSource",
    "load_settings",
]
