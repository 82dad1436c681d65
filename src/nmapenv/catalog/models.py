# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Data models describing installed dependencies."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Interpreter = Literal["lua", "python"]


class DependencyDescriptor(BaseModel):
    """Resolved location and version data for one native library or tool."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    version: str | None = None
    prefix: str | None = None
    header_path: str | None = None
    library_path: str | None = None
    pkg_config_path: str | None = None
    runtime_data_paths: tuple[str, ...] = Field(default_factory=tuple)
    native_module_paths: tuple[str, ...] = Field(default_factory=tuple)
    interpreter: Interpreter | None = None

    @classmethod
    def under_prefix(
        cls,
        name: str,
        prefix: str,
        *,
        version: str | None = None,
        include: str | None = None,
        lib: str | None = None,
        pkgconfig: str | None = None,
        runtime_paths: Sequence[str] = (),
        native_paths: Sequence[str] = (),
        interpreter: Interpreter | None = None,
    ) -> DependencyDescriptor:
        """Construct a descriptor whose relative sub-paths live beneath ``prefix``.

        Args:
            name: Symbolic dependency name.
            prefix: Install root of the dependency.
            version: Installed version, when known.
            include: Header directory relative to ``prefix`` (absolute paths are kept).
            lib: Library directory relative to ``prefix``.
            pkgconfig: pkg-config metadata directory relative to ``prefix``.
            runtime_paths: Interpreter module paths or patterns relative to ``prefix``.
            native_paths: Interpreter native-module paths or patterns relative to ``prefix``.
            interpreter: Interpreter consuming ``runtime_paths`` and ``native_paths``.

        Returns:
            DependencyDescriptor: Descriptor with every path made absolute.
        """

        return cls(
            name=name,
            version=version,
            prefix=prefix,
            header_path=_join(prefix, include),
            library_path=_join(prefix, lib),
            pkg_config_path=_join(prefix, pkgconfig),
            runtime_data_paths=tuple(_join(prefix, entry) or entry for entry in runtime_paths),
            native_module_paths=tuple(_join(prefix, entry) or entry for entry in native_paths),
            interpreter=interpreter,
        )


def _join(prefix: str, relative: str | None) -> str | None:
    """Return ``relative`` joined onto ``prefix`` unless it is already absolute."""

    if relative is None:
        return None
    if relative.startswith("/"):
        return relative
    return f"{prefix.rstrip('/')}/{relative}"


__all__ = ["DependencyDescriptor", "Interpreter"]
