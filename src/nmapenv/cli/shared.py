# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (error reporting, dispatcher wiring)."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

import typer

from ..config import Settings, load_settings
from ..dispatch import Dispatcher
from ..errors import DevEnvError
from ..logging import configure_logging, fail
from ..platform import PlatformTag
from ..process import SubprocessExecutionError

T = TypeVar("T")


@dataclass(slots=True)
class CLIContext:
    """Settings and dispatcher shared by a single command invocation."""

    settings: Settings
    dispatcher: Dispatcher
    use_emoji: bool


def build_context(
    root: Path,
    *,
    platform: PlatformTag | None = None,
    emoji: bool | None = None,
    verbose: bool = False,
) -> CLIContext:
    """Load settings for ``root`` and construct the dispatcher.

    Args:
        root: Project root supplied via CLI options.
        platform: Optional platform override.
        emoji: Explicit emoji preference; the configured value when ``None``.
        verbose: Whether debug logging is enabled.

    Returns:
        CLIContext: Context consumed by command implementations.
    """

    configure_logging(debug=verbose)
    use_emoji = True if emoji is None else emoji
    try:
        settings = load_settings(root.resolve())
    except DevEnvError as exc:
        fail(str(exc), use_emoji=use_emoji)
        raise typer.Exit(code=1) from exc
    if emoji is None:
        use_emoji = settings.emoji
    return CLIContext(
        settings=settings,
        dispatcher=Dispatcher(settings, platform=platform),
        use_emoji=use_emoji,
    )


def guarded(context: CLIContext, action: Callable[[], T]) -> T:
    """Run ``action`` and convert nmapenv failures into CLI exits.

    Args:
        context: Active CLI context (for emoji preferences).
        action: Zero-argument callable performing the command's work.

    Returns:
        T: Result of ``action``.

    Raises:
        typer.Exit: When ``action`` fails with a reportable error.
    """

    try:
        return action()
    except DevEnvError as exc:
        fail(str(exc), use_emoji=context.use_emoji)
        raise typer.Exit(code=1) from exc
    except FileNotFoundError as exc:
        fail(str(exc), use_emoji=context.use_emoji)
        raise typer.Exit(code=1) from exc
    except SubprocessExecutionError as exc:
        fail(str(exc), use_emoji=context.use_emoji)
        raise typer.Exit(code=exc.returncode or 1) from exc


__all__ = [
    "CLIContext",
    "build_context",
    "guarded",
]
