# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Profile listing and catalog diagnostics for the nmapenv CLI."""

from __future__ import annotations

from pathlib import Path

import typer
from rich import box
from rich.panel import Panel
from rich.table import Table

from ..console import detect_tty, get_console_manager
from ..logging import warn
from ..platform import PlatformTag
from .shared import build_context, guarded


def profiles_command(
    root: Path = typer.Option(Path.cwd(), "--root", "-r", help="Project root holding configuration."),
    platform: PlatformTag | None = typer.Option(None, "--platform", help="Platform tag override."),
) -> None:
    """List the build profiles and their dependencies on this platform."""

    context = build_context(root, platform=platform, emoji=False)
    dispatcher = context.dispatcher
    console = get_console_manager().get(color=detect_tty(), emoji=False)
    table = Table(title=f"Build profiles ({dispatcher.platform})", box=box.SIMPLE, expand=True)
    table.add_column("Profile", style="bold", no_wrap=True)
    table.add_column("Description")
    table.add_column("Target")
    table.add_column("Dependencies", overflow="fold")
    for profile in dispatcher.registry:
        marker = "*" if profile.id == context.settings.default_profile else ""
        target = profile.build_target or "-"
        if profile.packaged:
            target += " (packaged)"
        table.add_row(
            f"{profile.id}{marker}",
            profile.description,
            target,
            ", ".join(profile.dependency_names(dispatcher.platform)),
        )
    console.print(table)


def doctor_command(
    root: Path = typer.Option(Path.cwd(), "--root", "-r", help="Project root holding configuration."),
    platform: PlatformTag | None = typer.Option(None, "--platform", help="Platform tag override."),
) -> None:
    """Check that the catalog satisfies every profile; exit 1 otherwise."""

    context = build_context(root, platform=platform, emoji=False)
    dispatcher = context.dispatcher
    use_color = detect_tty()
    console = get_console_manager().get(color=use_color, emoji=False)
    catalog = guarded(context, lambda: dispatcher.catalog)
    missing = dispatcher.registry.missing_dependencies(catalog, dispatcher.platform)

    table = Table(title="Profile readiness", box=box.SIMPLE, expand=True)
    table.add_column("Profile", style="bold", no_wrap=True)
    table.add_column("Status", no_wrap=True)
    table.add_column("Missing", overflow="fold")
    for profile_id in dispatcher.registry.ids():
        absent = missing.get(profile_id, ())
        status = "[red]unresolved[/]" if absent else "[green]ok[/]"
        table.add_row(profile_id, status, ", ".join(absent) or "-")
    console.print(table)

    style = "red" if missing else "green"
    console.print(Panel(f"[{style}]{len(catalog)} catalog entries checked[/]", border_style=style))
    if missing:
        warn(f"{len(missing)} profile(s) cannot be materialised with this catalog", use_emoji=False)
        raise typer.Exit(code=1)


def register(app: typer.Typer) -> None:
    """Register the profile listing and doctor commands on ``app``."""

    app.command("profiles")(profiles_command)
    app.command("doctor")(doctor_command)


__all__ = ["doctor_command", "profiles_command", "register"]
