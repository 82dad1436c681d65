# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Implementation of the ``nmapenv env`` and ``nmapenv shell`` commands."""

from __future__ import annotations

from pathlib import Path

import typer
from rich import box
from rich.table import Table

from ..console import detect_tty, get_console_manager
from ..dispatch import Activation
from ..logging import info, ok, section
from ..platform import PlatformTag
from .shared import build_context, guarded


def env_command(
    profile: str | None = typer.Argument(None, help="Profile to materialise; defaults to the configured profile."),
    root: Path = typer.Option(Path.cwd(), "--root", "-r", help="Project root holding configuration."),
    platform: PlatformTag | None = typer.Option(None, "--platform", help="Platform tag override."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log materialisation details."),
) -> None:
    """Print ``export`` statements for a profile, suitable for ``eval``."""

    context = build_context(root, platform=platform, emoji=False, verbose=verbose)
    environment = guarded(context, lambda: context.dispatcher.materialize(profile))
    for line in environment.export_lines():
        typer.echo(line)


def render_activation(activation: Activation, *, use_emoji: bool) -> None:
    """Print the dependency versions and next steps of ``activation``."""

    use_color = detect_tty()
    info(
        f"nmap {activation.profile.description.lower()} ({activation.profile.id})",
        use_emoji=use_emoji,
        use_color=use_color,
    )
    table = Table(title="Available tools", box=box.SIMPLE)
    table.add_column("Dependency", style="bold", no_wrap=True)
    table.add_column("Version")
    for name, version in activation.versions:
        table.add_row(name, version)
    get_console_manager().get(color=use_color, emoji=use_emoji).print(table)
    section("Build commands", use_color=use_color)
    for command in activation.next_commands:
        typer.echo(f"  {command}")
    ok("Environment configured successfully!", use_emoji=use_emoji, use_color=use_color)


def shell_command(
    profile: str | None = typer.Argument(None, help="Profile to activate; defaults to the configured profile."),
    root: Path = typer.Option(Path.cwd(), "--root", "-r", help="Project root holding configuration."),
    platform: PlatformTag | None = typer.Option(None, "--platform", help="Platform tag override."),
    spawn: bool = typer.Option(True, "--spawn/--no-spawn", help="Start $SHELL inside the environment."),
    emoji: bool | None = typer.Option(None, "--emoji/--no-emoji", help="Toggle emoji in CLI output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log materialisation details."),
) -> None:
    """Summarise a profile and open an interactive shell inside it."""

    context = build_context(root, platform=platform, emoji=emoji, verbose=verbose)
    activation = guarded(context, lambda: context.dispatcher.activate(profile))
    render_activation(activation, use_emoji=context.use_emoji)
    if not spawn:
        return
    status = guarded(context, lambda: context.dispatcher.spawn_shell(activation))
    raise typer.Exit(code=status)


def register(app: typer.Typer) -> None:
    """Register the environment commands on ``app``."""

    app.command("env")(env_command)
    app.command("shell")(shell_command)


__all__ = ["env_command", "register", "render_activation", "shell_command"]
