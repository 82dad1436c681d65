# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Implementation of the ``nmapenv run`` and ``nmapenv generate`` commands."""

from __future__ import annotations

from pathlib import Path

import typer

from ..dispatch import AppName
from ..logging import fail, info, ok
from ..platform import PlatformTag
from ..scripts import ScriptKind
from .shared import build_context, guarded

PASSTHROUGH_SETTINGS = {"allow_extra_args": True, "ignore_unknown_options": True}


def run_app_command(
    app: AppName = typer.Argument(..., help="Action to run: scanner, configure or build."),
    args: list[str] | None = typer.Argument(None, help="Arguments forwarded to nmap, ./configure or make."),
    profile: str | None = typer.Option(None, "--profile", "-p", help="Build profile for configure and build."),
    root: Path = typer.Option(Path.cwd(), "--root", "-r", help="Project root holding the nmap sources."),
    platform: PlatformTag | None = typer.Option(None, "--platform", help="Platform tag override."),
    emoji: bool | None = typer.Option(None, "--emoji/--no-emoji", help="Toggle emoji in CLI output."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log materialisation and process details."),
) -> None:
    """Run the packaged scanner or the configure/build wrappers."""

    context = build_context(root, platform=platform, emoji=emoji, verbose=verbose)
    if app is not AppName.SCANNER:
        info(f"Running {app} for profile {profile or context.settings.default_profile}...", use_emoji=context.use_emoji)
    status = guarded(context, lambda: context.dispatcher.run_app(app, profile, tuple(args or ())))
    if status != 0:
        if app is not AppName.SCANNER:
            fail(f"{app} exited with status {status}", use_emoji=context.use_emoji)
        raise typer.Exit(code=status)
    if app is not AppName.SCANNER:
        ok(f"{app.capitalize()} finished.", use_emoji=context.use_emoji)


def generate_command(
    kind: ScriptKind = typer.Argument(..., help="Wrapper to write: configure or build."),
    profile: str | None = typer.Option(None, "--profile", "-p", help="Build profile supplying paths and flags."),
    root: Path = typer.Option(Path.cwd(), "--root", "-r", help="Project root holding configuration."),
    platform: PlatformTag | None = typer.Option(None, "--platform", help="Platform tag override."),
    stdout: bool = typer.Option(False, "--stdout", help="Print the script instead of writing it."),
    emoji: bool | None = typer.Option(None, "--emoji/--no-emoji", help="Toggle emoji in CLI output."),
) -> None:
    """Write a configure or build wrapper script for a profile."""

    context = build_context(root, platform=platform, emoji=emoji)
    dispatcher = context.dispatcher
    if stdout:
        typer.echo(guarded(context, lambda: dispatcher.render_wrapper(kind, profile)), nl=False)
        return
    _, path = guarded(context, lambda: dispatcher.write_wrapper(kind, profile))
    ok(f"Wrote {kind} wrapper to {path}", use_emoji=context.use_emoji)


def register(app: typer.Typer) -> None:
    """Register the run and generate commands on ``app``."""

    app.command("run", context_settings=PASSTHROUGH_SETTINGS)(run_app_command)
    app.command("generate")(generate_command)


__all__ = ["PASSTHROUGH_SETTINGS", "generate_command", "register", "run_app_command"]
