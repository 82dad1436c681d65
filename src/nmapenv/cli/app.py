# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring commands and shared services."""

from __future__ import annotations

import typer

from . import env, profiles, run

app = typer.Typer(
    help="Reproducible development environments for building nmap.",
    no_args_is_help=True,
    add_completion=False,
)

env.register(app)
run.register(app)
profiles.register(app)


def main() -> None:
    """Invoke the nmapenv CLI."""

    app()


__all__ = ["app", "main"]
