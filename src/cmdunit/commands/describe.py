"""Command: show the parameter schema of one command."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cmdunit.commands._base import CuCommand

if TYPE_CHECKING:
    from cmdunit.commands._context import AppContext


@click.command(
    cls=CuCommand,
    examples="""\
  cmdunit describe Get-Echo
  cmdunit --json describe get-echo""",
)
@click.argument("name")
@click.pass_obj
def describe(app: AppContext, name: str) -> None:
    """Describe a command's parameters (name matching ignores case)."""
    from cmdunit.services.invoke import InvocationService

    app.emit(InvocationService(app.host, app.plugins).describe(name))
