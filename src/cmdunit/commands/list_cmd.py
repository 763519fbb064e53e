"""Command: list the commands registered on the host."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cmdunit.commands._base import CuCommand

if TYPE_CHECKING:
    from cmdunit.commands._context import AppContext


@click.command(
    "list",
    cls=CuCommand,
    examples="""\
  cmdunit list
  cmdunit --json list""",
)
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List available commands and their parameters."""
    from cmdunit.services.invoke import InvocationService

    app.emit(InvocationService(app.host, app.plugins).list_commands())
