"""Subcommand modules for cmdunit.

Provides register_commands() for the static commands. Hosted ``Verb-Noun``
commands are resolved on demand by :class:`~cmdunit.commands._base.HostGroup`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the static commands on the root CLI group."""
    from cmdunit.commands.describe import describe
    from cmdunit.commands.list_cmd import list_cmd

    cli.add_command(list_cmd)
    cli.add_command(describe)
