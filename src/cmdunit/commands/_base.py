"""Custom Click base classes with --examples support and hosted commands.

Provides CuCommand and CuGroup that accept an ``examples`` parameter.
When ``--examples`` is passed, the command prints usage examples and exits.

HostGroup additionally resolves subcommands that are not statically
registered against the CommandHost, so every hosted ``Verb-Noun`` command
is reachable as ``cmdunit Verb-Noun ...``.
"""

from __future__ import annotations

from typing import Any

import click


def _add_examples_option(cmd: click.Command | click.Group, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class CuCommand(click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class CuGroup(click.Group):
    """Click Group subclass that supports an ``--examples`` flag.

    Sets ``command_class = CuCommand`` so all subcommands automatically
    accept the ``examples`` parameter without explicit ``cls=`` each time.
    """

    command_class = CuCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class HostGroup(CuGroup):
    """Root group that falls back to the CommandHost for unknown names.

    Subcommand resolution happens before the group callback runs, so the
    AppContext is created here from the already-parsed root flags when it
    does not exist yet.
    """

    def list_commands(self, ctx: click.Context) -> list[str]:
        from cmdunit.commands._context import ensure_app

        static = super().list_commands(ctx)
        hosted = sorted(ensure_app(ctx).host.names(), key=str.casefold)
        return static + [name for name in hosted if name not in static]

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        cmd = super().get_command(ctx, cmd_name)
        if cmd is not None:
            return cmd

        from cmdunit.commands._adapter import build_command
        from cmdunit.commands._context import ensure_app

        host = ensure_app(ctx).host
        if cmd_name not in host:
            return None
        return build_command(host.get(cmd_name))
