"""Build a Click command from a CommandUnit's schema.

Click only collects the raw values: every positional token and every
``--<Parameter>`` option. Binding rules (mandatory, position, duplicates)
are left to the host so the CLI and the Python API behave identically.
Option names are matched case-insensitively. Values that start with "-"
must follow a "--" separator, as with any Click command.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click

from cmdunit.commands._base import CuCommand

if TYPE_CHECKING:
    from cmdunit.commands._context import AppContext
    from cmdunit.engine.unit import CommandUnit


def _positional_metavar(unit_cls: type[CommandUnit]) -> str:
    positional = sorted(
        (p for p in unit_cls.schema.parameters if p.position is not None),
        key=lambda p: p.position or 0,
    )
    return " ".join(f"[{p.name.upper()}]" for p in positional) or "[VALUES]"


def build_command(unit_cls: type[CommandUnit]) -> click.Command:
    """Return a Click command that invokes *unit_cls* through the host."""
    schema = unit_cls.schema
    option_names: dict[str, str] = {}
    params: list[click.Parameter] = [
        click.Argument(["positional"], nargs=-1, metavar=_positional_metavar(unit_cls)),
    ]
    for index, decl in enumerate(schema.parameters):
        dest = f"param_{index}"
        option_names[dest] = decl.name
        suffix = " [mandatory]" if decl.mandatory else ""
        params.append(
            click.Option(
                [f"--{decl.name}", dest],
                default=None,
                help=f"{decl.help}{suffix}".strip(),
            )
        )
    params.append(
        click.Option(
            ["--stream", "stream_records"],
            is_flag=True,
            help="Read records from stdin (one per line) and stream them through the command.",
        )
    )

    def callback(positional: tuple[str, ...], stream_records: bool, **values: Any) -> None:
        from cmdunit.commands._context import ensure_app
        from cmdunit.services.invoke import InvocationService

        app: AppContext = ensure_app(click.get_current_context())
        named = {option_names[dest]: v for dest, v in values.items() if v is not None}
        svc = InvocationService(app.host, app.plugins)
        if stream_records:
            stdin = click.get_text_stream("stdin")
            records = (line.rstrip("\r\n") for line in stdin)
            app.emit(svc.invoke_stream(schema.name, records, positional, named))
        else:
            app.emit(svc.invoke(schema.name, positional, named))

    return CuCommand(
        name=schema.name,
        params=params,
        callback=callback,
        help=schema.summary or None,
        epilog=f"Put -- before values that start with a dash: cmdunit {schema.name} -- -5",
        examples=unit_cls.examples,
        context_settings={"token_normalize_func": str.casefold},
    )
