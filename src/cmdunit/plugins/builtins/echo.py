"""Built-in ``Get-Echo`` command.

Writes its single mandatory positional input to the output unchanged: the
emitted object is the bound object itself, never a copy or a conversion.
"""

from __future__ import annotations

import pluggy

from cmdunit.domain.parameters import CommandSchema, declare
from cmdunit.engine.unit import CommandUnit

hookimpl = pluggy.HookimplMarker("cmdunit")


class GetEcho(CommandUnit):
    """Return the input object unchanged."""

    schema = CommandSchema.build(
        "Get",
        "Echo",
        declare(
            "InputObject",
            position=0,
            mandatory=True,
            help="Any value; it is returned unchanged.",
        ),
        summary="Return the input object unchanged.",
    )
    examples = """\
  cmdunit Get-Echo hello
  cmdunit Get-Echo --InputObject hello
  printf '1\\n2\\n3\\n' | cmdunit Get-Echo --stream
  cmdunit --json Get-Echo 42
  cmdunit Get-Echo -- -5"""

    def on_process(self) -> None:
        self.write_output(self.bound["InputObject"])


class BuiltinCommandsPlugin:
    """Contributes the commands shipped with cmdunit."""

    @hookimpl
    def register_commands(self) -> list[type[CommandUnit]]:
        return [GetEcho]
