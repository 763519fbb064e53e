"""Pluggy hook specifications for cmdunit.

One setup-time hook lets plugins contribute command units to the host.
One lifecycle hook is dispatched after every invocation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from cmdunit.engine.unit import CommandUnit

hookspec = pluggy.HookspecMarker("cmdunit")


class CmdunitHookSpec:
    """Hook specifications for the cmdunit plugin system."""

    @hookspec
    def register_commands(self) -> list[type[CommandUnit]] | None:
        """Return CommandUnit subclasses to make available on the host."""

    @hookspec
    def post_invoke(self, command: str, output_count: int, ok: bool) -> None:
        """Called after an invocation finishes, successfully or not."""
