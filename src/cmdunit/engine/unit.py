"""CommandUnit — the base class every hosted command extends.

Subclasses set :attr:`CommandUnit.schema` and override any of the three
lifecycle hooks. The host creates one instance per invocation and discards
it after the final phase.

Usage::

    class GetEcho(CommandUnit):
        schema = CommandSchema.build(
            "Get", "Echo", declare("InputObject", position=0, mandatory=True)
        )

        def on_process(self) -> None:
            self.write_output(self.bound["InputObject"])
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from cmdunit.engine.cancellation import CancellationToken

if TYPE_CHECKING:
    from cmdunit.domain.parameters import CommandSchema
    from cmdunit.engine.binding import BoundParameters
    from cmdunit.engine.sink import OutputSink


@dataclass
class InvocationContext:
    """Per-invocation state, built fresh by the host for every call.

    ``bound`` is replaced before each ``on_process`` call when records are
    streamed; the schema and sink stay the same for the whole invocation.
    """

    schema: CommandSchema
    bound: BoundParameters
    sink: OutputSink
    cancel: CancellationToken = field(default_factory=CancellationToken)


class CommandUnit:
    """Base for all hosted commands. All lifecycle hooks default to no-ops."""

    schema: ClassVar[CommandSchema]
    examples: ClassVar[str | None] = None

    def __init__(self, context: InvocationContext) -> None:
        self._context = context

    @property
    def bound(self) -> BoundParameters:
        """The values bound for the current record."""
        return self._context.bound

    @property
    def cancelled(self) -> bool:
        return self._context.cancel.cancelled

    def write_output(self, value: Any) -> None:
        """Emit *value* to the output sink unchanged."""
        self._context.sink.write(value)

    def on_begin(self) -> None:
        """Called once before any input is processed."""

    def on_process(self) -> None:
        """Called once per invocation, or once per streamed record."""

    def on_end(self) -> None:
        """Called once after processing completes (skipped on cancellation)."""
