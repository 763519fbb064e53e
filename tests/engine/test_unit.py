"""Tests for CommandUnit and CancellationToken outside a host."""

import threading

from cmdunit.engine.binding import bind
from cmdunit.engine.cancellation import CancellationToken
from cmdunit.engine.sink import OutputSink
from cmdunit.engine.unit import CommandUnit, InvocationContext
from cmdunit.plugins.builtins.echo import GetEcho


def _context(value: object) -> InvocationContext:
    return InvocationContext(
        schema=GetEcho.schema,
        bound=bind(GetEcho.schema, [value]),
        sink=OutputSink(),
    )


class TestCommandUnit:
    def test_base_hooks_do_nothing(self) -> None:
        context = _context("x")
        unit = CommandUnit(context)
        unit.on_begin()
        unit.on_process()
        unit.on_end()
        assert len(context.sink) == 0

    def test_write_output_goes_to_sink(self) -> None:
        context = _context("x")
        GetEcho(context).on_process()
        assert context.sink.values() == ["x"]

    def test_bound_follows_context(self) -> None:
        context = _context("first")
        unit = GetEcho(context)
        context.bound = bind(GetEcho.schema, ["second"])
        assert unit.bound["InputObject"] == "second"

    def test_cancelled_reflects_token(self) -> None:
        context = _context("x")
        unit = CommandUnit(context)
        assert unit.cancelled is False
        context.cancel.cancel()
        assert unit.cancelled is True


class TestCancellationToken:
    def test_starts_uncancelled(self) -> None:
        assert CancellationToken().cancelled is False

    def test_cancel_from_other_thread(self) -> None:
        token = CancellationToken()
        worker = threading.Thread(target=token.cancel)
        worker.start()
        worker.join()
        assert token.cancelled is True
