"""Invocation telemetry — a span tree per service call.

When enabled (``--verbose``), each traced service method opens a root span
named after its operation and annotated with the command it ran. The host
adds children through :func:`trace_span`:

- ``bind``: the binding step, annotated with each parameter's source;
- ``on_begin`` / ``on_process`` / ``on_end``: one span per lifecycle call,
  annotated with how many values it emitted. Streamed invocations get one
  ``on_process`` span per record, carrying the record index and the
  ``pipeline`` binding source.

The finished tree is placed in ``ServiceResult.meta["telemetry"]``. When
disabled, each span costs a single ContextVar read.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Generator, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from cmdunit.services.result import ServiceResult

_enabled: ContextVar[bool] = ContextVar("cmdunit_telemetry_enabled", default=False)
_active: ContextVar[Span | None] = ContextVar("cmdunit_active_span", default=None)

log = structlog.get_logger("cmdunit.telemetry")


@dataclass
class Span:
    """One timed step of an invocation."""

    name: str
    annotations: dict[str, Any] = field(default_factory=dict)
    children: list[Span] = field(default_factory=list)
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None

    @property
    def duration_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def finish(self) -> None:
        self.finished = time.perf_counter()

    def annotate(self, **values: Any) -> None:
        self.annotations.update(values)

    def child(self, name: str, **annotations: Any) -> Span:
        span = Span(name=name, annotations=dict(annotations))
        self.children.append(span)
        return span

    def walk(self) -> Iterator[Span]:
        """Yield this span and every descendant, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "name": self.name,
            "duration_ms": round(self.duration_ms, 2),
        }
        if self.annotations:
            result["annotations"] = self.annotations
        if self.children:
            result["children"] = [c.to_dict() for c in self.children]
        return result


@contextmanager
def trace_span(name: str, **annotations: Any) -> Generator[Span | None]:
    """Open a child span of the active span.

    Yields None when telemetry is disabled or no root span is active, so
    callers guard annotation with ``if span is not None``. A span whose body
    raises is annotated with the exception type before it closes.
    """
    if not _enabled.get():
        yield None
        return

    parent = _active.get()
    if parent is None:
        yield None
        return

    span = parent.child(name, **annotations)
    token = _active.set(span)
    try:
        yield span
    except Exception as exc:
        span.annotate(error=type(exc).__name__)
        raise
    finally:
        span.finish()
        _active.reset(token)


def _log_root(span: Span, *, ok: bool) -> None:
    log.debug(
        "invocation.traced",
        op=span.name,
        command=span.annotations.get("command"),
        duration_ms=round(span.duration_ms, 2),
        ok=ok,
        phases=[s.name for s in span.walk() if s is not span],
    )


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Decorator: run a service method under a root span named after it.

    When the method returns a :class:`ServiceResult`, the root span is
    annotated with the result's command and the tree is merged into
    ``result.meta``. No-op when telemetry is disabled.
    """

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        root = Span(name=func.__name__)
        token = _active.set(root)
        try:
            result = func(*args, **kwargs)
        except Exception:
            root.finish()
            _log_root(root, ok=False)
            raise
        finally:
            _active.reset(token)

        root.finish()
        if not isinstance(result, ServiceResult):
            _log_root(root, ok=True)
            return result

        command = (result.data or {}).get("command")
        if command is not None:
            root.annotate(command=command)
        _log_root(root, ok=result.ok)
        meta = {**(result.meta or {}), "telemetry": root.to_dict()}
        return result.model_copy(update={"meta": meta})  # type: ignore[return-value]

    return wrapper


def enable_telemetry() -> None:
    """Turn on span collection (called by AppContext for ``--verbose``)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)
