"""InvocationService — run hosted commands and report a ServiceResult.

Engine errors are mapped to error codes here:

- ``BINDING_ERROR``: values did not satisfy the schema; nothing ran.
- ``CONFIGURATION_ERROR``: the command (or stream target) is misdeclared.
- ``NOT_FOUND``: no such command.
- ``CANCELLED``: cancellation observed at a phase boundary.
- ``COMMAND_ERROR``: a unit's own hook raised. Output emitted before the
  failure is kept in ``data["output"]``.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import structlog

from cmdunit.domain.errors import (
    BindingError,
    CommandNotFoundError,
    CommandUnitError,
    ConfigurationError,
    InvocationCancelled,
)
from cmdunit.domain.parameters import CommandSchema
from cmdunit.engine.cancellation import CancellationToken
from cmdunit.engine.sink import OutputSink
from cmdunit.services.base import BaseService
from cmdunit.services.result import ServiceError, ServiceResult
from cmdunit.services.telemetry import trace_span, traced

logger = logging.getLogger(__name__)


def _error_for(exc: Exception, command: str | None = None) -> ServiceError:
    if isinstance(exc, BindingError):
        return ServiceError(
            code="BINDING_ERROR",
            message=str(exc),
            detail={
                "parameter": exc.parameter,
                "binding_code": exc.code.value,
                "command": exc.command,
            },
        )
    if isinstance(exc, ConfigurationError):
        return ServiceError(
            code="CONFIGURATION_ERROR",
            message=str(exc),
            detail={"command": exc.command},
        )
    if isinstance(exc, CommandNotFoundError):
        return ServiceError(code="NOT_FOUND", message=str(exc), detail={"command": exc.name})
    if isinstance(exc, InvocationCancelled):
        return ServiceError(
            code="CANCELLED",
            message=str(exc),
            detail={"command": exc.command, "phase": exc.phase},
        )
    return ServiceError(
        code="COMMAND_ERROR",
        message=str(exc) or type(exc).__name__,
        detail={"command": command, "exception": type(exc).__name__},
    )


def _describe_schema(schema: CommandSchema) -> dict[str, Any]:
    return {
        "name": schema.name,
        "verb": schema.verb,
        "noun": schema.noun,
        "summary": schema.summary,
        "parameters": [p.model_dump() for p in schema.parameters],
    }


class InvocationService(BaseService):
    """Invoke, list, and describe the commands registered on a host."""

    @traced
    def invoke(
        self,
        name: str,
        positional: Sequence[Any] = (),
        named: Mapping[str, Any] | None = None,
        *,
        cancel: CancellationToken | None = None,
    ) -> ServiceResult:
        """Run a single-value invocation of *name*."""
        sink = OutputSink()
        with structlog.contextvars.bound_contextvars(command=name):
            try:
                self._host.invoke(
                    name,
                    positional,
                    named,
                    sink=sink,
                    cancel=cancel,
                    tracer=trace_span,
                )
            except CommandUnitError as exc:
                return self._failure("invoke", name, sink, exc)
            except Exception as exc:
                logger.debug("%s raised %s", name, type(exc).__name__, exc_info=True)
                return self._failure("invoke", name, sink, exc)
        return self._success("invoke", name, sink)

    @traced
    def invoke_stream(
        self,
        name: str,
        records: Iterable[Any],
        positional: Sequence[Any] = (),
        named: Mapping[str, Any] | None = None,
        *,
        parameter: str | None = None,
        cancel: CancellationToken | None = None,
    ) -> ServiceResult:
        """Stream *records* through one instance of *name*."""
        sink = OutputSink()
        with structlog.contextvars.bound_contextvars(command=name):
            try:
                self._host.invoke_stream(
                    name,
                    records,
                    positional,
                    named,
                    parameter=parameter,
                    sink=sink,
                    cancel=cancel,
                    tracer=trace_span,
                )
            except CommandUnitError as exc:
                return self._failure("invoke_stream", name, sink, exc)
            except Exception as exc:
                logger.debug("%s raised %s", name, type(exc).__name__, exc_info=True)
                return self._failure("invoke_stream", name, sink, exc)
        return self._success("invoke_stream", name, sink)

    def list_commands(self) -> ServiceResult:
        """List every registered command with its parameter schema."""
        commands = [_describe_schema(s) for s in self._host.schemas()]
        commands.sort(key=lambda c: c["name"].casefold())
        return ServiceResult(
            ok=True,
            op="list_commands",
            data={"commands": commands, "count": len(commands)},
        )

    def describe(self, name: str) -> ServiceResult:
        """Return the full schema of *name*."""
        try:
            unit_cls = self._host.get(name)
        except CommandNotFoundError as exc:
            return ServiceResult(ok=False, op="describe_command", error=_error_for(exc))
        data = _describe_schema(unit_cls.schema)
        if unit_cls.examples:
            data["examples"] = unit_cls.examples
        return ServiceResult(ok=True, op="describe_command", data=data)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _success(self, op: str, name: str, sink: OutputSink) -> ServiceResult:
        warnings: list[str] = []
        output = sink.values()
        self._dispatch_event(
            "post_invoke",
            {"command": name, "output_count": len(output), "ok": True},
            warnings,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={"command": name, "output": output, "count": len(output)},
            warnings=warnings,
        )

    def _failure(
        self,
        op: str,
        name: str,
        sink: OutputSink,
        exc: Exception,
    ) -> ServiceResult:
        logger.info("%s %s failed: %s", op, name, exc)
        warnings: list[str] = []
        output = sink.values()
        self._dispatch_event(
            "post_invoke",
            {"command": name, "output_count": len(output), "ok": False},
            warnings,
        )
        return ServiceResult(
            ok=False,
            op=op,
            data={"command": name, "output": output, "count": len(output)},
            warnings=warnings,
            error=_error_for(exc, name),
        )
