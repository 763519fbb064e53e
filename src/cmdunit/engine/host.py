"""CommandHost — registers command units and drives their lifecycle.

The host is the minimal runtime a command unit needs: it validates schemas
at registration, binds values, creates one unit per invocation, and calls
``on_begin`` -> ``on_process`` -> ``on_end`` in that order.

Cancellation is checked only at phase boundaries. Once cancelled, no further
phase runs (``on_end`` included) and :class:`InvocationCancelled` is raised.

Callers that want timing pass a *tracer*: ``tracer(name, **annotations)``
must return a context manager yielding an object with ``annotate(**values)``,
or ``None``. The host opens one span for binding and one per lifecycle call
(per record when streaming).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from contextlib import AbstractContextManager, nullcontext
from typing import Any

from cmdunit.domain.errors import (
    BindingCode,
    BindingError,
    CommandNotFoundError,
    ConfigurationError,
    InvocationCancelled,
)
from cmdunit.domain.parameters import CommandSchema
from cmdunit.domain.types import BindingSource, is_approved_verb
from cmdunit.engine.binding import BoundParameters, bind
from cmdunit.engine.cancellation import CancellationToken
from cmdunit.engine.sink import OutputSink
from cmdunit.engine.unit import CommandUnit, InvocationContext

logger = logging.getLogger(__name__)

Tracer = Callable[..., AbstractContextManager[Any]]


def untraced(name: str, **annotations: Any) -> AbstractContextManager[None]:
    """The default tracer: records nothing."""
    return nullcontext()


class CommandHost:
    """In-process registry and executor for command units.

    Parameters:
        strict_verbs: Reject commands whose verb is not approved instead of
            logging a warning.
    """

    def __init__(self, *, strict_verbs: bool = False) -> None:
        self._strict_verbs = strict_verbs
        self._commands: dict[str, type[CommandUnit]] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, unit_cls: type[CommandUnit]) -> CommandSchema:
        """Make *unit_cls* available under its schema's command name.

        Registering the same class twice is a no-op.

        Raises:
            ConfigurationError: If the class is not a CommandUnit, has no
                valid schema, uses an unapproved verb in strict mode, or its
                name is already taken by a different class.
        """
        if not isinstance(unit_cls, type) or not issubclass(unit_cls, CommandUnit):
            msg = f"{unit_cls!r} is not a CommandUnit subclass"
            raise ConfigurationError(msg)

        schema = getattr(unit_cls, "schema", None)
        if not isinstance(schema, CommandSchema):
            msg = f"{unit_cls.__name__} does not declare a CommandSchema"
            raise ConfigurationError(msg)

        if not is_approved_verb(schema.verb):
            if self._strict_verbs:
                msg = f"{schema.name} uses unapproved verb {schema.verb!r}"
                raise ConfigurationError(msg, command=schema.name)
            logger.warning("Command %s uses unapproved verb %r", schema.name, schema.verb)

        key = schema.name.casefold()
        existing = self._commands.get(key)
        if existing is not None and existing is not unit_cls:
            msg = f"Command {schema.name!r} is already registered by {existing.__name__}"
            raise ConfigurationError(msg, command=schema.name)

        self._commands[key] = unit_cls
        logger.debug("Registered command %s (%s)", schema.name, unit_cls.__name__)
        return schema

    def unregister(self, name: str) -> None:
        self._commands.pop(name.casefold(), None)

    def get(self, name: str) -> type[CommandUnit]:
        """Return the unit class registered as *name* (case-insensitive).

        Raises:
            CommandNotFoundError: If nothing is registered under *name*.
        """
        try:
            return self._commands[name.casefold()]
        except KeyError:
            raise CommandNotFoundError(name) from None

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.casefold() in self._commands

    def names(self) -> list[str]:
        """Registered command names, in their declared spelling."""
        return [cls.schema.name for cls in self._commands.values()]

    def schemas(self) -> list[CommandSchema]:
        return [cls.schema for cls in self._commands.values()]

    # ------------------------------------------------------------------
    # Invocation
    # ------------------------------------------------------------------

    def invoke(
        self,
        name: str,
        /,
        positional: Sequence[Any] = (),
        named: Mapping[str, Any] | None = None,
        *,
        sink: OutputSink | None = None,
        cancel: CancellationToken | None = None,
        tracer: Tracer = untraced,
    ) -> list[Any]:
        """Run a single-value invocation and return the values it emitted.

        *named* is a plain mapping of parameter name to value, so a command
        may declare parameters called ``sink``, ``cancel`` or ``tracer``
        without clashing with the host's own arguments.

        Raises:
            CommandNotFoundError: Unknown command.
            BindingError: The values do not satisfy the schema. The unit is
                never constructed and nothing is emitted.
            InvocationCancelled: *cancel* was set at a phase boundary.
        """
        unit_cls = self.get(name)
        schema = unit_cls.schema
        with tracer("bind", command=schema.name) as span:
            bound = bind(schema, positional, named)
            _annotate_sources(span, bound)

        context = self._new_context(schema, bound, sink, cancel)
        start = len(context.sink)

        self._checkpoint(context, "on_begin")
        unit = unit_cls(context)
        self._run_phase(context, "on_begin", unit.on_begin, tracer)

        self._checkpoint(context, "on_process")
        self._run_phase(context, "on_process", unit.on_process, tracer)

        self._checkpoint(context, "on_end")
        self._run_phase(context, "on_end", unit.on_end, tracer)

        return context.sink.values()[start:]

    def invoke_stream(
        self,
        name: str,
        records: Iterable[Any],
        /,
        positional: Sequence[Any] = (),
        named: Mapping[str, Any] | None = None,
        *,
        parameter: str | None = None,
        sink: OutputSink | None = None,
        cancel: CancellationToken | None = None,
        tracer: Tracer = untraced,
    ) -> list[Any]:
        """Stream *records* through one unit instance.

        Each record is bound to *parameter* (default: the parameter at
        position 0) and ``on_process`` runs once per record, in order.
        *positional* and *named* are bound once, before ``on_begin``.

        Raises:
            ConfigurationError: No *parameter* was given and the command has
                no position-0 parameter to stream into.
            BindingError: The fixed arguments do not satisfy the schema, or
                *parameter* is unknown.
            InvocationCancelled: *cancel* was set at a phase boundary.
        """
        unit_cls = self.get(name)
        schema = unit_cls.schema
        target = self._stream_target(schema, parameter)
        with tracer("bind", command=schema.name, streamed=target) as span:
            base = bind(schema, positional, named, deferred=[target])
            _annotate_sources(span, base)

        context = self._new_context(schema, base, sink, cancel)
        start = len(context.sink)

        self._checkpoint(context, "on_begin")
        unit = unit_cls(context)
        self._run_phase(context, "on_begin", unit.on_begin, tracer)

        count = 0
        for count, record in enumerate(records, start=1):
            self._checkpoint(context, "on_process")
            context.bound = base.with_value(target, record, BindingSource.PIPELINE)
            self._run_phase(
                context,
                "on_process",
                unit.on_process,
                tracer,
                record=count - 1,
                binding_source=BindingSource.PIPELINE.value,
            )
        logger.debug("%s: streamed %d record(s) into %s", schema.name, count, target)

        self._checkpoint(context, "on_end")
        self._run_phase(context, "on_end", unit.on_end, tracer)

        return context.sink.values()[start:]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def _new_context(
        schema: CommandSchema,
        bound: BoundParameters,
        sink: OutputSink | None,
        cancel: CancellationToken | None,
    ) -> InvocationContext:
        return InvocationContext(
            schema=schema,
            bound=bound,
            sink=sink if sink is not None else OutputSink(),
            cancel=cancel or CancellationToken(),
        )

    @staticmethod
    def _run_phase(
        context: InvocationContext,
        phase: str,
        hook: Callable[[], None],
        tracer: Tracer,
        **annotations: Any,
    ) -> None:
        logger.debug("%s: %s", context.schema.name, phase)
        with tracer(phase, **annotations) as span:
            before = len(context.sink)
            hook()
            if span is not None:
                span.annotate(emitted=len(context.sink) - before)

    @staticmethod
    def _stream_target(schema: CommandSchema, parameter: str | None) -> str:
        if parameter is None:
            param = schema.at_position(0)
            if param is None:
                msg = f"{schema.name} has no position-0 parameter to stream into"
                raise ConfigurationError(msg, command=schema.name)
            return param.name

        param = schema.lookup(parameter)
        if param is None:
            raise BindingError(
                BindingCode.UNKNOWN_PARAMETER,
                parameter,
                f"{schema.name}: no parameter named {parameter!r}",
                command=schema.name,
            )
        return param.name

    @staticmethod
    def _checkpoint(context: InvocationContext, phase: str) -> None:
        if context.cancel.cancelled:
            logger.debug("%s: cancelled before %s", context.schema.name, phase)
            raise InvocationCancelled(context.schema.name, phase)


def _annotate_sources(span: Any, bound: BoundParameters) -> None:
    if span is not None:
        span.annotate(sources={key: bound.source(key).value for key in bound})
