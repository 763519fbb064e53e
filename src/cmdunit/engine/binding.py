"""Parameter binding — match supplied values against a CommandSchema.

Values are bound either by explicit name or by position, never both for
the same parameter. Mandatory parameters without a value are an error,
never a silent default.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import Any

from cmdunit.domain.errors import BindingCode, BindingError
from cmdunit.domain.parameters import CommandSchema
from cmdunit.domain.types import BindingSource

logger = logging.getLogger(__name__)


class BoundParameters(Mapping[str, Any]):
    """Immutable mapping of declared parameter name -> bound value.

    Keys always use the declared spelling. :meth:`source` reports whether a
    value was bound by name or by position.
    """

    def __init__(
        self,
        values: Mapping[str, Any],
        sources: Mapping[str, BindingSource],
    ) -> None:
        self._values = MappingProxyType(dict(values))
        self._sources = MappingProxyType(dict(sources))

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def source(self, name: str) -> BindingSource:
        return self._sources[name]

    def with_value(self, name: str, value: Any, source: BindingSource) -> BoundParameters:
        """Return a copy with *name* bound to *value* (used for streamed records)."""
        values = dict(self._values)
        sources = dict(self._sources)
        values[name] = value
        sources[name] = source
        return BoundParameters(values, sources)

    def __repr__(self) -> str:
        return f"BoundParameters({dict(self._values)!r})"


def bind(
    schema: CommandSchema,
    positional: Sequence[Any] = (),
    named: Mapping[str, Any] | None = None,
    *,
    deferred: Iterable[str] = (),
) -> BoundParameters:
    """Bind *positional* and *named* values to *schema*.

    Args:
        schema: The command's declared parameters.
        positional: Unnamed values; slot *i* binds to the declaration whose
            position is *i*.
        named: Values keyed by parameter name (case-insensitive).
        deferred: Parameter names that will be supplied later (streamed
            records). They are exempt from the mandatory check here, and
            supplying them now is a duplicate binding.

    Raises:
        BindingError: On an unknown name, an extra positional value, a
            parameter bound twice, or a missing mandatory value.
    """
    values: dict[str, Any] = {}
    sources: dict[str, BindingSource] = {}
    deferred_names = {name.casefold() for name in deferred}

    for key, value in (named or {}).items():
        param = schema.lookup(key)
        if param is None:
            raise BindingError(
                BindingCode.UNKNOWN_PARAMETER,
                key,
                f"{schema.name}: no parameter named {key!r}",
                command=schema.name,
            )
        if param.name in values:
            raise BindingError(
                BindingCode.DUPLICATE_BINDING,
                param.name,
                f"{schema.name}: parameter {param.name!r} supplied more than once",
                command=schema.name,
            )
        values[param.name] = value
        sources[param.name] = BindingSource.NAME

    for slot, value in enumerate(positional):
        param = schema.at_position(slot)
        if param is None:
            raise BindingError(
                BindingCode.EXTRA_POSITIONAL,
                str(slot),
                f"{schema.name}: no parameter accepts a value at position {slot}",
                command=schema.name,
            )
        if param.name in values:
            raise BindingError(
                BindingCode.DUPLICATE_BINDING,
                param.name,
                f"{schema.name}: parameter {param.name!r} bound by both name and position",
                command=schema.name,
            )
        values[param.name] = value
        sources[param.name] = BindingSource.POSITION

    for name in list(values):
        if name.casefold() in deferred_names:
            raise BindingError(
                BindingCode.DUPLICATE_BINDING,
                name,
                f"{schema.name}: parameter {name!r} is streamed and cannot also be supplied",
                command=schema.name,
            )

    for param in schema.mandatory():
        if param.name in values or param.name.casefold() in deferred_names:
            continue
        logger.debug("Missing mandatory parameter %s for %s", param.name, schema.name)
        raise BindingError(
            BindingCode.MISSING_MANDATORY,
            param.name,
            f"{schema.name}: missing mandatory parameter {param.name!r}",
            command=schema.name,
        )

    return BoundParameters(values, sources)
