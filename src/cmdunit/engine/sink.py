"""OutputSink — the ordered, append-only channel a command writes to."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any


class OutputSink:
    """Append-only ordered channel.

    Values are stored exactly as written (no copy, no coercion). If a
    *downstream* callback is supplied, each value is forwarded to it as soon
    as it is written, in emission order.
    """

    def __init__(self, downstream: Callable[[Any], None] | None = None) -> None:
        self._values: list[Any] = []
        self._downstream = downstream

    def write(self, value: Any) -> None:
        self._values.append(value)
        if self._downstream is not None:
            self._downstream(value)

    def values(self) -> list[Any]:
        """Return a new list of the values written so far, in order."""
        return list(self._values)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._values))

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"OutputSink(count={len(self._values)})"
