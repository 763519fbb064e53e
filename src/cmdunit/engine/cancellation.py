"""Cooperative cancellation observed by the host at phase boundaries."""

from __future__ import annotations

import threading


class CancellationToken:
    """Thread-safe cancellation flag.

    Another thread may call :meth:`cancel` at any time; the host checks
    :attr:`cancelled` only between lifecycle phases and between streamed
    records, never in the middle of one.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()
