"""BaseService — foundation for cmdunit services.

Every service receives a :class:`CommandHost` at construction time, and
optionally the :class:`PluginManager` whose lifecycle hooks it dispatches.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from cmdunit.engine.host import CommandHost
    from cmdunit.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class BaseService:
    """Base for service-layer classes."""

    def __init__(self, host: CommandHost, plugins: PluginManager | None = None) -> None:
        self._host = host
        self._plugins = plugins

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Dispatch a lifecycle hook. No-op without a plugin manager.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        if self._plugins is None:
            return
        try:
            getattr(self._plugins.hook, hook_name)(**payload)
        except Exception:
            logger.debug("Hook dispatch failed for %s", hook_name, exc_info=True)
            warnings.append(f"Hook dispatch failed for {hook_name}")
