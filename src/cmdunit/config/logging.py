"""Logging setup for the cmdunit CLI.

All log output goes to stderr so stdout carries only command output:

- human mode (default): structlog console rendering, colored on a TTY;
- JSON mode (``--log-json``): one JSON object per line.

The engine logs through plain ``logging.getLogger(__name__)`` loggers; those
records pass through the same structlog chain as structlog's own. While the
invocation service runs a command it binds ``command`` into structlog's
context vars, so every line logged during an invocation names its command.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from typing import Any

import structlog

PACKAGE_LOGGER = "cmdunit"
HANDLER_NAME = "cmdunit-stderr"
_QUIETED = ("pluggy",)


def _command_prefix(
    _logger: Any, _method: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Human mode: render a bound ``command`` as a ``[Verb-Noun]`` prefix."""
    command = event_dict.pop("command", None)
    if command:
        event_dict["event"] = f"[{command}] {event_dict.get('event', '')}"
    return event_dict


def _install_handler(handler: logging.Handler) -> None:
    """Attach *handler* to the root logger, replacing one installed earlier."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.WARNING)


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
) -> None:
    """Configure structlog processors and stderr routing.

    Safe to call more than once; each call replaces the handler installed by
    the previous one and leaves other root handlers alone.

    Args:
        verbose: DEBUG for ``cmdunit.*`` loggers (phase transitions, binding
            failures, plugin loading). Otherwise WARNING+.
        log_json: JSON lines instead of console rendering.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    final: list[structlog.types.Processor] = [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
    ]
    if log_json:
        final.append(structlog.processors.JSONRenderer())
    else:
        final += [_command_prefix, structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())]

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=final,
        )
    )
    _install_handler(handler)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIETED:
        logging.getLogger(name).setLevel(logging.WARNING)
