"""Error taxonomy for command units.

Binding errors are fatal to a single invocation; configuration errors are
fatal to command availability. Neither is retried.
"""

from __future__ import annotations

from enum import StrEnum


class BindingCode(StrEnum):
    """Why a set of values could not be bound to a schema."""

    MISSING_MANDATORY = "MISSING_MANDATORY"
    UNKNOWN_PARAMETER = "UNKNOWN_PARAMETER"
    EXTRA_POSITIONAL = "EXTRA_POSITIONAL"
    DUPLICATE_BINDING = "DUPLICATE_BINDING"


class CommandUnitError(Exception):
    """Base class for every error raised by cmdunit."""


class ConfigurationError(CommandUnitError):
    """A command schema is malformed, or a command cannot be registered."""

    def __init__(self, message: str, *, command: str | None = None) -> None:
        super().__init__(message)
        self.command = command


class BindingError(CommandUnitError):
    """Values supplied for an invocation do not satisfy the command schema.

    Attributes:
        code: The kind of binding fault.
        parameter: The offending parameter name (or the unnamed slot index
            rendered as a string for extra positional values).
        command: The command being bound, when known.
    """

    def __init__(
        self,
        code: BindingCode,
        parameter: str,
        message: str,
        *,
        command: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.parameter = parameter
        self.command = command


class CommandNotFoundError(CommandUnitError):
    """The host has no command registered under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(f"No command registered as {name!r}")
        self.name = name


class InvocationCancelled(CommandUnitError):
    """Cancellation was observed at a phase boundary."""

    def __init__(self, command: str, phase: str) -> None:
        super().__init__(f"{command} cancelled before {phase}")
        self.command = command
        self.phase = phase
