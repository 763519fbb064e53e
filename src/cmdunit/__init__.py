"""cmdunit — hosted command units with declared parameters and a staged lifecycle."""

from cmdunit.domain.errors import (
    BindingError,
    CommandNotFoundError,
    CommandUnitError,
    ConfigurationError,
    InvocationCancelled,
)
from cmdunit.domain.parameters import CommandSchema, ParameterDeclaration, declare
from cmdunit.engine import (
    BoundParameters,
    CancellationToken,
    CommandHost,
    CommandUnit,
    InvocationContext,
    OutputSink,
    bind,
)

__version__ = "0.1.0"

__all__ = [
    "BindingError",
    "BoundParameters",
    "CancellationToken",
    "CommandHost",
    "CommandNotFoundError",
    "CommandSchema",
    "CommandUnit",
    "CommandUnitError",
    "ConfigurationError",
    "InvocationCancelled",
    "InvocationContext",
    "OutputSink",
    "ParameterDeclaration",
    "__version__",
    "bind",
    "declare",
]
