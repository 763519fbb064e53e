"""Engine layer — binding, output sinks, command units, and the host.

The engine raises domain errors; translating them into results for a
caller is the service layer's job.
"""

from cmdunit.engine.binding import BoundParameters, bind
from cmdunit.engine.cancellation import CancellationToken
from cmdunit.engine.host import CommandHost
from cmdunit.engine.sink import OutputSink
from cmdunit.engine.unit import CommandUnit, InvocationContext

__all__ = [
    "BoundParameters",
    "CancellationToken",
    "CommandHost",
    "CommandUnit",
    "InvocationContext",
    "OutputSink",
    "bind",
]
