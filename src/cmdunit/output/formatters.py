"""Rich/JSON output helpers.

The CLI renders ServiceResult for humans (Rich output) or machines
(--json). For invocations, human mode prints only the emitted objects, one
per line, so the command's output can be piped onward unchanged.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.markup import escape
from rich.table import Table

from cmdunit.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from cmdunit.services.result import ServiceResult

_INVOKE_OPS = frozenset({"invoke", "invoke_stream"})


def _render_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        return _json.dumps(value, separators=(",", ":"), default=str)
    return str(value)


def _render_invoke(console: Console, result: ServiceResult) -> None:
    for value in result.data.get("output", []):
        console.print(_render_value(value), markup=False, emoji=False, soft_wrap=True)


def _render_commands(console: Console, result: ServiceResult) -> None:
    table = Table(show_header=True, header_style="cu.key", box=None)
    table.add_column("Command", style="cu.command")
    table.add_column("Parameters")
    table.add_column("Summary")
    for cmd in result.data.get("commands", []):
        params = ", ".join(_param_label(p) for p in cmd["parameters"])
        table.add_row(escape(cmd["name"]), escape(params), escape(cmd["summary"]))
    console.print(table)


def _param_label(param: dict[str, Any]) -> str:
    label = param["name"]
    if param.get("position") is not None:
        label = f"[{param['position']}] {label}"
    if param.get("mandatory"):
        label = f"{label}*"
    return label


def _render_describe(console: Console, result: ServiceResult) -> None:
    data = result.data
    console.print(f"[cu.command]{escape(data['name'])}[/]")
    if data.get("summary"):
        console.print(f"  {escape(data['summary'])}")
    for param in data.get("parameters", []):
        position = "named" if param["position"] is None else f"position {param['position']}"
        required = "mandatory" if param["mandatory"] else "optional"
        line = f"  [cu.key]-{escape(param['name'])}[/] ({position}, {required})"
        if param.get("help"):
            line += f" {escape(param['help'])}"
        console.print(line)


def _render_generic(console: Console, result: ServiceResult) -> None:
    console.print(f"[cu.ok]OK:[/] [cu.op]{escape(result.op)}[/]")
    for key, value in result.data.items():
        console.print(f"  [cu.key]{escape(key)}:[/] {escape(_render_value(value))}")


def format_result(
    result: ServiceResult,
    *,
    json_output: bool = False,
    quiet: bool = False,
    verbose: bool = False,
) -> str:
    """Format a ServiceResult for display.

    Args:
        result: The service result to format.
        json_output: Return the whole result as JSON. Objects that are not
            JSON-native are rendered with ``str()``.
        quiet: Minimal output (errors are reduced to their message).
        verbose: Append telemetry from ``result.meta`` in human mode.
    """
    if json_output:
        return _json.dumps(result.model_dump(), indent=2, default=str)

    console = create_console()
    if not result.ok:
        error_msg = result.error.message if result.error else "Unknown error"
        if quiet:
            return error_msg
        console.print(f"[cu.error]ERROR:[/] [cu.op]{escape(result.op)}[/] - {escape(error_msg)}")
        return get_output(console).rstrip("\n")

    if result.op in _INVOKE_OPS:
        _render_invoke(console, result)
    elif quiet:
        return ""
    elif result.op == "list_commands":
        _render_commands(console, result)
    elif result.op == "describe_command":
        _render_describe(console, result)
    else:
        _render_generic(console, result)

    if verbose and result.meta and "telemetry" in result.meta:
        telemetry = _json.dumps(result.meta["telemetry"], separators=(",", ":"))
        console.print(f"[cu.key]telemetry:[/] {escape(telemetry)}")

    return get_output(console).rstrip("\n")
