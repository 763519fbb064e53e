"""Root CLI group for cmdunit with global flags and command registration."""

from __future__ import annotations

import click

from cmdunit import __version__
from cmdunit.commands import register_commands
from cmdunit.commands._base import HostGroup
from cmdunit.commands._context import ensure_app


@click.group(cls=HostGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="cmdunit")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug info.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """cmdunit — run Verb-Noun command units from the shell."""
    ensure_app(ctx)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
