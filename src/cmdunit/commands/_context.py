"""AppContext — shared Click context for all commands.

Created once per CLI run and flows to all subcommands via
``@click.pass_obj``. Provides lazy host/plugin initialization and
centralized result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from cmdunit.config.settings import CmdunitSettings
from cmdunit.output.formatters import format_result

if TYPE_CHECKING:
    from cmdunit.engine.host import CommandHost
    from cmdunit.plugins.manager import PluginManager
    from cmdunit.services.result import ServiceResult

_ROOT_FLAGS = ("json_output", "quiet", "verbose", "log_json")


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The host is built lazily on first use so ``--version`` never triggers
    plugin discovery.
    """

    def __init__(self, settings: CmdunitSettings) -> None:
        self.settings = settings
        self._host: CommandHost | None = None
        self._plugins: PluginManager | None = None

        from cmdunit.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

        if settings.verbose:
            from cmdunit.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def host(self) -> CommandHost:
        """The command host with built-in and plugin commands registered."""
        if self._host is None:
            self._init_host()
        assert self._host is not None
        return self._host

    @property
    def plugins(self) -> PluginManager:
        if self._plugins is None:
            self._init_host()
        assert self._plugins is not None
        return self._plugins

    def _init_host(self) -> None:
        """Create the host, load plugins, and register their commands."""
        from cmdunit.engine.host import CommandHost
        from cmdunit.plugins.builtins.echo import BuiltinCommandsPlugin
        from cmdunit.plugins.manager import PluginManager

        host = CommandHost(strict_verbs=self.settings.host.strict_verbs)
        pm = PluginManager()
        pm.register_plugin(BuiltinCommandsPlugin(), name="builtin-commands")
        if self.settings.plugins.enabled:
            pm.discover_and_load(local_dir=self.settings.local_plugin_dir)
        pm.collect_commands(host)

        self._host = host
        self._plugins = pm

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings are emitted to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        output = format_result(
            result,
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        if result.ok:
            if output:
                click.echo(output)
            if not self.settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)


def ensure_app(ctx: click.Context) -> AppContext:
    """Return the run's AppContext, creating it from the root flags if needed."""
    root = ctx.find_root()
    if isinstance(root.obj, AppContext):
        return root.obj

    params = root.params
    flags = {name: True for name in _ROOT_FLAGS if params.get(name)}
    settings = CmdunitSettings.from_cli(config_path=params.get("config_path"), **flags)
    root.obj = AppContext(settings)
    return root.obj
