"""Shared pytest fixtures for cmdunit tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from cmdunit.engine.host import CommandHost
from cmdunit.plugins.builtins.echo import GetEcho
from cmdunit.services.invoke import InvocationService
from cmdunit.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _restore_global_state() -> Generator[None]:
    """Undo logging and telemetry changes made by CLI invocations."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    cmdunit_logger = logging.getLogger("cmdunit")
    cmdunit_level = cmdunit_logger.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    cmdunit_logger.setLevel(cmdunit_level)
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def host() -> CommandHost:
    """A host with only the built-in Get-Echo registered."""
    h = CommandHost()
    h.register(GetEcho)
    return h


@pytest.fixture
def service(host: CommandHost) -> InvocationService:
    """InvocationService over the echo host, without plugins."""
    return InvocationService(host)


@pytest.fixture
def _isolated_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run the CLI from an empty temp directory with no CMDUNIT_* overrides.

    Use via ``@pytest.mark.usefixtures("_isolated_root")`` on command test
    classes so no stray cmdunit.toml or local plugins are picked up.
    """
    for name in (
        "CMDUNIT_CONFIG",
        "CMDUNIT_QUIET",
        "CMDUNIT_JSON_OUTPUT",
        "CMDUNIT_VERBOSE",
        "CMDUNIT_LOG_JSON",
        "CMDUNIT_HOST__STRICT_VERBS",
        "CMDUNIT_PLUGINS__ENABLED",
        "CMDUNIT_PLUGINS__LOCAL_DIR",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
