"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from cmdunit.config.logging import HANDLER_NAME, configure_logging


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("cmdunit").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("cmdunit").level == logging.WARNING

    def test_pluggy_quiet(self) -> None:
        configure_logging(verbose=True)
        assert logging.getLogger("pluggy").level == logging.WARNING

    def test_reconfigure_replaces_own_handler(self) -> None:
        configure_logging()
        configure_logging()
        ours = [h for h in logging.getLogger().handlers if h.get_name() == HANDLER_NAME]
        assert len(ours) == 1

    def test_other_root_handlers_kept(self) -> None:
        foreign = logging.NullHandler()
        logging.getLogger().addHandler(foreign)
        configure_logging()
        assert foreign in logging.getLogger().handlers

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("cmdunit.test")
        log.warning("json test", answer=42)
        captured = capfd.readouterr()
        parsed = json.loads(captured.err.strip())
        assert parsed["event"] == "json test"
        assert parsed["answer"] == 42
        assert parsed["level"] == "warning"
        assert captured.out == ""

    def test_stdlib_loggers_routed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=False, log_json=True)
        logging.getLogger("cmdunit.engine.host").warning("plain %s", "warning")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["event"] == "plain warning"
        assert parsed["logger"] == "cmdunit.engine.host"

    def test_bound_command_in_json(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        with structlog.contextvars.bound_contextvars(command="Get-Echo"):
            logging.getLogger("cmdunit.engine.host").warning("slow phase")
        parsed = json.loads(capfd.readouterr().err.strip())
        assert parsed["command"] == "Get-Echo"

    def test_bound_command_prefix_in_console(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=False)
        with structlog.contextvars.bound_contextvars(command="Get-Echo"):
            logging.getLogger("cmdunit.engine.host").warning("slow phase")
        err = capfd.readouterr().err
        assert "[Get-Echo] slow phase" in err
        assert "command=" not in err
