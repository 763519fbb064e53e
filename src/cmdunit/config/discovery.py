"""Locate ``cmdunit.toml`` for a CLI run.

Resolution order, first hit wins:

1. the ``--config`` path given on the command line;
2. the ``CMDUNIT_CONFIG`` environment variable;
3. the nearest ``cmdunit.toml`` walking up from the start directory, the
   way git finds ``.git/``.

A path named explicitly (1 or 2) must exist.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

import click

CONFIG_FILENAME = "cmdunit.toml"
CONFIG_ENV_VAR = "CMDUNIT_CONFIG"

logger = logging.getLogger(__name__)


class ConfigOrigin(StrEnum):
    FLAG = "flag"
    ENV = "env"
    WALK_UP = "walk_up"
    NONE = "none"


@dataclass(frozen=True)
class ConfigLocation:
    """Where the config file came from. ``path`` is None when none was found."""

    path: Path | None
    origin: ConfigOrigin

    @property
    def project_root(self) -> Path | None:
        """The directory holding the config file; relative settings resolve here."""
        return self.path.parent if self.path is not None else None


def _named_file(raw: str, origin: ConfigOrigin) -> ConfigLocation:
    path = Path(raw).expanduser()
    if not path.is_file():
        source = "--config" if origin is ConfigOrigin.FLAG else CONFIG_ENV_VAR
        msg = f"Config file not found: {path} (from {source})"
        raise click.ClickException(msg)
    return ConfigLocation(path, origin)


def walk_up(start: Path) -> Path | None:
    """Return the nearest ``cmdunit.toml`` at or above *start*."""
    current = start.resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def find_config(start: Path | None = None, *, explicit: str | None = None) -> ConfigLocation:
    """Resolve the config file for a run starting in *start* (default: cwd).

    Raises:
        click.ClickException: *explicit* or ``CMDUNIT_CONFIG`` names a file
            that does not exist.
    """
    if explicit:
        location = _named_file(explicit, ConfigOrigin.FLAG)
    elif env_path := os.environ.get(CONFIG_ENV_VAR):
        location = _named_file(env_path, ConfigOrigin.ENV)
    else:
        found = walk_up(start or Path.cwd())
        location = ConfigLocation(found, ConfigOrigin.WALK_UP if found else ConfigOrigin.NONE)
    logger.debug("Config: %s (%s)", location.path, location.origin)
    return location
