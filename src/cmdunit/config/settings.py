"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``CMDUNIT_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``cmdunit.toml`` discovered via walk-up
  4. Code defaults — baked into the section models
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from cmdunit.config.discovery import find_config
from cmdunit.config.models import HostConfig, PluginsConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``cmdunit.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class CmdunitSettings(BaseSettings):
    """Unified settings for the cmdunit CLI.

    Frozen after construction and stored on the CLI's AppContext.

    Attributes:
        root: Project directory (parent of ``cmdunit.toml``, or CWD if no
            config was found). Relative plugin paths resolve against it.
        config_path: The TOML file in use, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "CMDUNIT_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    host: HostConfig = Field(default_factory=HostConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @property
    def local_plugin_dir(self) -> Path:
        path = Path(self.plugins.local_dir)
        return path if path.is_absolute() else self.root / path

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> CmdunitSettings:
        """Construct settings from a CLI invocation.

        Resolves ``cmdunit.toml`` with :func:`find_config` (explicit
        *config_path*, then ``CMDUNIT_CONFIG``, then walk-up from *root*),
        takes *root* from the config file's directory when not given, and
        merges CLI flags as highest-priority overrides.

        Raises:
            click.ClickException: The named config file is missing or is
                not valid TOML.
        """
        location = find_config(root, explicit=config_path)
        resolved_root = root or location.project_root or Path.cwd()

        _tls.toml_path = location.path
        try:
            return cls(root=resolved_root, config_path=location.path, **cli_flags)
        finally:
            _tls.toml_path = None
