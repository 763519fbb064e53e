"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, cmdunit.toml only contains overrides.
"""

from __future__ import annotations

from pydantic import BaseModel


class HostConfig(BaseModel):
    """[host] section."""

    model_config = {"frozen": True}

    strict_verbs: bool = False


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    local_dir: str = ".cmdunit/plugins"
