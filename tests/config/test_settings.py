"""Tests for CmdunitSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from cmdunit.config.settings import CmdunitSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "CMDUNIT_CONFIG",
        "CMDUNIT_QUIET",
        "CMDUNIT_VERBOSE",
        "CMDUNIT_JSON_OUTPUT",
        "CMDUNIT_HOST__STRICT_VERBS",
        "CMDUNIT_PLUGINS__ENABLED",
    ):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = CmdunitSettings.from_cli(root=tmp_path)
        assert settings.root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.quiet is False
        assert settings.verbose is False
        assert settings.log_json is False
        assert settings.host.strict_verbs is False
        assert settings.plugins.enabled is True
        assert settings.plugins.local_dir == ".cmdunit/plugins"

    def test_frozen(self, tmp_path: Path) -> None:
        settings = CmdunitSettings.from_cli(root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]

    def test_local_plugin_dir_relative_to_root(self, tmp_path: Path) -> None:
        settings = CmdunitSettings.from_cli(root=tmp_path)
        assert settings.local_plugin_dir == tmp_path / ".cmdunit" / "plugins"


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "cmdunit.toml").write_text(
            "[host]\nstrict_verbs = true\n[plugins]\nlocal_dir = 'extensions'\n"
        )
        settings = CmdunitSettings.from_cli(root=tmp_path)
        assert settings.host.strict_verbs is True
        assert settings.local_plugin_dir == tmp_path / "extensions"
        assert settings.plugins.enabled is True  # default preserved

    def test_root_from_discovered_config(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "cmdunit.toml").write_text("[plugins]\nenabled = false\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = CmdunitSettings.from_cli()
        assert settings.root == tmp_path.resolve()
        assert settings.plugins.enabled is False

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text("[host]\nstrict_verbs = true\n")
        settings = CmdunitSettings.from_cli(config_path=str(custom), root=tmp_path)
        assert settings.host.strict_verbs is True
        assert settings.config_path == custom

    def test_missing_explicit_config_is_click_error(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException, match="Config file not found"):
            CmdunitSettings.from_cli(config_path=str(tmp_path / "nope.toml"), root=tmp_path)

    def test_invalid_toml_is_click_error(self, tmp_path: Path) -> None:
        (tmp_path / "cmdunit.toml").write_text("[host\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            CmdunitSettings.from_cli(root=tmp_path)


class TestPriority:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "cmdunit.toml").write_text("[host]\nstrict_verbs = false\n")
        monkeypatch.setenv("CMDUNIT_HOST__STRICT_VERBS", "true")
        settings = CmdunitSettings.from_cli(root=tmp_path)
        assert settings.host.strict_verbs is True

    def test_cli_flags_override_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CMDUNIT_QUIET", "false")
        settings = CmdunitSettings.from_cli(root=tmp_path, quiet=True, json_output=True)
        assert settings.quiet is True
        assert settings.json_output is True
