"""Tests for locating cmdunit.toml."""

from pathlib import Path

import click
import pytest

from cmdunit.config.discovery import CONFIG_ENV_VAR, ConfigOrigin, find_config, walk_up


@pytest.fixture(autouse=True)
def _no_env_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


class TestWalkUp:
    def test_finds_in_start_dir(self, tmp_path: Path) -> None:
        cfg = tmp_path / "cmdunit.toml"
        cfg.write_text("")
        assert walk_up(tmp_path) == cfg.resolve()

    def test_walks_up(self, tmp_path: Path) -> None:
        cfg = tmp_path / "cmdunit.toml"
        cfg.write_text("")
        deep = tmp_path / "x" / "y" / "z"
        deep.mkdir(parents=True)
        assert walk_up(deep) == cfg.resolve()

    def test_nearest_wins(self, tmp_path: Path) -> None:
        (tmp_path / "cmdunit.toml").write_text("")
        inner = tmp_path / "inner"
        inner.mkdir()
        (inner / "cmdunit.toml").write_text("")
        assert walk_up(inner) == (inner / "cmdunit.toml").resolve()

    def test_none_when_missing(self, tmp_path: Path) -> None:
        assert walk_up(tmp_path) is None


class TestFindConfig:
    def test_walk_up_origin(self, tmp_path: Path) -> None:
        (tmp_path / "cmdunit.toml").write_text("")
        location = find_config(tmp_path)
        assert location.origin is ConfigOrigin.WALK_UP
        assert location.project_root == tmp_path.resolve()

    def test_nothing_found(self, tmp_path: Path) -> None:
        location = find_config(tmp_path)
        assert location.path is None
        assert location.origin is ConfigOrigin.NONE
        assert location.project_root is None

    def test_env_var_wins_over_walk_up(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "cmdunit.toml").write_text("")
        other = tmp_path / "elsewhere.toml"
        other.write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(other))
        location = find_config(tmp_path)
        assert location.path == other
        assert location.origin is ConfigOrigin.ENV

    def test_flag_wins_over_env_var(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        flagged = tmp_path / "flag.toml"
        flagged.write_text("")
        env = tmp_path / "env.toml"
        env.write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(env))
        location = find_config(tmp_path, explicit=str(flagged))
        assert location.path == flagged
        assert location.origin is ConfigOrigin.FLAG

    def test_missing_env_file_is_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        (tmp_path / "cmdunit.toml").write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "absent.toml"))
        with pytest.raises(click.ClickException, match=CONFIG_ENV_VAR):
            find_config(tmp_path)

    def test_missing_flag_file_is_error(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException, match="--config"):
            find_config(tmp_path, explicit=str(tmp_path / "absent.toml"))
