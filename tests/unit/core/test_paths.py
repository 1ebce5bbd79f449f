"""Unit tests for path helpers."""

from pathlib import Path

import pytest
from keysync.core.paths import get_config_dir, get_config_path, get_theme_path


class TestConfigPaths:
    """Tests for XDG config paths."""

    def test_xdg_override(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """XDG_CONFIG_HOME is respected."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        assert get_config_dir() == tmp_path / "keysync"
        assert get_config_path() == tmp_path / "keysync" / "config.toml"
        assert get_theme_path() == tmp_path / "keysync" / "theme.toml"

    def test_home_default(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        """Without XDG_CONFIG_HOME the home directory is used."""
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))

        assert get_config_dir() == tmp_path / ".config" / "keysync"
