"""Tests for configuration loading."""

import pytest
from pathlib import Path

from tearlog.config import DEFAULT_TAGS, load_config

_ENV_KEYS = [
    "TEARLOG_DATA_DIR",
    "TEARLOG_SYNC_BACKEND",
    "TEARLOG_SYNC_DIR",
    "TEARLOG_SYNC_INTERVAL",
    "TEARLOG_LOCALE",
    "TEARLOG_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestConfig:
    def test_defaults(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))

        config = load_config()
        assert config.sync.backend == "none"
        assert config.sync.interval == 900
        assert config.sync.directory is None
        assert config.data_dir.name == "journal"
        assert config.locale == "en"
        assert config.defaults.tags == DEFAULT_TAGS

    def test_env_override(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("TEARLOG_SYNC_BACKEND", "directory")
        monkeypatch.setenv("TEARLOG_SYNC_DIR", str(tmp_path / "cloud"))
        monkeypatch.setenv("TEARLOG_SYNC_INTERVAL", "60")
        monkeypatch.setenv("TEARLOG_DATA_DIR", str(tmp_path / "data"))

        config = load_config()
        assert config.sync.backend == "directory"
        assert config.sync.directory == tmp_path / "cloud"
        assert config.sync.interval == 60
        assert config.data_dir == tmp_path / "data"

    def test_toml_file(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        toml_path = tmp_path / "tearlog.toml"
        toml_path.write_text("""
locale = "ru"

[sync]
backend = "directory"
directory = "/srv/cloud"
interval = 120

[defaults]
tags = ["#Работа", "#Семья"]
emoji_color = "#3366ff"
""", encoding="utf-8")
        config = load_config(toml_path)
        assert config.locale == "ru"
        assert config.sync.backend == "directory"
        assert config.sync.directory == Path("/srv/cloud")
        assert config.sync.interval == 120
        assert config.defaults.tags == ["#Работа", "#Семья"]
        assert config.defaults.emoji_color == "#3366ff"

    def test_toml_discovered_in_cwd(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "tearlog.toml").write_text('log_level = "DEBUG"\n', encoding="utf-8")

        config = load_config()
        assert config.log_level == "DEBUG"

    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("TEARLOG_LOCALE", "en")

        toml_path = tmp_path / "tearlog.toml"
        toml_path.write_text('locale = "ru"\n', encoding="utf-8")
        config = load_config(toml_path)
        assert config.locale == "en"  # env wins
