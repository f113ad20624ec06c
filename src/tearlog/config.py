"""Configuration loading from environment variables and tearlog.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

_DEFAULT_DATA_DIR = Path.home() / ".tearlog" / "journal"
_CONFIG_FILENAME = "tearlog.toml"

DEFAULT_TAGS = ["#Health", "#Loneliness", "#Work", "#Family", "#Movies"]


@dataclass
class SyncConfig:
    """Remote record store configuration."""

    backend: str = "none"
    directory: Path | None = None
    interval: int = 900


@dataclass
class DefaultsConfig:
    """Seed data written on first run."""

    tags: list[str] = field(default_factory=lambda: list(DEFAULT_TAGS))
    emoji_color: str = "#0000FF"


@dataclass
class TearlogConfig:
    """Top-level tearlog configuration."""

    sync: SyncConfig = field(default_factory=SyncConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    data_dir: Path = _DEFAULT_DATA_DIR
    locale: str = "en"
    log_level: str = "INFO"


def load_config(config_path: Path | None = None) -> TearlogConfig:
    """Load configuration from environment variables and optional tearlog.toml.

    Priority: environment variables > tearlog.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        for candidate in [Path.cwd() / _CONFIG_FILENAME, Path.home() / ".tearlog" / _CONFIG_FILENAME]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    sync_data = file_data.get("sync", {})
    defaults_data = file_data.get("defaults", {})

    sync_dir = os.getenv("TEARLOG_SYNC_DIR", sync_data.get("directory"))

    config = TearlogConfig(
        sync=SyncConfig(
            backend=os.getenv("TEARLOG_SYNC_BACKEND", sync_data.get("backend", "none")),
            directory=Path(sync_dir).expanduser() if sync_dir else None,
            interval=int(os.getenv("TEARLOG_SYNC_INTERVAL", sync_data.get("interval", 900))),
        ),
        defaults=DefaultsConfig(
            tags=list(defaults_data.get("tags", DEFAULT_TAGS)),
            emoji_color=defaults_data.get("emoji_color", "#0000FF"),
        ),
        data_dir=Path(
            os.getenv("TEARLOG_DATA_DIR", file_data.get("data_dir", str(_DEFAULT_DATA_DIR)))
        ).expanduser(),
        locale=os.getenv("TEARLOG_LOCALE", file_data.get("locale", "en")),
        log_level=os.getenv("TEARLOG_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
    return config
