"""Data storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "arrsync"
DEFAULT_DB_FILENAME: Final[str] = "arrsync.db"
GUIDE_DIR_NAME: Final[str] = "guide"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    config_dir: Path
    guide_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def resolve_data_dir(self) -> Path:
        return self.data_dir.expanduser().resolve()

    def ensure_data_dir(self) -> Path:
        data_dir = self.resolve_data_dir()
        data_dir.mkdir(parents=True, exist_ok=True)
        return data_dir

    def database_path(self, *, ensure: bool = True) -> Path:
        base = self.ensure_data_dir() if ensure else self.resolve_data_dir()
        return base / self.database_filename

    def database_uri(self) -> str:
        return f"sqlite+pysqlite:///{self.database_path()}"


def _xdg_dir(variable: str, fallback: Path, windows_variable: str) -> Path:
    if os.name == "nt":
        base = os.getenv(windows_variable)
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv(variable)
        base_path = Path(base) if base else fallback
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def _default_data_dir() -> Path:
    return _xdg_dir("XDG_DATA_HOME", Path.home() / ".local" / "share", "LOCALAPPDATA")


def _default_config_dir() -> Path:
    return _xdg_dir("XDG_CONFIG_HOME", Path.home() / ".config", "APPDATA")


def get_storage_config() -> StorageConfig:
    env_data_dir = os.getenv("ARRSYNC_DATA_DIR")
    data_dir = Path(env_data_dir).expanduser() if env_data_dir else _default_data_dir()
    env_config_dir = os.getenv("ARRSYNC_CONFIG_DIR")
    config_dir = Path(env_config_dir).expanduser() if env_config_dir else _default_config_dir()
    env_guide_dir = os.getenv("ARRSYNC_GUIDE_DIR")
    guide_dir = Path(env_guide_dir).expanduser() if env_guide_dir else data_dir / GUIDE_DIR_NAME
    return StorageConfig(data_dir=data_dir, config_dir=config_dir, guide_dir=guide_dir)


def get_database_uri(*, storage: StorageConfig | None = None) -> str:
    """Compute the database URI, respecting overrides."""

    env_uri = os.getenv("DATABASE_URI")
    if env_uri:
        return env_uri
    storage_config = storage or get_storage_config()
    return storage_config.database_uri()
