"""Where the local content store lives."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DATA_DIR_ENV = "CATALOGSYNC_DATA_DIR"
DATABASE_URI_ENV = "DATABASE_URI"
DEFAULT_DB_FILENAME = "catalogsync.db"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def data_dir() -> Path:
    """``$CATALOGSYNC_DATA_DIR``, else ``catalogsync`` under the XDG data home."""

    configured = os.getenv(DATA_DIR_ENV)
    if configured:
        return Path(configured).expanduser().resolve()
    xdg_home = os.getenv("XDG_DATA_HOME")
    base = Path(xdg_home) if xdg_home else Path.home() / ".local" / "share"
    return (base / "catalogsync").expanduser().resolve()


def get_database_config() -> DatabaseConfig:
    configured = os.getenv(DATABASE_URI_ENV)
    if configured:
        return DatabaseConfig(uri=configured)
    directory = data_dir()
    directory.mkdir(parents=True, exist_ok=True)
    return DatabaseConfig(uri=f"sqlite+pysqlite:///{directory / DEFAULT_DB_FILENAME}")
