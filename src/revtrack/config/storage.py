"""Data storage configuration helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "revtrack"
DEFAULT_DB_FILENAME: Final[str] = "revtrack.db"
DEFAULT_DB_HOST: Final[str] = "localhost"
HOST_PLACEHOLDER: Final[str] = "{host}"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
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


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _default_data_dir() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = os.getenv("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME).expanduser().resolve()


def get_storage_config() -> StorageConfig:
    env_dir = os.getenv("REVTRACK_DATA_DIR")
    data_dir = Path(env_dir) if env_dir else _default_data_dir()
    return StorageConfig(data_dir=data_dir)


def get_database_config(
    *,
    host: str | None = None,
    storage: StorageConfig | None = None,
) -> DatabaseConfig:
    """Resolve the database URI.

    ``DATABASE_URI`` wins when set. It may carry a ``{host}`` placeholder
    (e.g. ``mysql+pymysql://user:secret@{host}:3306/git_repo``) which is filled
    from ``host`` or ``REVTRACK_DB_HOST``. Without an override the store is a
    SQLite file inside the data directory.
    """

    env_uri = os.getenv("DATABASE_URI")
    if env_uri:
        if HOST_PLACEHOLDER in env_uri:
            resolved_host = host or os.getenv("REVTRACK_DB_HOST") or DEFAULT_DB_HOST
            env_uri = env_uri.replace(HOST_PLACEHOLDER, resolved_host)
        return DatabaseConfig(uri=env_uri)
    storage_config = storage or get_storage_config()
    return DatabaseConfig(uri=storage_config.database_uri())
