"""Location of the transaction store."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "transactor"
DATABASE_FILENAME: Final[str] = "transactor.db"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    """SQLAlchemy URI of the database holding types, transactions and field schema."""

    uri: str

    @classmethod
    def for_data_dir(cls, data_dir: Path) -> DatabaseConfig:
        return cls(uri=f"sqlite+pysqlite:///{data_dir / DATABASE_FILENAME}")


def _platform_data_home() -> Path:
    if os.name == "nt":
        base = os.getenv("LOCALAPPDATA")
        return Path(base) if base else (Path.home() / "AppData" / "Local")
    base = os.getenv("XDG_DATA_HOME")
    return Path(base) if base else (Path.home() / ".local" / "share")


def get_data_dir(*, create: bool = True) -> Path:
    """Return ``TRANSACTOR_DATA_DIR`` or the per-user data directory, creating it by default."""

    env_dir = os.getenv("TRANSACTOR_DATA_DIR")
    data_dir = Path(env_dir) if env_dir else _platform_data_home() / APP_DIR_NAME
    data_dir = data_dir.expanduser().resolve()
    if create:
        data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_database_config() -> DatabaseConfig:
    """``DATABASE_URI`` wins; otherwise a SQLite file in the data directory."""

    env_uri = os.getenv("DATABASE_URI")
    if env_uri:
        return DatabaseConfig(uri=env_uri)
    return DatabaseConfig.for_data_dir(get_data_dir())
