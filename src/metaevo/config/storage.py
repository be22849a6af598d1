"""Where the metamodel database lives.

``DATABASE_URI`` names any SQLAlchemy URL and wins outright. Without it the
schema is kept in a SQLite file under ``METAEVO_DATA_DIR``, defaulting to the
platform's per-user data directory.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

DATABASE_FILENAME: Final[str] = "metaevo.db"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    data_dir: Path
    uri_override: str | None = None

    @property
    def database_path(self) -> Path:
        return self.data_dir / DATABASE_FILENAME

    def resolve_uri(self) -> str:
        """Return the URL to connect to, creating the data directory for SQLite."""

        if self.uri_override:
            return self.uri_override
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return f"sqlite+pysqlite:///{self.database_path}"


def _user_data_home() -> Path:
    if os.name == "nt":
        return Path(os.getenv("LOCALAPPDATA") or Path.home() / "AppData" / "Local")
    return Path(os.getenv("XDG_DATA_HOME") or Path.home() / ".local" / "share")


def get_database_config() -> DatabaseConfig:
    data_dir = Path(os.getenv("METAEVO_DATA_DIR") or _user_data_home() / "metaevo")
    return DatabaseConfig(
        data_dir=data_dir.expanduser().resolve(),
        uri_override=os.getenv("DATABASE_URI") or None,
    )
