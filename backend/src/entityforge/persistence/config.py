"""Storage configuration and store factory."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from sqlalchemy.engine import make_url

if TYPE_CHECKING:
    from entityforge.persistence.adapter import PersistenceAdapter

DEFAULT_DB_NAME = "entityforge.db"


@dataclass
class DatabaseConfig:
    """Where entities are stored, as a database URL.

    Only SQLite (``sqlite://``, ``sqlite:///path``) and PostgreSQL
    (``postgresql://``) are accepted by ``create_adapter``.
    """

    url: str

    @classmethod
    def from_env(cls, base_path: Path | None = None) -> DatabaseConfig:
        """Read the database location from the environment.

        DATABASE_URL wins; ENTITYFORGE_DB_PATH names a SQLite file; otherwise
        the file lives in ``{base_path}/data``, or the working directory
        when no base path is given.
        """
        url = os.environ.get("DATABASE_URL")
        if url:
            return cls(url=url)

        db_path = os.environ.get("ENTITYFORGE_DB_PATH")
        if db_path:
            return cls(url=f"sqlite:///{db_path}")
        if base_path:
            return cls(url=f"sqlite:///{base_path / 'data' / DEFAULT_DB_NAME}")
        return cls(url=f"sqlite:///{DEFAULT_DB_NAME}")

    @property
    def backend(self) -> str:
        """Dialect name, e.g. ``sqlite`` or ``postgresql``."""
        return make_url(self.url).get_backend_name()

    @property
    def is_sqlite(self) -> bool:
        return self.backend == "sqlite"

    @property
    def is_postgresql(self) -> bool:
        return self.backend == "postgresql"

    @property
    def sqlite_path(self) -> str | None:
        """File of a SQLite database; None for in-memory or other backends."""
        if not self.is_sqlite:
            return None
        database = make_url(self.url).database
        if not database or database == ":memory:":
            return None
        return database

    @property
    def sqlalchemy_url(self) -> str:
        """The URL with the psycopg (v3) driver selected for PostgreSQL."""
        if self.url.startswith("postgresql://"):
            return "postgresql+psycopg://" + self.url[len("postgresql://"):]
        return self.url

    def ensure_directory(self) -> None:
        """Create the parent directory of a SQLite database file."""
        path = self.sqlite_path
        if path:
            Path(path).parent.mkdir(parents=True, exist_ok=True)


def create_adapter(config: DatabaseConfig) -> PersistenceAdapter:
    """Build the (not yet connected) store for a configuration.

    Raises:
        ValueError: For URL schemes other than SQLite and PostgreSQL
    """
    if not (config.is_sqlite or config.is_postgresql):
        raise ValueError(f"Unsupported database URL scheme: {config.url}")

    from entityforge.persistence.store import EntityStore

    return EntityStore(config.sqlalchemy_url)
