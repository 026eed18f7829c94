"""Application configuration read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from entityforge.persistence.config import DatabaseConfig

DEFAULT_LOG_LEVEL = "info"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def resolve_base_path(cwd: Path | None = None) -> Path:
    """Project root: the parent of ``backend`` when run from there."""
    cwd = cwd or Path.cwd()
    if cwd.name == "backend":
        return cwd.parent
    return cwd


@dataclass
class AppConfig:
    """Settings for one EntityForge application.

    Attributes:
        database: Storage configuration
        uploads_dir: Directory for uploaded media, served at /uploads
        metadata_path: Directory holding ``entities/*.yaml``
        log_level: Level name for the ``entityforge`` loggers
    """

    database: DatabaseConfig
    uploads_dir: Path
    metadata_path: Path
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, base_path: Path | None = None) -> AppConfig:
        """Create config from environment variables.

        Reads DATABASE_URL / ENTITYFORGE_DB_PATH (see DatabaseConfig),
        ENTITYFORGE_UPLOADS_DIR, ENTITYFORGE_METADATA_PATH and
        ENTITYFORGE_LOG_LEVEL. Paths default to directories under base_path.
        """
        base_path = base_path or resolve_base_path()

        uploads = os.environ.get("ENTITYFORGE_UPLOADS_DIR")
        metadata = os.environ.get("ENTITYFORGE_METADATA_PATH")

        return cls(
            database=DatabaseConfig.from_env(base_path),
            uploads_dir=Path(uploads) if uploads else base_path / "uploads",
            metadata_path=Path(metadata) if metadata else base_path / "metadata",
            log_level=os.environ.get("ENTITYFORGE_LOG_LEVEL", DEFAULT_LOG_LEVEL).lower(),
        )


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Set the level of the ``entityforge`` loggers.

    A stream handler is attached only when the root logger has none, so
    uvicorn's or the host's logging setup takes precedence.
    """
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")

    if not logging.getLogger().handlers:
        logging.basicConfig(format=LOG_FORMAT)
    logging.getLogger("entityforge").setLevel(numeric)


__all__ = ["AppConfig", "DatabaseConfig", "configure_logging", "resolve_base_path"]
