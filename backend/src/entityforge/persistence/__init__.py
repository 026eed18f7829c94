"""Persistence layer - storage adapter and upload storage."""

from entityforge.persistence.adapter import PersistenceAdapter
from entityforge.persistence.config import DatabaseConfig, create_adapter
from entityforge.persistence.store import EntityStore

__all__ = ["DatabaseConfig", "EntityStore", "PersistenceAdapter", "create_adapter"]
