"""Entity contract and metadata loading."""

from entityforge.entity.loader import MetadataLoader
from entityforge.entity.model import (
    Entity,
    EntitySchema,
    FieldDefinition,
    column,
    schema_of,
)

__all__ = [
    "Entity",
    "EntitySchema",
    "FieldDefinition",
    "MetadataLoader",
    "column",
    "schema_of",
]
