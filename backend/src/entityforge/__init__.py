"""EntityForge - CRUD API and UI generation for typed entities."""

from entityforge.app import create_app
from entityforge.config import AppConfig
from entityforge.context import Context, ContextProtocol
from entityforge.entity import Entity, EntitySchema, MetadataLoader, column, schema_of
from entityforge.hooks import HookRegistry, HookRejected, hook, request_extension

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "Context",
    "ContextProtocol",
    "Entity",
    "EntitySchema",
    "HookRegistry",
    "HookRejected",
    "MetadataLoader",
    "column",
    "create_app",
    "hook",
    "request_extension",
    "schema_of",
]
