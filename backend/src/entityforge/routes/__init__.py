"""Generated CRUD routes for entity types."""

from entityforge.routes.errors import register_error_handlers
from entityforge.routes.generator import (
    API_PREFIX,
    RouteRegistry,
    RouteSpec,
    create_entity_router,
    route_table,
)
from entityforge.routes.operations import EntityOperations

__all__ = [
    "API_PREFIX",
    "EntityOperations",
    "RouteRegistry",
    "RouteSpec",
    "create_entity_router",
    "register_error_handlers",
    "route_table",
]
