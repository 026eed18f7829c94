"""Route generation for entity types.

Every entity type gets the same eleven routes, five JSON API routes under
``/api/v1`` and six server-rendered UI routes. Paths are derived from the
entity's slugs, so link generation elsewhere must use the same ``slugify``.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from fastapi import APIRouter
from fastapi.responses import HTMLResponse

from entityforge.context import ContextProtocol
from entityforge.entity.model import Entity, EntitySchema, schema_of
from entityforge.errors import RouteCollisionError
from entityforge.hooks.service import HookService
from entityforge.routes.api import api_handlers
from entityforge.routes.operations import EntityOperations
from entityforge.routes.ui import ui_handlers
from entityforge.ui.renderer import JinjaRenderer, PageRenderer

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


@dataclass(frozen=True)
class RouteSpec:
    """One generated route."""

    name: str
    method: str
    path: str

    @property
    def is_api(self) -> bool:
        return self.name.startswith("api_")

    def __str__(self) -> str:
        return f"{self.method:<6} {self.path}"


def route_table(entity_cls: type[Entity]) -> list[RouteSpec]:
    """Describe the routes generated for an entity type.

    The result depends only on the entity's names, so calling this twice
    for the same type gives equal tables.
    """
    schema = schema_of(entity_cls)
    one = schema.slug
    many = schema.slug_plural
    return [
        RouteSpec("api_list", "GET", f"{API_PREFIX}/{many}"),
        RouteSpec("api_get", "GET", f"{API_PREFIX}/{one}/{{id}}"),
        RouteSpec("api_create", "POST", f"{API_PREFIX}/{many}"),
        RouteSpec("api_update", "POST", f"{API_PREFIX}/{one}/{{id}}"),
        RouteSpec("api_delete", "DELETE", f"{API_PREFIX}/{one}/{{id}}"),
        RouteSpec("ui_list", "GET", f"/{many}"),
        RouteSpec("ui_detail", "GET", f"/{one}/{{id}}"),
        RouteSpec("ui_update_submit", "POST", f"/{one}/{{id}}"),
        RouteSpec("ui_add_form", "GET", f"/{many}/add"),
        RouteSpec("ui_add_submit", "POST", f"/{many}/add"),
        RouteSpec("ui_delete_submit", "POST", f"/{one}/{{id}}/delete"),
    ]


def _registration_order(routes: list[RouteSpec]) -> list[RouteSpec]:
    # Static paths first so "/x/add" wins over "/x/{id}" when slugs coincide
    return sorted(routes, key=lambda r: "{id}" in r.path)


def create_entity_router(
    entity_cls: type[Entity],
    get_context: Callable[[], ContextProtocol | None],
    renderer: PageRenderer | None = None,
    hook_service: HookService | None = None,
) -> APIRouter:
    """Create the router holding all eleven routes of one entity type.

    Args:
        entity_cls: The entity type to expose
        get_context: Returns the application context, or None before startup
        renderer: Page renderer for the UI routes (default: JinjaRenderer)
        hook_service: Hook runner (default: one backed by HookRegistry)
    """
    schema = schema_of(entity_cls)
    ops = EntityOperations(schema, get_context, hook_service or HookService())
    handlers = {
        **api_handlers(ops),
        **ui_handlers(ops, renderer or JinjaRenderer()),
    }

    router = APIRouter()
    for route in _registration_order(route_table(entity_cls)):
        endpoint = handlers[route.name]
        if route.is_api:
            router.add_api_route(
                route.path,
                endpoint,
                methods=[route.method],
                name=f"{schema.slug}_{route.name}",
                tags=[schema.name_plural()],
            )
        else:
            router.add_api_route(
                route.path,
                endpoint,
                methods=[route.method],
                name=f"{schema.slug}_{route.name}",
                response_class=HTMLResponse,
                include_in_schema=False,
            )

    logger.debug("Generated %d routes for %s", len(router.routes), schema.name())
    return router


class RouteRegistry:
    """Collects entity types for an application and rejects slug collisions.

    Two entity types may not derive the same path segment, whether it comes
    from the singular or the plural name, since their routes would shadow
    each other.
    """

    def __init__(self) -> None:
        self._schemas: dict[str, EntitySchema] = {}
        self._owners: dict[str, str] = {}
        self._entities: list[type[Entity]] = []

    def add(self, entity_cls: type[Entity]) -> None:
        """Register an entity type.

        Raises:
            RouteCollisionError: If a slug is already taken by another entity
        """
        schema = schema_of(entity_cls)
        name = schema.name()
        if name in self._schemas:
            raise RouteCollisionError(f"Entity '{name}' is already registered")

        slugs = {schema.slug, schema.slug_plural}
        for slug in sorted(slugs):
            owner = self._owners.get(slug)
            if owner is not None:
                raise RouteCollisionError(
                    f"Entity '{name}' derives path segment '{slug}' "
                    f"already used by entity '{owner}'"
                )

        for slug in slugs:
            self._owners[slug] = name
        self._schemas[name] = schema
        self._entities.append(entity_cls)

    @property
    def entities(self) -> list[type[Entity]]:
        return list(self._entities)

    def routes(self) -> list[tuple[str, RouteSpec]]:
        """All routes as (entity name, route) pairs in registration order."""
        return [
            (schema_of(cls).name(), route)
            for cls in self._entities
            for route in route_table(cls)
        ]

    def build_routers(
        self,
        get_context: Callable[[], ContextProtocol | None],
        renderer: PageRenderer | None = None,
        hook_service: HookService | None = None,
    ) -> list[APIRouter]:
        """Create one router per registered entity type."""
        renderer = renderer or JinjaRenderer()
        hook_service = hook_service or HookService()
        return [
            create_entity_router(cls, get_context, renderer, hook_service)
            for cls in self._entities
        ]

    def __len__(self) -> int:
        return len(self._entities)
