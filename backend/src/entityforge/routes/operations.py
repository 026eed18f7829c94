"""Read and write flows shared by the API and UI handlers.

Write flows, in order:
- create: extract ext -> read payload -> on_create -> insert
- update: parse id -> extract ext -> load -> read payload -> on_update -> update
- delete: parse id -> extract ext -> load -> on_delete -> delete

Any error aborts the flow before the storage write, so a refused
operation leaves the stored row untouched.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request

from entityforge.context import ContextProtocol
from entityforge.entity.model import Entity, EntitySchema
from entityforge.errors import EntityNotFoundError
from entityforge.hooks.service import HookService

logger = logging.getLogger(__name__)

# Reads the request payload, optionally on top of the stored entity
PayloadReader = Callable[[Entity | None], Awaitable[Entity]]


class EntityOperations:
    """CRUD flows for one entity type against the application context."""

    def __init__(
        self,
        schema: EntitySchema,
        get_context: Callable[[], ContextProtocol | None],
        hook_service: HookService,
    ):
        self.schema = schema
        self._get_context = get_context
        self.hooks = hook_service

    @property
    def context(self) -> ContextProtocol:
        ctx = self._get_context()
        if ctx is None:
            raise RuntimeError("Context not initialized")
        return ctx

    def names_plural(self) -> list[str]:
        return list(self.context.names_plural())

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_all(self) -> list[Entity]:
        return await run_in_threadpool(self.context.db.list_all, self.schema)

    async def load(self, id: Any) -> Entity:
        """Load a row by parsed id.

        Raises:
            EntityNotFoundError: If no row has this id
        """
        entity = await run_in_threadpool(self.context.db.get, self.schema, id)
        if entity is None:
            raise EntityNotFoundError(f"{self.schema.name()} '{id}' not found")
        return entity

    async def get(self, raw_id: str) -> Entity:
        return await self.load(self.schema.parse_id(raw_id))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def create(self, request: Request, read_payload: PayloadReader) -> Entity:
        ctx = self.context
        ext = await self.hooks.extract(self.schema, request, ctx)
        entity = await read_payload(None)

        entity = await self.hooks.run_create(self.schema, entity, ext)
        if self.schema.id_of(entity) is None:
            self.schema.set_id(entity, self.schema.new_id())

        saved = await run_in_threadpool(ctx.db.insert, self.schema, entity)
        logger.info("Created %s %s", self.schema.name(), self.schema.id_of(saved))
        return saved

    async def update(self, request: Request, raw_id: str, read_payload: PayloadReader) -> Entity:
        id = self.schema.parse_id(raw_id)
        ctx = self.context
        ext = await self.hooks.extract(self.schema, request, ctx)

        old = await self.load(id)
        new = await read_payload(old)
        self.schema.set_id(new, id)

        result = await self.hooks.run_update(self.schema, old, new, ext)
        self.schema.set_id(result, id)

        saved = await run_in_threadpool(ctx.db.update, self.schema, result)
        if saved is None:
            raise EntityNotFoundError(f"{self.schema.name()} '{id}' not found")
        logger.info("Updated %s %s", self.schema.name(), id)
        return saved

    async def delete(self, request: Request, raw_id: str) -> None:
        id = self.schema.parse_id(raw_id)
        ctx = self.context
        ext = await self.hooks.extract(self.schema, request, ctx)

        entity = await self.load(id)
        await self.hooks.run_delete(self.schema, entity, ext)

        deleted = await run_in_threadpool(ctx.db.delete, self.schema, id)
        if not deleted:
            raise EntityNotFoundError(f"{self.schema.name()} '{id}' not found")
        logger.info("Deleted %s %s", self.schema.name(), id)
