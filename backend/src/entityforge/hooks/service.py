"""Hook execution service for EntityForge.

Runs the request extension extractor and the lifecycle hook of one
write operation, translating failures into the errors the handlers
surface.
"""

import logging
from typing import Any

from starlette.exceptions import HTTPException
from starlette.requests import Request

from entityforge.entity.model import Entity, EntitySchema
from entityforge.errors import EntityForgeError, HookRejectedError, RequestExtensionError
from entityforge.hooks.registry import HookRegistry
from entityforge.hooks.types import EntityHooks, HookRejected, Operation

logger = logging.getLogger(__name__)


class HookService:
    """Orchestrates hook execution for entity write operations.

    Each hook runs exactly once per operation and is awaited before the
    operation continues. Hooks never run for reads.
    """

    def hooks_for(self, schema: EntitySchema) -> EntityHooks:
        return HookRegistry.get(schema.name())

    async def extract(self, schema: EntitySchema, request: Request, context: Any) -> Any:
        """Produce the request-scoped extension for the entity's hooks.

        HTTP errors raised by the extractor pass through unchanged so it
        can choose its own status (e.g. 403).

        Raises:
            RequestExtensionError: If the extractor fails otherwise
        """
        extractor = self.hooks_for(schema).request_ext
        try:
            return await extractor(request, context)
        except (HTTPException, EntityForgeError):
            raise
        except Exception as e:
            logger.info("Request extension for %s rejected: %s", schema.name(), e)
            raise RequestExtensionError(f"Request rejected: {e}") from e

    async def run_create(self, schema: EntitySchema, entity: Entity, ext: Any) -> Entity:
        """Run on_create and return the entity to insert."""
        return await self._run(schema, Operation.CREATE, entity, (entity, ext))

    async def run_update(
        self, schema: EntitySchema, old: Entity, new: Entity, ext: Any
    ) -> Entity:
        """Run on_update with the stored and proposed states."""
        return await self._run(schema, Operation.UPDATE, new, (old, new, ext))

    async def run_delete(self, schema: EntitySchema, entity: Entity, ext: Any) -> Entity:
        """Run on_delete and return the entity to delete."""
        return await self._run(schema, Operation.DELETE, entity, (entity, ext))

    async def _run(
        self,
        schema: EntitySchema,
        operation: Operation,
        subject: Entity,
        args: tuple[Any, ...],
    ) -> Entity:
        """Execute one hook.

        Args:
            schema: Schema of the entity being written
            operation: The write operation
            subject: Entity kept when the hook returns None
            args: Positional arguments for the hook

        Returns:
            The entity to persist

        Raises:
            HookRejectedError: If the hook refuses or fails
            HTTPException, EntityForgeError: Raised by the hook, unchanged
            TypeError: If the hook returns something other than the entity type
        """
        hook_fn = self.hooks_for(schema).for_operation(operation)
        hook_name = f"{schema.name()}.on_{operation.value}"

        try:
            result = await hook_fn(*args)
        except HookRejected as e:
            logger.info("Hook '%s' rejected operation: %s", hook_name, e.reason)
            raise HookRejectedError(e.reason) from e
        except (HTTPException, EntityForgeError):
            raise
        except Exception as e:
            # Unexpected hook errors abort the operation like a rejection
            logger.warning("Hook '%s' failed: %s", hook_name, e)
            raise HookRejectedError(f"Hook '{hook_name}' failed: {e}") from e

        if result is None:
            return subject
        if not isinstance(result, schema.model):
            raise TypeError(
                f"Hook '{hook_name}' must return a {schema.model.__name__} or None, "
                f"got {type(result).__name__}"
            )
        return result
