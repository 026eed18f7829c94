"""Hook system types for EntityForge.

Defines the callables an entity type can supply around its write
operations:
- on_create(entity, ext): before insert
- on_update(old, new, ext): before an existing row is overwritten
- on_delete(entity, ext): before delete
- request_ext(request, context): produces ``ext`` from the live request

Hooks return the (possibly transformed) entity, or None to keep it as is.
Raising HookRejected refuses the operation.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from starlette.requests import Request

from entityforge.entity.model import Entity


class Operation(Enum):
    """The write operation a hook runs for."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class HookRejected(Exception):
    """Raised by a hook to refuse the operation.

    Attributes:
        reason: Message returned to the client
    """

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


CreateHook = Callable[[Entity, Any], Awaitable[Entity | None]]
UpdateHook = Callable[[Entity, Entity, Any], Awaitable[Entity | None]]
DeleteHook = Callable[[Entity, Any], Awaitable[Entity | None]]
ExtExtractor = Callable[[Request, Any], Awaitable[Any]]


async def default_on_create(entity: Entity, ext: Any) -> Entity:
    return entity


async def default_on_update(old: Entity, new: Entity, ext: Any) -> Entity:
    return new


async def default_on_delete(entity: Entity, ext: Any) -> Entity:
    return entity


async def no_request_ext(request: Request, context: Any) -> None:
    return None


@dataclass(frozen=True)
class EntityHooks:
    """The hook set of one entity type.

    Any hook left out is an identity pass-through that cannot fail, so
    entities without custom policy behave like unconditional CRUD.
    """

    on_create: CreateHook = default_on_create
    on_update: UpdateHook = default_on_update
    on_delete: DeleteHook = default_on_delete
    request_ext: ExtExtractor = no_request_ext

    def for_operation(self, operation: Operation) -> Callable[..., Awaitable[Entity | None]]:
        if operation is Operation.CREATE:
            return self.on_create
        if operation is Operation.UPDATE:
            return self.on_update
        return self.on_delete
