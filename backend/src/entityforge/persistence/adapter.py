"""PersistenceAdapter Protocol: the storage contract consumed by the handlers."""

from typing import Any, Protocol, runtime_checkable

from entityforge.entity.model import Entity, EntitySchema


@runtime_checkable
class PersistenceAdapter(Protocol):
    """Interface all storage adapters must implement.

    Matches the public API of EntityStore. Each method issues a single
    statement; adapters own their connection pooling and isolation.
    """

    def connect(self) -> None: ...

    def close(self) -> None: ...

    def initialize_entity(self, schema: EntitySchema) -> None: ...

    def list_all(self, schema: EntitySchema) -> list[Entity]: ...

    def get(self, schema: EntitySchema, id: Any) -> Entity | None: ...

    def insert(self, schema: EntitySchema, entity: Entity) -> Entity: ...

    def update(self, schema: EntitySchema, entity: Entity) -> Entity | None: ...

    def delete(self, schema: EntitySchema, id: Any) -> bool: ...
