"""Context shared by every generated handler.

The context bundles what all handlers may assume is available: the
storage pool, the plural names of every registered entity (for
cross-entity navigation), the uploads directory and an application
extension that generic code never inspects.

Handlers that need only part of the extension declare an explicit
projection function instead of receiving the whole context:

    def mailer(ctx: ContextProtocol) -> Mailer:
        return ctx.ext.mailer

    @router.post("/notify")
    async def notify(mailer: Mailer = Depends(context_dependency(get_ctx, mailer))):
        ...
"""

import dataclasses
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, TypeVar, runtime_checkable

from entityforge.entity.model import Entity, schema_of
from entityforge.persistence.adapter import PersistenceAdapter

T = TypeVar("T")


@runtime_checkable
class ContextProtocol(Protocol):
    """What every handler may assume is available. All accessors are pure."""

    @property
    def db(self) -> PersistenceAdapter: ...

    def names_plural(self) -> Iterator[str]: ...

    @property
    def uploads_dir(self) -> Path: ...

    @property
    def ext(self) -> Any: ...


# Projection function: full context -> the slice a handler needs
Projection = Callable[[ContextProtocol], T]


@dataclass(frozen=True)
class Context:
    """Reference context implementation.

    Immutable; ``clone()`` and ``with_ext()`` share the store, the name
    tuple and the uploads path with the original.

    Attributes:
        store: Storage adapter (owns the connection pool)
        plural_names: Sorted plural names of all registered entities
        uploads: Directory for uploaded media
        extension: Application-defined extension, None when unused
    """

    store: PersistenceAdapter
    plural_names: tuple[str, ...]
    uploads: Path
    extension: Any = None

    @classmethod
    def build(
        cls,
        db: PersistenceAdapter,
        entities: Iterable[type[Entity]],
        uploads_dir: Path | str,
        ext: Any = None,
    ) -> "Context":
        """Build a context whose name set covers every given entity."""
        names = sorted({schema_of(e).name_plural() for e in entities})
        return cls(store=db, plural_names=tuple(names), uploads=Path(uploads_dir), extension=ext)

    @property
    def db(self) -> PersistenceAdapter:
        return self.store

    def names_plural(self) -> Iterator[str]:
        """Fresh iterator over registered plural names, in sorted order."""
        return iter(self.plural_names)

    @property
    def uploads_dir(self) -> Path:
        return self.uploads

    @property
    def ext(self) -> Any:
        return self.extension

    def clone(self) -> "Context":
        return dataclasses.replace(self)

    def with_ext(self, ext: Any) -> "Context":
        return dataclasses.replace(self, extension=ext)

    def project(self, projection: Projection[T]) -> T:
        """Apply a projection function to this context."""
        return projection(self)


def no_extension(ctx: ContextProtocol) -> None:
    """Projection for handlers that need nothing from the extension."""
    return None


def ext_attr(name: str) -> Projection[Any]:
    """Projection returning one attribute of the application extension."""

    def projection(ctx: ContextProtocol) -> Any:
        return getattr(ctx.ext, name)

    projection.__name__ = f"ext_{name}"
    return projection


def context_dependency(
    get_context: Callable[[], ContextProtocol | None],
    projection: Projection[Any] | None = None,
) -> Callable[[], Any]:
    """Create a FastAPI dependency yielding the context or a projection of it.

    Args:
        get_context: Returns the application's context (None before startup)
        projection: Optional projection applied to the context

    Example:
        @app.get("/stats")
        async def stats(db = Depends(context_dependency(get_ctx, lambda c: c.db))):
            ...
    """

    def dependency() -> Any:
        ctx = get_context()
        if ctx is None:
            raise RuntimeError("Context not initialized")
        return projection(ctx) if projection else ctx

    return dependency
