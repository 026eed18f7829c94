"""Hook registry for EntityForge.

Maps an entity name to its hook set. Entities that never register
anything get the identity defaults.
"""

import dataclasses
import inspect
from collections.abc import Callable
from typing import Any, TypeVar

from entityforge.hooks.types import EntityHooks, Operation

F = TypeVar("F", bound=Callable[..., Any])

_HOOK_FIELDS = {
    Operation.CREATE: "on_create",
    Operation.UPDATE: "on_update",
    Operation.DELETE: "on_delete",
}


def _validate(entity_name: str, hooks: EntityHooks) -> None:
    """All three hooks and the extractor must be async functions."""
    for attr in ("on_create", "on_update", "on_delete", "request_ext"):
        fn = getattr(hooks, attr)
        if not callable(fn) or not inspect.iscoroutinefunction(fn):
            raise ValueError(
                f"Hook '{attr}' for entity '{entity_name}' must be an async function, "
                f"got {fn!r}"
            )


class HookRegistry:
    """Registry for per-entity hook sets.

    Hooks are registered at application startup, either as a whole
    ``EntityHooks`` bundle or one at a time with the decorators.

    Example:
        @hook("Article", Operation.CREATE)
        async def stamp_author(article, user):
            article.author = user.user_id
            return article
    """

    _hooks: dict[str, EntityHooks] = {}

    @classmethod
    def register(cls, entity_name: str, hooks: EntityHooks) -> None:
        """Register the hook set for an entity, replacing any previous one.

        Raises:
            ValueError: If a hook or the extractor is not an async function
        """
        _validate(entity_name, hooks)
        cls._hooks[entity_name] = hooks

    @classmethod
    def set_hook(cls, entity_name: str, operation: Operation, fn: Callable[..., Any]) -> None:
        """Replace a single hook, keeping the rest of the entity's set."""
        current = cls.get(entity_name)
        cls.register(entity_name, dataclasses.replace(current, **{_HOOK_FIELDS[operation]: fn}))

    @classmethod
    def set_request_ext(cls, entity_name: str, fn: Callable[..., Any]) -> None:
        """Replace the request extension extractor of an entity."""
        current = cls.get(entity_name)
        cls.register(entity_name, dataclasses.replace(current, request_ext=fn))

    @classmethod
    def get(cls, entity_name: str) -> EntityHooks:
        """Get the hook set of an entity, or the identity defaults."""
        return cls._hooks.get(entity_name) or EntityHooks()

    @classmethod
    def is_registered(cls, entity_name: str) -> bool:
        """Check if an entity has registered hooks."""
        return entity_name in cls._hooks

    @classmethod
    def list_registered(cls) -> list[str]:
        """List entity names with registered hooks."""
        return sorted(cls._hooks.keys())

    @classmethod
    def clear(cls) -> None:
        """Clear all registrations. Primarily for testing."""
        cls._hooks.clear()


def hook(entity_name: str, operation: Operation | str) -> Callable[[F], F]:
    """Decorator to register one lifecycle hook.

    Usage:
        @hook("Article", "update")
        async def keep_slug(old, new, ext):
            new.slug = old.slug
            return new
    """
    op = Operation(operation)

    def decorator(fn: F) -> F:
        HookRegistry.set_hook(entity_name, op, fn)
        return fn

    return decorator


def request_extension(entity_name: str) -> Callable[[F], F]:
    """Decorator to register the request extension extractor of an entity.

    Usage:
        @request_extension("Article")
        async def current_user(request, context):
            token = request.headers.get("Authorization")
            if not token:
                raise HTTPException(401, "Authentication required")
            return lookup_user(token)
    """

    def decorator(fn: F) -> F:
        HookRegistry.set_request_ext(entity_name, fn)
        return fn

    return decorator
