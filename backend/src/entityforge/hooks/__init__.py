"""EntityForge entity lifecycle hook system.

Provides per-entity extension points around write operations:
- on_create: before insert (can transform, can reject)
- on_update: before overwrite, sees old and new state (can transform, can reject)
- on_delete: before delete (can reject)
- request_ext: extracts request-bound data (identity, tenant) passed to hooks

Usage:
    from entityforge.hooks import hook, request_extension, HookRejected

    @request_extension("Article")
    async def current_user(request, context):
        return request.headers["X-User"]

    @hook("Article", "create")
    async def stamp_author(article, user):
        article.author = user
        return article
"""

from entityforge.hooks.registry import HookRegistry, hook, request_extension
from entityforge.hooks.service import HookService
from entityforge.hooks.types import EntityHooks, HookRejected, Operation

__all__ = [
    "EntityHooks",
    "HookRegistry",
    "HookRejected",
    "HookService",
    "Operation",
    "hook",
    "request_extension",
]
