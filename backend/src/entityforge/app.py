"""FastAPI application factory."""

import logging
from collections.abc import Iterable
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from entityforge.config import AppConfig, configure_logging
from entityforge.context import Context, ContextProtocol
from entityforge.entity.loader import MetadataLoader
from entityforge.entity.model import Entity, schema_of
from entityforge.hooks.service import HookService
from entityforge.persistence import PersistenceAdapter, create_adapter
from entityforge.routes.errors import register_error_handlers
from entityforge.routes.generator import RouteRegistry
from entityforge.ui.renderer import JinjaRenderer, PageRenderer

logger = logging.getLogger(__name__)

UPLOADS_MOUNT = "/uploads"


def create_app(
    entities: Iterable[type[Entity]],
    config: AppConfig | None = None,
    db: PersistenceAdapter | None = None,
    ext: Any = None,
    renderer: PageRenderer | None = None,
    hook_service: HookService | None = None,
    title: str = "EntityForge",
) -> FastAPI:
    """Create an application serving the generated routes of each entity.

    Routes are registered immediately; the storage connection, table
    creation and the shared Context are set up in the lifespan. The
    Context is exposed as ``app.state.context`` once started.

    Args:
        entities: Entity types to expose
        config: Settings (default: AppConfig.from_env())
        db: Storage adapter (default: built from config.database)
        ext: Application extension carried by the Context
        renderer: Page renderer for the UI (default: JinjaRenderer)
        hook_service: Hook runner (default: HookService)
        title: Application title, also shown in the UI header

    Raises:
        RouteCollisionError: If two entities derive the same path segment
    """
    config = config or AppConfig.from_env()
    configure_logging(config.log_level)

    registry = RouteRegistry()
    for entity_cls in entities:
        registry.add(entity_cls)

    if db is None:
        config.database.ensure_directory()
        db = create_adapter(config.database)

    renderer = renderer or JinjaRenderer(title=title)
    uploads_dir = config.uploads_dir
    uploads_dir.mkdir(parents=True, exist_ok=True)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Connect storage and build the Context on startup, close on shutdown."""
        db.connect()
        for entity_cls in registry.entities:
            db.initialize_entity(schema_of(entity_cls))

        app.state.context = Context.build(db, registry.entities, uploads_dir, ext)
        logger.info(
            "Serving %d entities: %s",
            len(registry),
            ", ".join(app.state.context.names_plural()),
        )

        yield

        app.state.context = None
        db.close()

    app = FastAPI(title=title, lifespan=lifespan)
    app.state.context = None

    def get_context() -> ContextProtocol | None:
        return app.state.context

    for router in registry.build_routers(get_context, renderer, hook_service):
        app.include_router(router)

    app.mount(UPLOADS_MOUNT, StaticFiles(directory=uploads_dir), name="uploads")
    register_error_handlers(app, renderer, get_context)

    return app


def create_app_from_env() -> FastAPI:
    """Build the application from YAML metadata and environment settings.

    Used as a uvicorn factory by the CLI and the dev entrypoint.
    """
    config = AppConfig.from_env()
    loader = MetadataLoader(config.metadata_path)
    loader.load_all()
    if not loader.entities:
        logger.warning("No entities found under %s", config.metadata_path / "entities")
    return create_app(loader.entities.values(), config=config)
