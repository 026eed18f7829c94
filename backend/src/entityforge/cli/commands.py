"""CLI commands: routes, init-db, serve."""

from pathlib import Path

import click

from entityforge.config import AppConfig
from entityforge.entity.loader import MetadataLoader
from entityforge.entity.model import Entity, schema_of
from entityforge.errors import RouteCollisionError, StorageError
from entityforge.persistence import create_adapter
from entityforge.persistence.store import table_name
from entityforge.routes.generator import RouteRegistry


def _load_entities(config: AppConfig) -> list[type[Entity]]:
    """Load YAML entities, exiting with an error when there are none."""
    if not config.metadata_path.exists():
        click.echo(f"Error: Metadata directory not found at {config.metadata_path}", err=True)
        raise SystemExit(1)

    loader = MetadataLoader(config.metadata_path)
    try:
        loader.load_all()
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    if not loader.entities:
        click.echo(f"Error: No entities found under {config.metadata_path / 'entities'}", err=True)
        raise SystemExit(1)
    return list(loader.entities.values())


metadata_option = click.option(
    "--metadata",
    "metadata_path",
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Metadata directory (default: ENTITYFORGE_METADATA_PATH or ./metadata).",
)


def _config(metadata_path: Path | None) -> AppConfig:
    config = AppConfig.from_env()
    if metadata_path is not None:
        config.metadata_path = metadata_path
    return config


@click.command()
@metadata_option
def routes(metadata_path: Path | None):
    """Print the generated route table of every entity."""
    config = _config(metadata_path)
    registry = RouteRegistry()
    try:
        for entity_cls in _load_entities(config):
            registry.add(entity_cls)
    except RouteCollisionError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)

    current = None
    for entity_name, route in registry.routes():
        if entity_name != current:
            if current is not None:
                click.echo()
            click.echo(click.style(entity_name, bold=True))
            current = entity_name
        click.echo(f"  {route}")


@click.command("init-db")
@metadata_option
def init_db(metadata_path: Path | None):
    """Create the table of every entity if it doesn't exist."""
    config = _config(metadata_path)
    entities = _load_entities(config)

    config.database.ensure_directory()
    db = create_adapter(config.database)
    db.connect()
    try:
        for entity_cls in entities:
            schema = schema_of(entity_cls)
            db.initialize_entity(schema)
            click.echo(f"  {schema.name()} -> {table_name(schema)}")
    except StorageError as e:
        click.echo(click.style(f"Error: {e.message}", fg="red"), err=True)
        raise SystemExit(1)
    finally:
        db.close()

    click.echo(click.style(f"Initialized {len(entities)} table(s).", fg="green"))


@click.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address.")
@click.option("--port", default=8000, show_default=True, type=int, help="Bind port.")
@click.option("--reload", is_flag=True, default=False, help="Reload on code changes.")
def serve(host: str, port: int, reload: bool):
    """Run the application built from metadata with uvicorn."""
    import uvicorn

    config = AppConfig.from_env()
    uvicorn.run(
        "entityforge.app:create_app_from_env",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=config.log_level,
    )
