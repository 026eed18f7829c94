"""EntityForge CLI entry point."""

import click


@click.group()
def cli():
    """EntityForge: generated CRUD applications from entity definitions."""
    pass


# Register subcommands
from entityforge.cli.commands import init_db, routes, serve  # noqa: E402

cli.add_command(routes)
cli.add_command(init_db)
cli.add_command(serve)
