"""Command-line entry point for ReviewRoster.

``reviewroster init`` writes a starter config, ``reviewroster start`` serves
the HTTP API and ``reviewroster status`` reports what the database holds.
"""
import asyncio
import sys
from pathlib import Path

import click
import uvicorn

from . import __version__
from .core.config.logging import configure_logging
from .core.config.settings import ReviewRosterConfig, init_config


@click.group()
@click.version_option(version=__version__)
def cli():
    """ReviewRoster - pull request tracking with team-based reviewer assignment."""
    pass


@cli.command()
@click.option(
    "--config-path",
    "-c",
    type=click.Path(dir_okay=False),
    default="reviewroster.yaml",
    help="Where to write the configuration",
)
@click.option("--force", "-f", is_flag=True, help="Replace an existing file")
def init(config_path: str, force: bool):
    """Write a default ReviewRoster configuration file."""
    target = Path(config_path)

    if target.exists() and not force:
        click.echo(f"{config_path} already exists; pass --force to replace it")
        return

    try:
        config = ReviewRosterConfig.create_default_config(target)
    except Exception as e:
        click.echo(f"Could not write {config_path}: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Created configuration file: {config_path}")
    click.echo(f"  listen:            {config.api_host}:{config.api_port}")
    click.echo(f"  storage:           {config.storage} ({config.db_path})")
    click.echo(f"  reviewers per PR:  {config.reviewers_per_pr}")
    click.echo(f"  log level:         {config.log_level}")


@cli.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Configuration file to load",
)
@click.option("--host", help="Bind address (overrides api_host)")
@click.option("--port", type=int, help="Bind port (overrides api_port)")
def start(config: str, host: str, port: int):
    """Serve the ReviewRoster HTTP API."""
    try:
        settings = init_config(config)
        if host:
            settings.api_host = host
        if port:
            settings.api_port = port

        configure_logging(settings)

        click.echo(f"🚀 ReviewRoster listening on http://{settings.api_host}:{settings.api_port}")
        click.echo(f"   database: {settings.get_database_url()}")

        uvicorn.run(
            "reviewroster.api:app",
            host=settings.api_host,
            port=settings.api_port,
            log_level=settings.log_level.lower(),
        )
    except KeyboardInterrupt:
        click.echo("\nReviewRoster stopped")
    except Exception as e:
        click.echo(f"Could not start ReviewRoster: {e}", err=True)
        sys.exit(1)


async def _pull_request_counts(database_url: str) -> tuple[int, int]:
    from .core.models import PullRequestStatus
    from .core.storage.database import init_db
    from .core.storage.repositories import StatsRepository

    db = init_db(database_url)
    try:
        await db.create_tables()
        async with db.session() as session:
            stats = StatsRepository(session)
            total = await stats.count_pull_requests()
            open_count = await stats.count_pull_requests(PullRequestStatus.OPEN)
        return total, open_count
    finally:
        await db.close()


@cli.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Configuration file to load",
)
def status(config: str):
    """Show the active configuration and pull request counts."""
    try:
        settings = init_config(config)
        database_url = settings.get_database_url()

        click.echo(f"ReviewRoster {__version__}")
        click.echo(f"  config:            {config or 'defaults / environment'}")
        click.echo(f"  database:          {database_url}")
        click.echo(f"  reviewers per PR:  {settings.reviewers_per_pr}")

        total, open_count = asyncio.run(_pull_request_counts(database_url))
    except Exception as e:
        click.echo(f"Status check failed: {e}", err=True)
        sys.exit(1)

    click.echo("✓ Database connection successful")
    click.echo(f"Pull requests: {total} total, {open_count} open, {total - open_count} merged")


if __name__ == "__main__":
    cli()
