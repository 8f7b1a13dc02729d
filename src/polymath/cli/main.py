"""Main CLI entry point."""

import click
import structlog

from polymath.database.factories import DB_PATH_ENV, create_sqlite_store
from polymath.database.gateway import PersistenceGateway
from polymath.database.memory import InMemoryStore
from polymath.domain.errors import StorageError
from polymath.domain.portfolio import PortfolioService
from polymath.log_config import LOG_LEVEL_ENV, configure_logging

# Import and register all commands at module level
from polymath.cli.commands import businesses, dashboard, entry, snapshot

logger = structlog.get_logger(__name__)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV} environment variable)",
    envvar=DB_PATH_ENV,
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    envvar=LOG_LEVEL_ENV,
    show_default=True,
    help="Logging threshold",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Polymath - portfolio dashboard for five business units.

    Record daily revenue, costs and business-specific figures, then review
    running totals, weekly growth and the portfolio health score.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Open storage only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is None:
        return

    try:
        store = create_sqlite_store(database_path=db_path)
    except StorageError as e:
        logger.error("storage unavailable, running in memory", error=str(e))
        click.echo("Warning: storage unavailable, changes will not be saved.", err=True)
        store = InMemoryStore()
    store.connect()

    gateway = PersistenceGateway(store)
    ctx.obj["store"] = store
    ctx.obj["service"] = PortfolioService(gateway)

    def close() -> None:
        if gateway.degraded and not isinstance(store, InMemoryStore):
            click.echo("Warning: storage failed, changes are held in memory only.", err=True)
        store.disconnect()

    ctx.call_on_close(close)


# Register all commands
businesses.register_commands(cli)
dashboard.register_commands(cli)
entry.register_commands(cli)
snapshot.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
