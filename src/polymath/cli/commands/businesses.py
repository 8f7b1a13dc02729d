"""Business registry command."""

import click
from polymath.domain.entities import extra_field_names
from polymath.domain.registry import BUSINESSES


@click.command("businesses")
def list_businesses():
    """List tracked businesses and their extra fields."""
    click.echo("\nBusinesses:")
    click.echo("-" * 60)
    for business in BUSINESSES:
        extras = ", ".join(extra_field_names(business.id))
        click.echo(f"{business.id:10s} | {business.name:25s} | {extras}")


def register_commands(cli):
    """Register businesses command with main CLI."""
    cli.add_command(list_businesses)
