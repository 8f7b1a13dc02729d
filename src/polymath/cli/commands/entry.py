"""Entry recording commands."""

import click
from polymath.cli.error_handling import handle_domain_error
from polymath.cli.formatting import entry_lines
from polymath.domain.errors import DomainError
from polymath.utils.date_parser import parse_date


def entry_options(func):
    """Attach the shared entry field options to a command."""
    options = [
        click.option("--revenue", help="Revenue ($)"),
        click.option("--salaries", help="Salaries ($)"),
        click.option("--expenses", help="Expenses ($)"),
        click.option("--notes", help="Free-text notes"),
        click.option(
            "--set",
            "extras",
            multiple=True,
            metavar="FIELD=VALUE",
            help="Business-specific field, e.g. --set clients=12 (repeatable)",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def collect_fields(ctx, revenue, salaries, expenses, notes, extras) -> dict:
    """Build a partial entry payload from the options that were given."""
    fields = {}
    for name, value in (("revenue", revenue), ("salaries", salaries), ("expenses", expenses)):
        if value is not None:
            fields[name] = value
    if notes is not None:
        fields["notes"] = notes
    for item in extras:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            click.echo(f"Error: Expected FIELD=VALUE, got '{item}'", err=True)
            ctx.exit(1)
        fields[name.strip()] = value.strip()
    return fields


def resolve_date(ctx, service, value: str):
    try:
        return parse_date(value, today=service.today())
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)


@click.command("update")
@click.argument("business_id", metavar="BUSINESS")
@click.option("--date", "entry_date", help="Change the current entry's date")
@entry_options
@click.pass_context
def update_entry(ctx, business_id: str, entry_date: str | None, revenue, salaries, expenses, notes, extras):
    """Update today's entry for a business, creating it if needed.

    Only the given fields change; the others keep their current values.
    Invalid numbers are recorded as 0.

    Examples:
        polymath update iclean --revenue 1200 --set clients=14
        polymath update apl --expenses 300 --set items="boxes, tape"
    """
    service = ctx.obj["service"]
    fields = collect_fields(ctx, revenue, salaries, expenses, notes, extras)
    if entry_date is not None:
        fields["date"] = resolve_date(ctx, service, entry_date)

    try:
        entry = service.update_current_entry(business_id, fields)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated {business_id} entry for {entry.date.isoformat()}")
    for line in entry_lines(entry):
        click.echo(line)


@click.command("add")
@click.argument("business_id", metavar="BUSINESS")
@click.option(
    "--date",
    "entry_date",
    default="today",
    show_default=True,
    help="Entry date (YYYY-MM-DD or 'today', 'yesterday')",
)
@entry_options
@click.pass_context
def add_entry(ctx, business_id: str, entry_date: str, revenue, salaries, expenses, notes, extras):
    """Append a new entry for a business.

    Unlike update, this always records a separate entry.

    Examples:
        polymath add icandy --date 2024-01-15 --revenue 800 --salaries 200
    """
    service = ctx.obj["service"]
    fields = collect_fields(ctx, revenue, salaries, expenses, notes, extras)
    fields["date"] = resolve_date(ctx, service, entry_date)

    try:
        entry = service.add_business_entry(business_id, fields)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Added {business_id} entry for {entry.date.isoformat()}")
    for line in entry_lines(entry):
        click.echo(line)


def register_commands(cli):
    """Register entry commands with main CLI."""
    cli.add_command(update_entry)
    cli.add_command(add_entry)
