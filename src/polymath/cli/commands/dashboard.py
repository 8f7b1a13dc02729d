"""Dashboard viewing commands."""

import click
from polymath.cli.error_handling import handle_domain_error
from polymath.cli.formatting import entry_lines, format_currency, format_percent
from polymath.domain.errors import DomainError


@click.command("show")
@click.argument("business_id", metavar="BUSINESS", required=False)
@click.pass_context
def show(ctx, business_id: str | None):
    """Show portfolio health, or one business in detail.

    Examples:
        polymath show
        polymath show iclean
    """
    service = ctx.obj["service"]

    if business_id is not None:
        try:
            ledger = service.require_ledger(business_id)
        except DomainError as e:
            handle_domain_error(ctx, e)
            return
        metrics = service.get_business_metrics(business_id)
        click.echo(f"\n{ledger.name} [{metrics.health_status.value.upper()}]")
        click.echo("-" * 60)
        click.echo(f"Total profit: {format_currency(ledger.total_net_profit)}")
        click.echo(f"This week:    {format_currency(metrics.current_week)}")
        click.echo(f"Last week:    {format_currency(metrics.previous_week)}")
        click.echo(f"Growth:       {format_percent(metrics.weekly_growth)}")
        click.echo(f"MTD:          {format_currency(metrics.month_to_date)}")
        click.echo(f"Entries:      {len(ledger.entries)}")
        click.echo("\nCurrent entry:")
        for line in entry_lines(service.get_current_entry(business_id)):
            click.echo(line)
        return

    health = service.get_overall_health()
    click.echo("\nPortfolio health")
    click.echo("-" * 60)
    click.echo(f"Health score:  {health.health_score:.0f}/100 ({health.trend.value})")
    click.echo(f"Revenue:       {format_currency(health.total_revenue)}")
    click.echo(f"Costs:         {format_currency(health.total_expenses)}")
    click.echo(f"Net profit:    {format_currency(health.total_net_profit)}")
    click.echo(f"Profit margin: {format_percent(health.profit_margin)}")

    click.echo("\nBusinesses:")
    click.echo("-" * 60)
    for ledger in service.businesses:
        metrics = service.get_business_metrics(ledger.id)
        click.echo(
            f"{ledger.name:25s} | {metrics.health_status.value:9s} | "
            f"{format_currency(ledger.total_net_profit):>10s} | "
            f"growth {format_percent(metrics.weekly_growth):>7s} | "
            f"MTD {format_currency(metrics.month_to_date)}"
        )


@click.command("series")
@click.option("--limit", type=int, help="Show only the most recent N dates")
@click.pass_context
def series(ctx, limit: int | None):
    """Show portfolio profit and revenue per reporting date."""
    service = ctx.obj["service"]
    points = service.get_overall_health().historical_data
    if limit is not None:
        points = points[-limit:] if limit > 0 else ()

    if not points:
        click.echo("No entries recorded.")
        return

    click.echo(f"\n{'Date':12s} {'Net profit':>12s} {'Revenue':>12s}")
    click.echo("-" * 38)
    for point in points:
        click.echo(
            f"{point.date.isoformat():12s} "
            f"{format_currency(point.total_net_profit):>12s} "
            f"{format_currency(point.total_revenue):>12s}"
        )


def register_commands(cli):
    """Register dashboard commands with main CLI."""
    cli.add_command(show)
    cli.add_command(series)
