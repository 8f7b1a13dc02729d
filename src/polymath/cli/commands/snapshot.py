"""Snapshot history commands."""

import click
from polymath.cli.formatting import format_currency
from polymath.domain.metrics import overall_health


@click.command("save")
@click.pass_context
def save(ctx):
    """Save the portfolio and archive a snapshot (keeps the last 52)."""
    service = ctx.obj["service"]
    count = service.save_data()
    click.echo(f"Saved snapshot ({count} in history)")


@click.command("history")
@click.pass_context
def history(ctx):
    """List archived snapshots, oldest first."""
    service = ctx.obj["service"]
    snapshots = service.history
    if not snapshots:
        click.echo("No snapshots saved.")
        return

    click.echo(f"\n{'#':>3s} {'Revenue':>12s} {'Net profit':>12s} {'Score':>6s}")
    click.echo("-" * 36)
    for index, snapshot in enumerate(snapshots, start=1):
        health = overall_health(snapshot)
        click.echo(
            f"{index:3d} {format_currency(health.total_revenue):>12s} "
            f"{format_currency(health.total_net_profit):>12s} "
            f"{health.health_score:6.0f}"
        )


@click.command("reset")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def reset(ctx, yes: bool):
    """Delete all entries and snapshot history."""
    if not yes and not click.confirm("Delete all entries and history?"):
        click.echo("Cancelled.")
        return
    ctx.obj["service"].reset()
    click.echo("Portfolio reset.")


def register_commands(cli):
    """Register snapshot commands with main CLI."""
    cli.add_command(save)
    cli.add_command(history)
    cli.add_command(reset)
