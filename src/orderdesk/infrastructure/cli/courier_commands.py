"""CLI commands for courier tracking."""

from __future__ import annotations

import click

from orderdesk.application.advance_courier_status import AdvanceCourierStatusHandler
from orderdesk.application.courier_orders import CourierOrdersHandler
from orderdesk.domain.exceptions import DomainException
from orderdesk.infrastructure.bootstrap import build_repositories
from orderdesk.infrastructure.cli.order_commands import display_order_table, display_timeline


def _parse_ids(raw: str) -> list[int]:
    """Parse '1,2,3' into a list of order IDs."""
    ids: list[int] = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            ids.append(int(part))
        except ValueError:
            raise click.BadParameter(f"Invalid order ID '{part}'.")
    return ids


@click.command("list")
@click.option("--status", default=None, help="sent-to-courier, in-transit, delivered or 'all'.")
@click.option("--search", default=None, help="Match name, mobile or order code.")
def courier_list(status: str | None, search: str | None) -> None:
    """List orders that are with the courier."""
    handler = CourierOrdersHandler(order_repo=build_repositories().orders)

    try:
        dtos = handler.list(status=status, search=search)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{len(dtos)} courier order(s)")
    display_order_table(dtos)


@click.command("advance")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--status", required=True, help="in-transit or delivered.")
def courier_advance(order_id: int, status: str) -> None:
    """Move an order along the courier route."""
    handler = AdvanceCourierStatusHandler(order_repo=build_repositories().orders)

    try:
        dto = handler.handle(order_id, status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_code} is now {dto.status}.")


@click.command("bulk")
@click.option("--ids", required=True, help="Order IDs as '1,2,3'.")
@click.option("--status", required=True, help="Target courier status.")
def courier_bulk(ids: str, status: str) -> None:
    """Advance several orders; each succeeds or fails on its own."""
    handler = AdvanceCourierStatusHandler(order_repo=build_repositories().orders)

    try:
        report = handler.handle_bulk(_parse_ids(ids), status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(report.message)
    for order_id in report.successful:
        click.echo(f"  ok    #{order_id}")
    for failure in report.failed:
        click.echo(f"  fail  #{failure.order_id}: {failure.error}")


@click.command("next")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
def courier_next(order_id: int) -> None:
    """Show the courier statuses an order may move to."""
    handler = CourierOrdersHandler(order_repo=build_repositories().orders)

    try:
        current, options = handler.next_statuses(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Current status: {current}")
    if not options:
        click.echo("No further courier updates possible.")
    for option in options:
        click.echo(f"  {option.value:<16} {option.label}")


@click.command("timeline")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
def courier_timeline(order_id: int) -> None:
    """Show the delivery timeline of an order."""
    handler = CourierOrdersHandler(order_repo=build_repositories().orders)

    try:
        checkpoints = handler.timeline(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_timeline(checkpoints)


@click.command("stats")
def courier_stats() -> None:
    """Show courier counters and the average delivery time."""
    stats = CourierOrdersHandler(order_repo=build_repositories().orders).stats()

    if stats.degraded:
        click.echo("Warning: order store unavailable, figures are empty.", err=True)
    click.echo(f"Courier orders:   {stats.total}")
    click.echo(f"Sent to courier:  {stats.sent_to_courier}")
    click.echo(f"In transit:       {stats.in_transit}")
    click.echo(f"Delivered:        {stats.delivered}")
    click.echo(f"Pending delivery: {stats.pending_delivery}")
    click.echo(f"Avg delivery:     {stats.avg_delivery_days:.1f} days")
