"""CLI commands for the Order aggregate."""

from __future__ import annotations

from datetime import datetime

import click

from orderdesk.application.create_order import CreateOrderHandler
from orderdesk.application.delete_order import DeleteOrderHandler
from orderdesk.application.dto import OrderDTO, OrderRequest, format_timestamp
from orderdesk.application.list_orders import ListOrdersHandler
from orderdesk.application.show_order import OrderTimelineHandler, ShowOrderHandler
from orderdesk.application.update_order import UpdateOrderHandler
from orderdesk.application.update_order_status import (
    SendToCourierHandler,
    UpdateOrderStatusHandler,
)
from orderdesk.domain.exceptions import DomainException
from orderdesk.infrastructure.bootstrap import build_repositories
from orderdesk.infrastructure.config import get_settings

DATE = click.DateTime(formats=["%Y-%m-%d"])


def display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id} {dto.order_code}  (status={dto.status})")
    click.echo(f"Customer: {dto.customer_name}  {dto.mobile_number}")
    click.echo(f"Address:  {dto.address}")
    click.echo(f"Product:  {dto.product_name} [{dto.product_ref}] x {dto.quantity}")
    click.echo(f"Total:    {dto.total_amount}")
    if dto.notes:
        click.echo(f"Notes:    {dto.notes}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo(f"Updated:  {dto.updated_at}")


def display_order_table(dtos: list[OrderDTO]) -> None:
    if not dtos:
        click.echo("No orders found.")
        return
    click.echo(
        f"{'ID':<6} {'Code':<15} {'Customer':<20} {'Status':<16} {'Qty':>4} {'Total':>16}"
    )
    click.echo("-" * 82)
    for dto in dtos:
        click.echo(
            f"{dto.id:<6} {dto.order_code:<15} {dto.customer_name[:20]:<20} "
            f"{dto.status:<16} {dto.quantity:>4} {dto.total_amount:>16}"
        )


def display_timeline(checkpoints) -> None:
    for step in checkpoints:
        mark = "x" if step.completed else " "
        click.echo(f"  [{mark}] {step.label:<18} {format_timestamp(step.at)}")


def _date_range(start: datetime | None, end: datetime | None):
    if start is None and end is None:
        return None
    if start is None or end is None:
        raise click.UsageError("--from and --to must be given together")
    return start.date(), end.date()


@click.command("create")
@click.option("--customer", required=True, help="Customer full name.")
@click.option("--address", required=True, help="Delivery address.")
@click.option("--mobile", required=True, help="Mobile number (10-15 digits).")
@click.option("--product", "product_ref", required=True, help="Product reference, e.g. PROD001.")
@click.option("--quantity", required=True, help="Number of units.")
@click.option("--notes", default="", help="Free-text notes.")
@click.option("--amount", default=None, help="Explicit total amount (default: quantity x price).")
@click.option("--no-limit", is_flag=True, default=False, help="Skip the public quantity ceiling.")
def order_create(customer, address, mobile, product_ref, quantity, notes, amount, no_limit) -> None:
    """Place a new order."""
    repos = build_repositories()
    handler = CreateOrderHandler(
        order_repo=repos.orders,
        product_repo=repos.products,
        max_quantity=None if no_limit else get_settings().max_public_quantity,
    )
    request = OrderRequest(
        customer_name=customer,
        address=address,
        mobile_number=mobile,
        product_ref=product_ref,
        quantity=quantity,
        notes=notes,
        total_amount=amount,
    )

    try:
        dto = handler.handle(request)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_code} created  (id={dto.id}, status={dto.status})")
    click.echo(f"Total: {dto.total_amount}")


@click.command("show")
@click.option("--id", "order_id", type=int, default=None, help="Order ID to display.")
@click.option("--code", "order_code", default=None, help="Order code to display.")
def order_show(order_id: int | None, order_code: str | None) -> None:
    """Show details of an existing order."""
    if (order_id is None) == (order_code is None):
        raise click.UsageError("Give exactly one of --id or --code")
    handler = ShowOrderHandler(order_repo=build_repositories().orders)

    try:
        dto = handler.handle(order_id) if order_id is not None else handler.handle_code(order_code)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_order(dto)


@click.command("list")
@click.option("--status", default=None, help="Only orders with this status ('all' for every status).")
@click.option("--search", default=None, help="Match name, mobile or order code.")
@click.option("--from", "start", type=DATE, default=None, help="First creation day (YYYY-MM-DD).")
@click.option("--to", "end", type=DATE, default=None, help="Last creation day (YYYY-MM-DD).")
@click.option("--limit", type=int, default=None, help="Maximum rows (capped at 1000).")
def order_list(status, search, start, end, limit) -> None:
    """List orders, newest first."""
    handler = ListOrdersHandler(order_repo=build_repositories().orders)

    try:
        dtos = handler.handle(
            status=status, search=search, date_range=_date_range(start, end), limit=limit
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_order_table(dtos)


@click.command("update")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to update.")
@click.option("--customer", "customer_name", default=None, help="New customer name.")
@click.option("--address", default=None, help="New address.")
@click.option("--mobile", "mobile_number", default=None, help="New mobile number.")
@click.option("--product", "product_ref", default=None, help="New product reference.")
@click.option("--quantity", default=None, help="New quantity.")
@click.option("--notes", default=None, help="New notes.")
@click.option("--amount", "total_amount", default=None, help="New total amount.")
def order_update(order_id: int, **changes) -> None:
    """Change fields of an order (not its status)."""
    repos = build_repositories()
    handler = UpdateOrderHandler(order_repo=repos.orders, product_repo=repos.products)

    try:
        dto = handler.handle(order_id, changes)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_order(dto)


@click.command("status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--status", required=True, help="New status.")
def order_status(order_id: int, status: str) -> None:
    """Set an order's status (any status, no transition check)."""
    handler = UpdateOrderStatusHandler(order_repo=build_repositories().orders)

    try:
        dto = handler.handle(order_id, status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_code} status updated to {dto.status}.")


@click.command("send")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
def order_send(order_id: int) -> None:
    """Hand an order over to the courier."""
    handler = SendToCourierHandler(order_repo=build_repositories().orders)

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order {dto.order_code} sent to courier.")


@click.command("delete")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to delete.")
@click.confirmation_option(prompt="Delete this order permanently?")
def order_delete(order_id: int) -> None:
    """Delete an order permanently."""
    handler = DeleteOrderHandler(order_repo=build_repositories().orders)

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} deleted.")


@click.command("timeline")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
def order_timeline(order_id: int) -> None:
    """Show the processing timeline of an order."""
    handler = OrderTimelineHandler(order_repo=build_repositories().orders)

    try:
        checkpoints = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    display_timeline(checkpoints)
