"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from orderdesk.domain.model.order import Order

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class OrderRequest:
    """Input: an order submission as typed by a customer or staff member.

    Values are kept raw (quantity may still be a string) so the validator
    can report every problem at once.
    """

    customer_name: str
    address: str
    mobile_number: str
    product_ref: str
    quantity: int | str
    notes: str = ""
    total_amount: str | None = None


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    order_code: str
    customer_name: str
    address: str
    mobile_number: str
    product_ref: str
    product_name: str
    quantity: int
    status: str
    status_label: str
    total_amount: str  # formatted, e.g. "LKR 10,000.00"
    notes: str
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class StatusOption:
    value: str
    label: str


@dataclass(frozen=True)
class BulkFailure:
    order_id: int
    error: str


@dataclass
class BulkAdvanceReport:
    """Per-order outcome of a bulk courier update."""

    status: str
    successful: list[int] = field(default_factory=list)
    failed: list[BulkFailure] = field(default_factory=list)

    @property
    def message(self) -> str:
        return f"Updated {len(self.successful)} orders, {len(self.failed)} failed"


def format_timestamp(moment: datetime | None) -> str:
    return moment.strftime(TIMESTAMP_FORMAT) if moment is not None else "-"


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_code=order.order_code.value,
        customer_name=order.customer_name,
        address=order.address,
        mobile_number=order.mobile_number,
        product_ref=order.product_ref,
        product_name=order.product_name,
        quantity=order.quantity.value,
        status=order.status.value,
        status_label=order.status.label,
        total_amount=str(order.total_amount),
        notes=order.notes,
        created_at=format_timestamp(order.created_at),
        updated_at=format_timestamp(order.updated_at),
    )
