"""Order status vocabulary and the courier transition table.

Two enforcement levels exist:

* the generic status setter accepts any member of ``OrderStatus``;
* the courier setter additionally requires the target to appear in
  ``COURIER_TRANSITIONS`` for the current status.
"""

from __future__ import annotations

from enum import Enum

from orderdesk.domain.exceptions import InvalidStatusError


class OrderStatus(Enum):
    PLACED = "placed"
    RECEIVED = "received"
    ISSUED = "issued"
    SENT_TO_COURIER = "sent-to-courier"
    IN_TRANSIT = "in-transit"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def is_courier(self) -> bool:
        return self in COURIER_STATUSES

    @staticmethod
    def parse(value: OrderStatus | str) -> OrderStatus:
        """Resolve a status, accepting legacy spellings.

        Raises InvalidStatusError for anything outside the status set.
        """
        if isinstance(value, OrderStatus):
            return value
        if not isinstance(value, str) or not value.strip():
            raise InvalidStatusError("Status is required")
        key = value.strip().lower()
        key = _ALIASES.get(key, key)
        try:
            return OrderStatus(key)
        except ValueError:
            valid = ", ".join(s.value for s in OrderStatus)
            raise InvalidStatusError(
                f"Invalid status '{value}'. Valid statuses: {valid}"
            ) from None


# Spellings found in older data and clients.
_ALIASES = {
    "pending": "placed",
    "sended": "sent-to-courier",
    "sent": "sent-to-courier",
    "sent_to_courier": "sent-to-courier",
    "in_transit": "in-transit",
}

_LABELS = {
    OrderStatus.PLACED: "Order Placed",
    OrderStatus.RECEIVED: "Received",
    OrderStatus.ISSUED: "Issued",
    OrderStatus.SENT_TO_COURIER: "Sent to Courier",
    OrderStatus.IN_TRANSIT: "In Transit",
    OrderStatus.DELIVERED: "Delivered",
    OrderStatus.CANCELLED: "Cancelled",
}

INITIAL_STATUS = OrderStatus.PLACED

COURIER_STATUSES = frozenset(
    {OrderStatus.SENT_TO_COURIER, OrderStatus.IN_TRANSIT, OrderStatus.DELIVERED}
)

COURIER_TRANSITIONS: dict[OrderStatus, tuple[OrderStatus, ...]] = {
    OrderStatus.SENT_TO_COURIER: (OrderStatus.IN_TRANSIT, OrderStatus.DELIVERED),
    OrderStatus.IN_TRANSIT: (OrderStatus.DELIVERED,),
    OrderStatus.DELIVERED: (),  # terminal
}

# Position of each status along the fulfillment pipeline.  Cancelled orders
# sit outside the pipeline.
PIPELINE: tuple[OrderStatus, ...] = (
    OrderStatus.PLACED,
    OrderStatus.RECEIVED,
    OrderStatus.ISSUED,
    OrderStatus.SENT_TO_COURIER,
    OrderStatus.IN_TRANSIT,
    OrderStatus.DELIVERED,
)


def pipeline_rank(status: OrderStatus) -> int:
    """Index of *status* in the pipeline, -1 for cancelled."""
    try:
        return PIPELINE.index(status)
    except ValueError:
        return -1


def is_valid_courier_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in COURIER_TRANSITIONS.get(current, ())


def next_courier_statuses(current: OrderStatus) -> list[OrderStatus]:
    """Statuses reachable from *current* in one courier step."""
    return list(COURIER_TRANSITIONS.get(current, ()))
