"""Order aggregate: the core of the domain.

An order is a single product line bought by one customer.  The product
name and the total amount are snapshots taken at creation time; catalog
price changes never flow back into existing orders.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone

from orderdesk.domain.exceptions import InvalidTransitionError, ValidationError
from orderdesk.domain.model.order_status import (
    INITIAL_STATUS,
    OrderStatus,
    is_valid_courier_transition,
)
from orderdesk.domain.model.value_objects import Money, OrderCode, Quantity


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


_MOBILE_SEPARATORS = re.compile(r"[\s\-+]")


def normalize_mobile(raw: str) -> str:
    """Drop spaces, dashes and plus signs.

    '+94 77-123 4567' and '94771234567' are the same customer.
    """
    return _MOBILE_SEPARATORS.sub("", raw)


# Fields an explicit update may touch.  Status has its own paths.
EDITABLE_FIELDS = (
    "customer_name",
    "address",
    "mobile_number",
    "product_ref",
    "product_name",
    "quantity",
    "notes",
    "total_amount",
)


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders.  The ``__init__`` is
    kept simple so the repository can reconstitute persisted
    orders without re-validating.
    """

    id: int | None
    order_code: OrderCode
    customer_name: str
    address: str
    mobile_number: str
    product_ref: str
    product_name: str
    quantity: Quantity
    total_amount: Money
    status: OrderStatus = INITIAL_STATUS
    notes: str = ""
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_code: OrderCode,
        customer_name: str,
        address: str,
        mobile_number: str,
        product_ref: str,
        product_name: str,
        quantity: Quantity,
        unit_price: Money,
        total_amount: Money | None = None,
        notes: str = "",
        now: datetime | None = None,
    ) -> Order:
        """Create a new order in the initial status.

        Field rules are checked beforehand by ``OrderValidator``; this only
        normalizes the values and derives the total when none is given.
        """
        if total_amount is None:
            total_amount = unit_price * quantity.value
        now = now or utcnow()
        return Order(
            id=None,
            order_code=order_code,
            customer_name=customer_name.strip(),
            address=address.strip(),
            mobile_number=normalize_mobile(mobile_number.strip()),
            product_ref=product_ref.strip(),
            product_name=product_name,
            quantity=quantity,
            total_amount=total_amount,
            status=INITIAL_STATUS,
            notes=(notes or "").strip(),
            created_at=now,
            updated_at=now,
        )

    # --- State transitions ----------------------------------------------------

    def set_status(self, new_status: OrderStatus | str, now: datetime | None = None) -> None:
        """Move to any status in the status set.

        No transition guard applies here.  Setting the current status again
        is accepted and only refreshes ``updated_at``.
        """
        self.status = OrderStatus.parse(new_status)
        self.updated_at = now or utcnow()

    def advance_courier_status(
        self, new_status: OrderStatus | str, now: datetime | None = None
    ) -> None:
        """Move along the courier transition table.

        Raises InvalidTransitionError unless the target is listed for the
        current status.
        """
        target = OrderStatus.parse(new_status)
        if not is_valid_courier_transition(self.status, target):
            raise InvalidTransitionError(self.status.value, target.value)
        self.status = target
        self.updated_at = now or utcnow()

    # --- Field updates --------------------------------------------------------

    def apply_changes(self, changes: dict, now: datetime | None = None) -> None:
        """Apply already-validated field changes.

        ``order_code``, ``id``, ``status`` and ``created_at`` are not
        editable through this path.
        """
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError(
                f"Fields cannot be updated: {', '.join(sorted(unknown))}"
            )
        for name, value in changes.items():
            if name == "mobile_number":
                value = normalize_mobile(value.strip())
            elif isinstance(value, str):
                value = value.strip()
            setattr(self, name, value)
        self.updated_at = now or utcnow()

    # --- Computed properties --------------------------------------------------

    @property
    def customer_key(self) -> tuple[str, str]:
        """Identity used to group orders by customer."""
        return self.customer_name, self.mobile_number

    @property
    def is_delivered(self) -> bool:
        return self.status == OrderStatus.DELIVERED
