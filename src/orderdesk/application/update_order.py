"""Application service: Update Order use case.

Partial update of an order's editable fields.  The total amount is only
recalculated here, and only when the product or the quantity changes
without an explicit amount:

- new product: new price × (new or current) quantity;
- new quantity only: current catalog price of the order's product ×
  new quantity (left untouched if that product left the catalog).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from orderdesk.application.dto import OrderDTO, order_to_dto
from orderdesk.application.show_order import load_order
from orderdesk.domain.exceptions import EntityNotFoundError, ValidationError
from orderdesk.domain.model.order import EDITABLE_FIELDS, utcnow
from orderdesk.domain.model.value_objects import Money, Quantity
from orderdesk.domain.repository.order_repository import OrderRepository
from orderdesk.domain.repository.product_repository import ProductRepository
from orderdesk.domain.service.order_validator import OrderValidator, parse_quantity

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("customer_name", "address", "mobile_number", "notes")


class UpdateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._validator = OrderValidator(product_repo)
        self._clock = clock

    def handle(self, order_id: int, changes: dict) -> OrderDTO:
        changes = {k: v for k, v in changes.items() if v is not None}
        if not changes:
            raise ValidationError("No fields to update")
        if "status" in changes:
            raise ValidationError("Status cannot be changed here; update the status instead")
        unknown = set(changes) - (set(EDITABLE_FIELDS) - {"product_name"})
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

        order = load_order(self._order_repo, order_id)

        violations = self._validator.validate_changes(changes)
        if violations:
            raise ValidationError(violations)

        values: dict = {k: changes[k] for k in _TEXT_FIELDS if k in changes}

        quantity = None
        if "quantity" in changes:
            quantity = Quantity(parse_quantity(changes["quantity"]))  # type: ignore[arg-type]
            values["quantity"] = quantity

        new_product = None
        ref = changes.get("product_ref")
        if ref is not None and ref.strip() != order.product_ref:
            new_product = self._product_repo.get_by_ref(ref.strip())
            if new_product is None:
                raise EntityNotFoundError(f"Product not found: '{ref}'")
            values["product_ref"] = new_product.ref
            values["product_name"] = new_product.name  # <-- name snapshot

        if "total_amount" in changes:
            values["total_amount"] = Money.of(
                changes["total_amount"], order.total_amount.currency
            )
        elif new_product is not None:
            qty = quantity or order.quantity
            values["total_amount"] = new_product.price * qty.value
        elif quantity is not None:
            current = self._product_repo.get_by_ref(order.product_ref)
            if current is not None:
                values["total_amount"] = current.price * quantity.value

        updated = self._order_repo.update(order_id, values, now=self._clock())
        if updated is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")

        logger.info("Updated order %s fields: %s", updated.order_code, ", ".join(sorted(values)))
        return order_to_dto(updated)
