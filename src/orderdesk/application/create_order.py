"""Application service: Create Order use case.

Orchestrates the flow between repositories and the domain model.
This is the only place that coordinates multiple aggregates (Product
lookup + Order creation).
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from orderdesk.application.dto import OrderDTO, OrderRequest, order_to_dto
from orderdesk.domain.exceptions import (
    DuplicateOrderCodeError,
    EntityNotFoundError,
    ValidationError,
)
from orderdesk.domain.model.order import Order, utcnow
from orderdesk.domain.model.value_objects import Money, Quantity
from orderdesk.domain.repository.order_repository import OrderRepository
from orderdesk.domain.repository.product_repository import ProductRepository
from orderdesk.domain.service.order_code_generator import OrderCodeGenerator
from orderdesk.domain.service.order_validator import OrderValidator, parse_quantity

logger = logging.getLogger(__name__)

# Times a fresh code is drawn when the store reports the code as taken.
CODE_ATTEMPTS = 3


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        code_generator: OrderCodeGenerator | None = None,
        clock: Callable[[], datetime] = utcnow,
        max_quantity: int | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._validator = OrderValidator(product_repo)
        self._code_generator = code_generator or OrderCodeGenerator(order_repo)
        self._clock = clock
        self._max_quantity = max_quantity

    def handle(self, request: OrderRequest) -> OrderDTO:
        """Create a new order in the ``placed`` status.

        Steps:
        1. Run every field rule; report all violations together.
        2. Snapshot the product name and price.
        3. Derive the total unless an explicit amount was supplied.
        4. Assign an order code and persist; if another writer took the
           code in the meantime, draw a new one (up to CODE_ATTEMPTS).
        """
        violations = self._validator.validate(request, max_quantity=self._max_quantity)
        if violations:
            raise ValidationError(violations)

        product = self._product_repo.get_by_ref(request.product_ref.strip())
        if product is None:
            raise EntityNotFoundError(f"Product not found: '{request.product_ref}'")

        total = None
        if request.total_amount is not None:
            total = Money.of(request.total_amount, product.price.currency)

        now = self._clock()
        for attempt in range(1, CODE_ATTEMPTS + 1):
            order = self._build(request, product, total, now)
            try:
                order = self._order_repo.create(order)
            except DuplicateOrderCodeError as exc:
                if attempt == CODE_ATTEMPTS:
                    raise
                logger.warning("Order code %s taken, drawing another", exc.order_code)
            else:
                break
        logger.info("Created order %s (#%s) for %s", order.order_code, order.id, product.ref)

        return order_to_dto(order)

    def _build(self, request: OrderRequest, product, total, now: datetime) -> Order:
        return Order.create(
            order_code=self._code_generator.next_code(now.date()),
            customer_name=request.customer_name,
            address=request.address,
            mobile_number=request.mobile_number,
            product_ref=product.ref,
            product_name=product.name,  # <-- name snapshot
            quantity=Quantity(parse_quantity(request.quantity)),  # type: ignore[arg-type]
            unit_price=product.price,
            total_amount=total,
            notes=request.notes,
            now=now,
        )
