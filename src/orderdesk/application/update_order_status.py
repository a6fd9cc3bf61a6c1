"""Application service: Update Order Status use cases.

The staff-facing status update only checks that the new status exists;
it does not consult the courier transition table.  Courier updates go
through ``advance_courier_status`` instead.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

from orderdesk.application.dto import OrderDTO, order_to_dto
from orderdesk.domain.exceptions import EntityNotFoundError
from orderdesk.domain.model.order import utcnow
from orderdesk.domain.model.order_status import OrderStatus
from orderdesk.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class UpdateOrderStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._order_repo = order_repo
        self._clock = clock

    def handle(self, order_id: int, status: OrderStatus | str) -> OrderDTO:
        """Set the status of an order.

        Re-applying the current status succeeds and only refreshes
        ``updated_at``.
        """
        target = OrderStatus.parse(status)
        order = self._order_repo.update_status(order_id, target, now=self._clock())
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        logger.info("Order %s status set to %s", order.order_code, target.value)
        return order_to_dto(order)


class SendToCourierHandler:
    """Hand an order over to the courier, whatever its current status."""

    def __init__(
        self,
        order_repo: OrderRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._status_handler = UpdateOrderStatusHandler(order_repo, clock)

    def handle(self, order_id: int) -> OrderDTO:
        return self._status_handler.handle(order_id, OrderStatus.SENT_TO_COURIER)
