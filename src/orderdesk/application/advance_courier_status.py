"""Application service: courier status updates.

Unlike the staff status update, these follow the courier transition
table: sent-to-courier -> in-transit -> delivered, with a direct
sent-to-courier -> delivered shortcut.  Delivered is final.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from orderdesk.application.dto import (
    BulkAdvanceReport,
    BulkFailure,
    OrderDTO,
    order_to_dto,
)
from orderdesk.application.show_order import load_order
from orderdesk.domain.exceptions import (
    DomainException,
    InvalidStatusError,
    InvalidTransitionError,
    ValidationError,
)
from orderdesk.domain.model.order import Order, utcnow
from orderdesk.domain.model.order_status import OrderStatus
from orderdesk.domain.repository.order_repository import OrderRepository

logger = logging.getLogger(__name__)


def parse_courier_status(status: OrderStatus | str) -> OrderStatus:
    target = OrderStatus.parse(status)
    if not target.is_courier:
        raise InvalidStatusError(f"Invalid courier status '{target.value}'")
    return target


class AdvanceCourierStatusHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._order_repo = order_repo
        self._clock = clock

    def handle(self, order_id: int, status: OrderStatus | str) -> OrderDTO:
        target = OrderStatus.parse(status)
        return order_to_dto(self._advance(order_id, target))

    def handle_bulk(self, order_ids: Iterable[int], status: OrderStatus | str) -> BulkAdvanceReport:
        """Advance every order independently.

        One order failing (missing, wrong status, store error) never stops
        the others; the report lists the outcome per order.
        """
        ids = list(order_ids)
        if not ids:
            raise ValidationError("Order IDs are required")
        target = parse_courier_status(status)

        report = BulkAdvanceReport(status=target.value)
        for order_id in ids:
            try:
                self._advance(order_id, target)
            except DomainException as exc:
                report.failed.append(BulkFailure(order_id=order_id, error=str(exc)))
            else:
                report.successful.append(order_id)

        logger.info("Bulk courier update to %s: %s", target.value, report.message)
        return report

    def _advance(self, order_id: int, target: OrderStatus) -> Order:
        order = load_order(self._order_repo, order_id)
        try:
            order.advance_courier_status(target, now=self._clock())
        except InvalidTransitionError:
            logger.warning(
                "Rejected courier transition for %s: %s -> %s",
                order.order_code, order.status.value, target.value,
            )
            raise
        self._order_repo.save(order)
        logger.info("Order %s moved to %s", order.order_code, target.value)
        return order
