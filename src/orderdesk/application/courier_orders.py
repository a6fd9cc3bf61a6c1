"""Application service: courier queries.

Read-only views over orders that have been handed to the courier.
"""

from __future__ import annotations

import logging

from orderdesk.application.advance_courier_status import parse_courier_status
from orderdesk.application.dto import OrderDTO, StatusOption, order_to_dto
from orderdesk.application.show_order import load_order
from orderdesk.domain.exceptions import DependencyUnavailableError
from orderdesk.domain.model.order_status import COURIER_STATUSES, next_courier_statuses
from orderdesk.domain.model.statistics import CourierStats, TimelineCheckpoint
from orderdesk.domain.repository.order_repository import OrderFilter, OrderRepository
from orderdesk.domain.service import aggregation

logger = logging.getLogger(__name__)


class CourierOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def list(self, status: str | None = None, search: str | None = None) -> list[OrderDTO]:
        """Orders with a courier status, optionally narrowed to one status."""
        if status is None or status == "all":
            statuses = COURIER_STATUSES
        else:
            statuses = {parse_courier_status(status)}
        order_filter = OrderFilter.build(status=statuses, search=search)
        return [order_to_dto(o) for o in self._order_repo.list(order_filter)]

    def next_statuses(self, order_id: int) -> tuple[str, list[StatusOption]]:
        """Current status of an order and the courier statuses it may move to."""
        order = load_order(self._order_repo, order_id)
        options = [
            StatusOption(value=s.value, label=s.label)
            for s in next_courier_statuses(order.status)
        ]
        return order.status.value, options

    def timeline(self, order_id: int) -> list[TimelineCheckpoint]:
        return aggregation.delivery_timeline(load_order(self._order_repo, order_id))

    def stats(self) -> CourierStats:
        """Courier counters; zeros flagged as degraded if the store is down."""
        try:
            orders = self._order_repo.list(OrderFilter.build(status=COURIER_STATUSES))
        except DependencyUnavailableError:
            logger.warning("Order store unavailable; returning empty courier stats")
            return CourierStats(degraded=True)
        return aggregation.courier_stats(orders)
