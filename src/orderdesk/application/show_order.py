"""Application service: Show Order use cases (queries)."""

from __future__ import annotations

from orderdesk.application.dto import OrderDTO, order_to_dto
from orderdesk.domain.exceptions import EntityNotFoundError
from orderdesk.domain.model.order import Order
from orderdesk.domain.model.statistics import TimelineCheckpoint
from orderdesk.domain.repository.order_repository import OrderRepository
from orderdesk.domain.service.aggregation import order_timeline


def load_order(order_repo: OrderRepository, order_id: int) -> Order:
    order = order_repo.get_by_id(order_id)
    if order is None:
        raise EntityNotFoundError(f"Order #{order_id} not found")
    return order


class ShowOrderHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int) -> OrderDTO:
        return order_to_dto(load_order(self._order_repo, order_id))

    def handle_code(self, order_code: str) -> OrderDTO:
        order = self._order_repo.get_by_code(order_code.strip().upper())
        if order is None:
            raise EntityNotFoundError(f"Order {order_code} not found")
        return order_to_dto(order)


class OrderTimelineHandler:
    """Six-step staff timeline (placed, received, issued, sent, in transit, delivered)."""

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(self, order_id: int) -> list[TimelineCheckpoint]:
        return order_timeline(load_order(self._order_repo, order_id))
