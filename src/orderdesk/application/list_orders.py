"""Application service: List Orders use case (query)."""

from __future__ import annotations

from datetime import date

from orderdesk.application.dto import OrderDTO, order_to_dto
from orderdesk.domain.repository.order_repository import OrderFilter, OrderRepository


class ListOrdersHandler:

    def __init__(self, order_repo: OrderRepository) -> None:
        self._order_repo = order_repo

    def handle(
        self,
        status: str | None = None,
        search: str | None = None,
        date_range: tuple[date, date] | None = None,
        limit: int | None = None,
    ) -> list[OrderDTO]:
        """Return matching orders, newest first (at most 1000)."""
        order_filter = OrderFilter.build(
            status=status, search=search, date_range=date_range, limit=limit
        )
        return [order_to_dto(o) for o in self._order_repo.list(order_filter)]
