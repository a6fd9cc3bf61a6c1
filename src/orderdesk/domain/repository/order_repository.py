"""Abstract repository for Order aggregate.

Concrete stores implement the abstract methods.  Field and status updates
plus the aggregate queries have default implementations built on top of
them; stores with a query engine of their own (SQL) override the
aggregate queries.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from orderdesk.domain.exceptions import ValidationError
from orderdesk.domain.model.order import Order
from orderdesk.domain.model.order_status import OrderStatus
from orderdesk.domain.model.statistics import CustomerTotals, ProductTotals
from orderdesk.domain.service import aggregation

MAX_LIST_LIMIT = 1000


@dataclass(frozen=True)
class OrderFilter:
    """Options recognised by ``OrderRepository.list``.

    ``statuses`` are matched exactly; ``search`` is a case-insensitive
    substring of the customer name, mobile number or order code;
    ``date_range`` is inclusive on both ends; ``limit`` is capped at
    ``MAX_LIST_LIMIT``.
    """

    statuses: frozenset[OrderStatus] | None = None
    search: str | None = None
    date_range: tuple[date, date] | None = None
    limit: int | None = None

    @staticmethod
    def build(
        status: str | OrderStatus | Iterable[str | OrderStatus] | None = None,
        search: str | None = None,
        date_range: tuple[date, date] | None = None,
        limit: int | None = None,
    ) -> OrderFilter:
        """Normalise raw filter options.

        ``status="all"`` means no status filter.  Raises InvalidStatusError
        for unknown statuses and ValidationError for a non-positive limit or
        a reversed date range.
        """
        statuses = None
        if status is not None and status != "all":
            if isinstance(status, (str, OrderStatus)):
                status = [status]
            statuses = frozenset(OrderStatus.parse(s) for s in status)

        if limit is not None:
            if limit < 1:
                raise ValidationError("Limit must be a positive integer")
            limit = min(limit, MAX_LIST_LIMIT)

        if date_range is not None and date_range[0] > date_range[1]:
            raise ValidationError("Date range start must not be after its end")

        search = search.strip() if search else None
        return OrderFilter(
            statuses=statuses, search=search or None, date_range=date_range, limit=limit
        )

    def matches(self, order: Order) -> bool:
        if self.statuses is not None and order.status not in self.statuses:
            return False
        if self.search:
            needle = self.search.lower()
            haystack = (
                order.customer_name.lower(),
                order.mobile_number.lower(),
                order.order_code.value.lower(),
            )
            if not any(needle in field for field in haystack):
                return False
        if self.date_range is not None:
            start, end = self.date_range
            if not start <= aggregation.order_day(order.created_at) <= end:
                return False
        return True

    def apply(self, orders: Iterable[Order]) -> list[Order]:
        """Filter, sort newest first and truncate *orders*."""
        selected = sorted(
            (o for o in orders if self.matches(o)),
            key=lambda o: (o.created_at, o.id or 0),
            reverse=True,
        )
        if self.limit is not None:
            selected = selected[: self.limit]
        return selected


class OrderRepository(ABC):

    @abstractmethod
    def create(self, order: Order) -> Order:
        """Persist a new order, assign its ``id`` and return it."""

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_by_code(self, order_code: str) -> Order | None:
        """Return an order by its order code, or None if not found."""

    @abstractmethod
    def list(self, order_filter: OrderFilter | None = None) -> list[Order]:
        """Return matching orders, newest first."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist changes to an existing order."""

    @abstractmethod
    def delete(self, order_id: int) -> bool:
        """Remove an order.  Returns False if it did not exist."""

    # --- Updates --------------------------------------------------------------

    def update(self, order_id: int, changes: dict, now: datetime | None = None) -> Order | None:
        """Apply field changes to an order and persist it."""
        order = self.get_by_id(order_id)
        if order is None:
            return None
        order.apply_changes(changes, now=now)
        self.save(order)
        return order

    def update_status(
        self, order_id: int, status: OrderStatus | str, now: datetime | None = None
    ) -> Order | None:
        """Set an order's status without a transition guard."""
        order = self.get_by_id(order_id)
        if order is None:
            return None
        order.set_status(status, now=now)
        self.save(order)
        return order

    # --- Aggregate queries ----------------------------------------------------

    def count_by_status(self) -> dict[OrderStatus, int]:
        return aggregation.count_by_status(self.list())

    def revenue_between(self, start: date, end: date) -> Decimal:
        return aggregation.revenue_between(self.list(), start, end)

    def group_by_product(self) -> list[ProductTotals]:
        return aggregation.product_totals(self.list())

    def group_by_customer(self) -> list[CustomerTotals]:
        return aggregation.customer_totals(self.list())
