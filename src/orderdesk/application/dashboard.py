"""Application service: dashboard queries.

Every figure is recomputed from the order store on each call.  When the
store is unavailable the dashboard still renders: the handler logs the
failure and returns zeroed figures flagged as degraded.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal

from orderdesk.application.dto import OrderDTO, order_to_dto
from orderdesk.domain.exceptions import DependencyUnavailableError, ValidationError
from orderdesk.domain.model.order import Order, utcnow
from orderdesk.domain.model.statistics import (
    ZERO,
    DailyBucket,
    DashboardStats,
    MonthlySummary,
    StatusCount,
)
from orderdesk.domain.repository.order_repository import OrderRepository
from orderdesk.domain.service import aggregation

logger = logging.getLogger(__name__)


class DashboardHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._order_repo = order_repo
        self._clock = clock

    def stats(self) -> DashboardStats:
        orders = self._orders()
        if orders is None:
            return DashboardStats(degraded=True)
        return aggregation.dashboard_stats(orders, self._clock())

    def daily(self, days: int = 7) -> list[DailyBucket]:
        orders = self._orders() or []
        return aggregation.daily_series(orders, self._clock(), days=days)

    def recent(self, limit: int = 5) -> list[OrderDTO]:
        orders = self._orders() or []
        return [order_to_dto(o) for o in aggregation.recent_orders(orders, limit)]

    def distribution(self) -> list[StatusCount]:
        try:
            counts = self._order_repo.count_by_status()
        except DependencyUnavailableError:
            logger.warning("Order store unavailable; returning empty distribution")
            counts = {}
        return aggregation.status_distribution(counts)

    def monthly_summary(self) -> MonthlySummary:
        orders = self._orders() or []
        return aggregation.monthly_summary(orders, self._clock())

    def revenue_between(self, start: date, end: date) -> Decimal:
        """Revenue of orders created between two calendar days, inclusive."""
        if start > end:
            raise ValidationError("Start date must not be after end date")
        try:
            return self._order_repo.revenue_between(start, end)
        except DependencyUnavailableError:
            logger.warning("Order store unavailable; reporting zero revenue")
            return ZERO

    def _orders(self) -> list[Order] | None:
        try:
            return self._order_repo.list()
        except DependencyUnavailableError:
            logger.warning("Order store unavailable; serving zeroed dashboard")
            return None
