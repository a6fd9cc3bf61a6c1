"""Application service: analytics queries."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime

from orderdesk.domain.exceptions import DependencyUnavailableError, ValidationError
from orderdesk.domain.model.order import utcnow
from orderdesk.domain.model.statistics import (
    AnalyticsOverview,
    CustomerAnalytics,
    DailyBucket,
    MonthlyBucket,
    ProductPerformance,
    ProductTotals,
)
from orderdesk.domain.repository.order_repository import OrderFilter, OrderRepository
from orderdesk.domain.repository.product_repository import ProductRepository
from orderdesk.domain.service import aggregation

logger = logging.getLogger(__name__)

REVENUE_PERIODS = ("daily", "monthly")


class AnalyticsHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._clock = clock

    def overview(self) -> AnalyticsOverview:
        now = self._clock()
        try:
            orders = self._order_repo.list()
            products = self._product_repo.list_all()
        except DependencyUnavailableError:
            logger.warning("Store unavailable; serving empty analytics overview")
            return AnalyticsOverview(
                status_counts=aggregation.status_distribution({}),
                weekly=aggregation.daily_series([], now),
                monthly=aggregation.monthly_series([], now),
                degraded=True,
            )

        revenue = aggregation.revenue_of(orders)
        return AnalyticsOverview(
            total_revenue=revenue,
            total_orders=len(orders),
            total_products=len(products),
            avg_order_value=aggregation.average_order_value(revenue, len(orders)),
            status_counts=aggregation.status_distribution(aggregation.count_by_status(orders)),
            weekly=aggregation.daily_series(orders, now),
            monthly=aggregation.monthly_series(orders, now),
        )

    def monthly(self, months: int = 6) -> list[MonthlyBucket]:
        return aggregation.monthly_series(self._orders(), self._clock(), months=months)

    def top_products(self, limit: int = 5) -> list[ProductTotals]:
        """Products ranked by revenue; equal revenue keeps the earliest-ordered first."""
        try:
            totals = self._order_repo.group_by_product()
        except DependencyUnavailableError:
            logger.warning("Order store unavailable; no product ranking")
            return []
        return aggregation.rank_products(totals, limit)

    def product_performance(
        self, start: date | None = None, end: date | None = None
    ) -> list[ProductPerformance]:
        """Every catalog product with its order figures, highest revenue first.

        With *start* and *end* only orders placed on those days (inclusive)
        count; products without orders still appear with zeroes.
        """
        if (start is None) != (end is None):
            raise ValidationError("Give both a start and an end date, or neither")
        criteria = OrderFilter.build(date_range=(start, end) if start else None)

        try:
            products = self._product_repo.list_all()
            orders = self._order_repo.list(criteria)
        except DependencyUnavailableError:
            logger.warning("Store unavailable; no product performance report")
            return []
        return aggregation.product_performance(products, orders)

    def customers(self, limit: int = 10, days: int = 30) -> CustomerAnalytics:
        now = self._clock()
        try:
            totals = self._order_repo.group_by_customer()
            orders = self._order_repo.list()
        except DependencyUnavailableError:
            logger.warning("Order store unavailable; serving empty customer analytics")
            return CustomerAnalytics(
                acquisition=aggregation.customer_acquisition([], now, days=days),
                degraded=True,
            )
        return CustomerAnalytics(
            top_customers=aggregation.rank_customers(totals, limit),
            acquisition=aggregation.customer_acquisition(orders, now, days=days),
            total_customers=len(totals),
        )

    def revenue(self, period: str = "monthly") -> list[DailyBucket] | list[MonthlyBucket]:
        """Revenue per day for the last 30 days, or per month for the last 6."""
        if period not in REVENUE_PERIODS:
            raise ValidationError(
                f"Invalid period '{period}'. Expected one of: {', '.join(REVENUE_PERIODS)}"
            )
        orders = self._orders()
        if period == "daily":
            return aggregation.daily_series(orders, self._clock(), days=30)
        return aggregation.monthly_series(orders, self._clock())

    def _orders(self):
        try:
            return self._order_repo.list()
        except DependencyUnavailableError:
            logger.warning("Order store unavailable; serving empty series")
            return []
