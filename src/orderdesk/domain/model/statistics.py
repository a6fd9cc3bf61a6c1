"""Read-only results derived from the order collection.

None of these are persisted; they are recomputed on every request.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from orderdesk.domain.model.order_status import OrderStatus

ZERO = Decimal("0")


@dataclass(frozen=True)
class DashboardStats:
    total: int = 0
    pending: int = 0
    received: int = 0
    issued: int = 0
    courier: int = 0
    today: int = 0
    monthly: int = 0
    total_revenue: Decimal = ZERO
    degraded: bool = False


@dataclass(frozen=True)
class DailyBucket:
    day: date
    day_name: str  # "Mon", "Tue", ...
    orders: int = 0
    revenue: Decimal = ZERO


@dataclass(frozen=True)
class MonthlyBucket:
    year: int
    month: int
    name: str  # "Jan", "Feb", ...
    orders: int = 0
    revenue: Decimal = ZERO
    avg_order_value: Decimal = ZERO


@dataclass(frozen=True)
class ProductTotals:
    product_ref: str
    product_name: str
    total_quantity: int = 0
    total_revenue: Decimal = ZERO
    order_count: int = 0
    first_order_id: int | None = None


@dataclass(frozen=True)
class ProductPerformance:
    product_ref: str
    name: str
    category: str
    price: Decimal
    order_count: int = 0
    total_quantity: int = 0
    total_revenue: Decimal = ZERO


@dataclass(frozen=True)
class CustomerTotals:
    customer_name: str
    mobile_number: str
    order_count: int = 0
    total_spent: Decimal = ZERO
    last_order_at: datetime | None = None


@dataclass(frozen=True)
class AcquisitionBucket:
    day: date
    customers: int = 0  # distinct customers who ordered that day
    new_customers: int = 0  # of those, first order ever


@dataclass(frozen=True)
class CustomerAnalytics:
    top_customers: list[CustomerTotals] = field(default_factory=list)
    acquisition: list[AcquisitionBucket] = field(default_factory=list)
    total_customers: int = 0
    degraded: bool = False


@dataclass(frozen=True)
class StatusCount:
    status: OrderStatus
    label: str
    count: int = 0


@dataclass(frozen=True)
class MonthlySummary:
    month_name: str
    year: int
    orders: int = 0
    revenue: Decimal = ZERO
    avg_order_value: Decimal = ZERO


@dataclass(frozen=True)
class CourierStats:
    total: int = 0
    sent_to_courier: int = 0
    in_transit: int = 0
    delivered: int = 0
    pending_delivery: int = 0
    avg_delivery_days: float = 0.0
    degraded: bool = False


@dataclass(frozen=True)
class TimelineCheckpoint:
    key: str
    label: str
    completed: bool
    at: datetime | None = None


@dataclass(frozen=True)
class AnalyticsOverview:
    total_revenue: Decimal = ZERO
    total_orders: int = 0
    total_products: int = 0
    avg_order_value: Decimal = ZERO
    status_counts: list[StatusCount] = field(default_factory=list)
    weekly: list[DailyBucket] = field(default_factory=list)
    monthly: list[MonthlyBucket] = field(default_factory=list)
    degraded: bool = False
