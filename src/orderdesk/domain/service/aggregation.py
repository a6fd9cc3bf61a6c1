"""Domain service: order aggregation.

Stateless functions that derive dashboard, analytics and courier figures
from a sequence of orders.  Every function takes the current time as an
argument where calendar buckets are involved, so results are
reproducible in tests.

Empty input always yields zeros, never ``None``.
"""

from __future__ import annotations

import calendar
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal

from orderdesk.domain.model.order import Order
from orderdesk.domain.model.order_status import (
    COURIER_STATUSES,
    OrderStatus,
    PIPELINE,
    pipeline_rank,
)
from orderdesk.domain.model.product import Product
from orderdesk.domain.model.statistics import (
    ZERO,
    AcquisitionBucket,
    CourierStats,
    CustomerTotals,
    DailyBucket,
    DashboardStats,
    MonthlyBucket,
    MonthlySummary,
    ProductPerformance,
    ProductTotals,
    StatusCount,
    TimelineCheckpoint,
)

CENT = Decimal("0.01")
SECONDS_PER_DAY = 24 * 60 * 60


# --- Calendar helpers ---------------------------------------------------------


def order_day(moment: datetime) -> date:
    """Calendar day of *moment* in UTC; naive values are taken as UTC."""
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(timezone.utc).date()


def _shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def average_order_value(total: Decimal, count: int) -> Decimal:
    if count == 0:
        return ZERO
    return (total / count).quantize(CENT, rounding=ROUND_HALF_UP)


def revenue_of(orders: Iterable[Order]) -> Decimal:
    return sum((o.total_amount.amount for o in orders), ZERO)


# --- Dashboard ----------------------------------------------------------------


def dashboard_stats(orders: Sequence[Order], now: datetime) -> DashboardStats:
    today = order_day(now)
    counts = count_by_status(orders)
    days = [order_day(o.created_at) for o in orders]
    return DashboardStats(
        total=len(orders),
        pending=counts[OrderStatus.PLACED],
        received=counts[OrderStatus.RECEIVED],
        issued=counts[OrderStatus.ISSUED],
        courier=sum(counts[s] for s in COURIER_STATUSES),
        today=sum(1 for d in days if d == today),
        monthly=sum(1 for d in days if (d.year, d.month) == (today.year, today.month)),
        total_revenue=revenue_of(orders),
    )


def count_by_status(orders: Iterable[Order]) -> dict[OrderStatus, int]:
    counts = {status: 0 for status in OrderStatus}
    for order in orders:
        counts[order.status] += 1
    return counts


def status_distribution(counts: dict[OrderStatus, int]) -> list[StatusCount]:
    """Per-status counts in pipeline order, cancelled last."""
    return [
        StatusCount(status=s, label=s.label, count=counts.get(s, 0))
        for s in (*PIPELINE, OrderStatus.CANCELLED)
    ]


def daily_series(orders: Iterable[Order], now: datetime, days: int = 7) -> list[DailyBucket]:
    """One bucket per day for the trailing *days* days (today included)."""
    today = order_day(now)
    first = today - timedelta(days=days - 1)
    counts: dict[date, int] = {}
    revenue: dict[date, Decimal] = {}
    for order in orders:
        day = order_day(order.created_at)
        if first <= day <= today:
            counts[day] = counts.get(day, 0) + 1
            revenue[day] = revenue.get(day, ZERO) + order.total_amount.amount

    buckets = []
    for offset in range(days):
        day = first + timedelta(days=offset)
        buckets.append(
            DailyBucket(
                day=day,
                day_name=calendar.day_abbr[day.weekday()],
                orders=counts.get(day, 0),
                revenue=revenue.get(day, ZERO),
            )
        )
    return buckets


def monthly_series(orders: Iterable[Order], now: datetime, months: int = 6) -> list[MonthlyBucket]:
    """One bucket per calendar month for the trailing *months*, newest first."""
    today = order_day(now)
    keys = [_shift_month(today.year, today.month, -i) for i in range(months)]
    counts = {key: 0 for key in keys}
    revenue = {key: ZERO for key in keys}
    for order in orders:
        day = order_day(order.created_at)
        key = (day.year, day.month)
        if key in counts:
            counts[key] += 1
            revenue[key] += order.total_amount.amount

    return [
        MonthlyBucket(
            year=year,
            month=month,
            name=calendar.month_abbr[month],
            orders=counts[(year, month)],
            revenue=revenue[(year, month)],
            avg_order_value=average_order_value(revenue[(year, month)], counts[(year, month)]),
        )
        for year, month in keys
    ]


def monthly_summary(orders: Iterable[Order], now: datetime) -> MonthlySummary:
    today = order_day(now)
    current = [
        o for o in orders
        if (order_day(o.created_at).year, order_day(o.created_at).month) == (today.year, today.month)
    ]
    total = revenue_of(current)
    return MonthlySummary(
        month_name=calendar.month_name[today.month],
        year=today.year,
        orders=len(current),
        revenue=total,
        avg_order_value=average_order_value(total, len(current)),
    )


def revenue_between(orders: Iterable[Order], start: date, end: date) -> Decimal:
    """Summed revenue of orders created between *start* and *end* inclusive."""
    return revenue_of(o for o in orders if start <= order_day(o.created_at) <= end)


def recent_orders(orders: Iterable[Order], limit: int = 5) -> list[Order]:
    return sorted(orders, key=lambda o: o.created_at, reverse=True)[:limit]


# --- Products -----------------------------------------------------------------


def product_totals(orders: Iterable[Order]) -> list[ProductTotals]:
    """Group orders by product reference.

    The name shown is the snapshot taken by the product's earliest order.
    """
    groups: dict[str, dict] = {}
    for order in sorted(orders, key=_creation_key):
        group = groups.setdefault(
            order.product_ref,
            {
                "product_name": order.product_name,
                "quantity": 0,
                "revenue": ZERO,
                "count": 0,
                "first_id": order.id,
            },
        )
        group["quantity"] += order.quantity.value
        group["revenue"] += order.total_amount.amount
        group["count"] += 1

    return [
        ProductTotals(
            product_ref=ref,
            product_name=g["product_name"],
            total_quantity=g["quantity"],
            total_revenue=g["revenue"],
            order_count=g["count"],
            first_order_id=g["first_id"],
        )
        for ref, g in groups.items()
    ]


def rank_products(totals: Iterable[ProductTotals], limit: int | None = 5) -> list[ProductTotals]:
    """Highest revenue first; ties go to the product ordered earliest."""
    ranked = sorted(
        totals,
        key=lambda t: (
            -t.total_revenue,
            t.first_order_id is None,
            t.first_order_id or 0,
        ),
    )
    return ranked if limit is None else ranked[:limit]


def top_products(orders: Iterable[Order], limit: int | None = 5) -> list[ProductTotals]:
    return rank_products(product_totals(orders), limit)


def product_performance(
    products: Iterable[Product], orders: Iterable[Order]
) -> list[ProductPerformance]:
    """One row per catalog product, including products nobody ordered.

    Orders are matched on product reference.  Rows are sorted by revenue,
    highest first, then by reference.
    """
    totals = {t.product_ref: t for t in product_totals(orders)}
    rows = []
    for product in products:
        t = totals.get(product.ref)
        rows.append(
            ProductPerformance(
                product_ref=product.ref,
                name=product.name,
                category=product.category,
                price=product.price.amount,
                order_count=t.order_count if t else 0,
                total_quantity=t.total_quantity if t else 0,
                total_revenue=t.total_revenue if t else ZERO,
            )
        )
    return sorted(rows, key=lambda r: (-r.total_revenue, r.product_ref))


# --- Customers ----------------------------------------------------------------


def customer_totals(orders: Iterable[Order]) -> list[CustomerTotals]:
    """Group orders by customer identity (name + mobile number)."""
    groups: dict[tuple[str, str], dict] = {}
    for order in orders:
        group = groups.setdefault(
            order.customer_key, {"count": 0, "spent": ZERO, "last": None}
        )
        group["count"] += 1
        group["spent"] += order.total_amount.amount
        if group["last"] is None or order.created_at > group["last"]:
            group["last"] = order.created_at

    return [
        CustomerTotals(
            customer_name=name,
            mobile_number=mobile,
            order_count=g["count"],
            total_spent=g["spent"],
            last_order_at=g["last"],
        )
        for (name, mobile), g in groups.items()
    ]


def rank_customers(totals: Iterable[CustomerTotals], limit: int | None = 10) -> list[CustomerTotals]:
    """Biggest spenders first; ties ordered by name then mobile number."""
    ranked = sorted(
        totals, key=lambda c: (-c.total_spent, c.customer_name, c.mobile_number)
    )
    return ranked if limit is None else ranked[:limit]


def customer_acquisition(orders: Iterable[Order], now: datetime, days: int = 30) -> list[AcquisitionBucket]:
    """Customer counts for each of the trailing *days*.

    ``customers`` counts distinct identities (name + mobile) that ordered
    on the day; ``new_customers`` counts those whose first ever order falls
    on it.
    """
    first_seen: dict[tuple[str, str], date] = {}
    seen_on: dict[date, set[tuple[str, str]]] = {}
    for order in orders:
        day = order_day(order.created_at)
        key = order.customer_key
        seen_on.setdefault(day, set()).add(key)
        if key not in first_seen or day < first_seen[key]:
            first_seen[key] = day

    today = order_day(now)
    start = today - timedelta(days=days - 1)
    new_per_day: dict[date, int] = {}
    for day in first_seen.values():
        new_per_day[day] = new_per_day.get(day, 0) + 1

    return [
        AcquisitionBucket(
            day=d,
            customers=len(seen_on.get(d, ())),
            new_customers=new_per_day.get(d, 0),
        )
        for d in (start + timedelta(days=i) for i in range(days))
    ]


# --- Courier ------------------------------------------------------------------


def average_delivery_days(orders: Iterable[Order]) -> float:
    """Mean ``updated_at - created_at`` of delivered orders, in days."""
    durations = [
        (o.updated_at - o.created_at).total_seconds() / SECONDS_PER_DAY
        for o in orders
        if o.status == OrderStatus.DELIVERED
    ]
    if not durations:
        return 0.0
    return sum(durations) / len(durations)


def courier_stats(orders: Sequence[Order]) -> CourierStats:
    counts = count_by_status(orders)
    sent = counts[OrderStatus.SENT_TO_COURIER]
    in_transit = counts[OrderStatus.IN_TRANSIT]
    delivered = counts[OrderStatus.DELIVERED]
    return CourierStats(
        total=sent + in_transit + delivered,
        sent_to_courier=sent,
        in_transit=in_transit,
        delivered=delivered,
        pending_delivery=sent + in_transit,
        avg_delivery_days=average_delivery_days(orders),
    )


# --- Timelines ----------------------------------------------------------------

# (key, label, first pipeline status that completes the checkpoint)
_DELIVERY_CHECKPOINTS = (
    ("placed", "Order Placed", OrderStatus.PLACED),
    ("processed", "Order Processed", OrderStatus.RECEIVED),
    ("sent-to-courier", "Sent to Courier", OrderStatus.SENT_TO_COURIER),
    ("in-transit", "In Transit", OrderStatus.IN_TRANSIT),
    ("delivered", "Delivered", OrderStatus.DELIVERED),
)

_ORDER_CHECKPOINTS = (
    ("placed", "Order Placed", OrderStatus.PLACED),
    ("received", "Order Received", OrderStatus.RECEIVED),
    ("issued", "Order Issued", OrderStatus.ISSUED),
    ("sent-to-courier", "Sent to Courier", OrderStatus.SENT_TO_COURIER),
    ("in-transit", "In Transit", OrderStatus.IN_TRANSIT),
    ("delivered", "Delivered", OrderStatus.DELIVERED),
)


def _timeline(order: Order, checkpoints) -> list[TimelineCheckpoint]:
    # Only created_at and updated_at are recorded, so every completed step
    # after "placed" carries updated_at.
    current = pipeline_rank(order.status)
    result = []
    for key, label, reached_at in checkpoints:
        if reached_at == OrderStatus.PLACED:
            result.append(TimelineCheckpoint(key, label, True, order.created_at))
            continue
        done = current >= pipeline_rank(reached_at)
        result.append(
            TimelineCheckpoint(key, label, done, order.updated_at if done else None)
        )
    return result


def delivery_timeline(order: Order) -> list[TimelineCheckpoint]:
    """Courier-facing checkpoints: placed, processed, sent, in transit, delivered."""
    return _timeline(order, _DELIVERY_CHECKPOINTS)


def order_timeline(order: Order) -> list[TimelineCheckpoint]:
    """Staff-facing checkpoints, one per pipeline status."""
    return _timeline(order, _ORDER_CHECKPOINTS)


def _creation_key(order: Order) -> tuple:
    return (order.created_at, order.id is None, order.id or 0)
