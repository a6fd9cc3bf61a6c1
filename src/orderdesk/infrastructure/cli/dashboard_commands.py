"""CLI commands for the dashboard and analytics views."""

from __future__ import annotations

from datetime import datetime

import click

from orderdesk.application.analytics import REVENUE_PERIODS, AnalyticsHandler
from orderdesk.application.dashboard import DashboardHandler
from orderdesk.domain.exceptions import DomainException
from orderdesk.domain.model.statistics import DailyBucket
from orderdesk.infrastructure.bootstrap import build_repositories
from orderdesk.infrastructure.cli.order_commands import DATE, display_order_table


def _warn_degraded(degraded: bool) -> None:
    if degraded:
        click.echo("Warning: order store unavailable, figures are empty.", err=True)


def _display_series(buckets) -> None:
    for b in buckets:
        if isinstance(b, DailyBucket):
            label = f"{b.day.isoformat()} {b.day_name}"
        else:
            label = f"{b.year}-{b.month:02d} {b.name}"
        click.echo(f"  {label:<16} {b.orders:>6} orders  {b.revenue:>14,.2f}")


# --- dashboard --------------------------------------------------------------


@click.command("stats")
def dashboard_stats() -> None:
    """Order counters and total revenue."""
    stats = DashboardHandler(build_repositories().orders).stats()
    _warn_degraded(stats.degraded)
    click.echo(f"Total orders:  {stats.total}")
    click.echo(f"Pending:       {stats.pending}")
    click.echo(f"Received:      {stats.received}")
    click.echo(f"Issued:        {stats.issued}")
    click.echo(f"With courier:  {stats.courier}")
    click.echo(f"Today:         {stats.today}")
    click.echo(f"This month:    {stats.monthly}")
    click.echo(f"Total revenue: {stats.total_revenue:,.2f}")


@click.command("daily")
def dashboard_daily() -> None:
    """Orders and revenue for each of the last 7 days."""
    _display_series(DashboardHandler(build_repositories().orders).daily())


@click.command("recent")
@click.option("--limit", type=click.IntRange(1, 1000), default=5, show_default=True)
def dashboard_recent(limit: int) -> None:
    """Most recently placed orders."""
    display_order_table(DashboardHandler(build_repositories().orders).recent(limit))


@click.command("distribution")
def dashboard_distribution() -> None:
    """Number of orders in each status."""
    for item in DashboardHandler(build_repositories().orders).distribution():
        click.echo(f"  {item.label:<16} {item.count:>6}")


@click.command("monthly")
def dashboard_monthly() -> None:
    """Summary of the current month."""
    summary = DashboardHandler(build_repositories().orders).monthly_summary()
    click.echo(f"{summary.month_name} {summary.year}")
    click.echo(f"Orders:          {summary.orders}")
    click.echo(f"Revenue:         {summary.revenue:,.2f}")
    click.echo(f"Avg order value: {summary.avg_order_value:,.2f}")


@click.command("revenue")
@click.option("--from", "start", type=DATE, required=True, help="First day (YYYY-MM-DD).")
@click.option("--to", "end", type=DATE, required=True, help="Last day (YYYY-MM-DD).")
def dashboard_revenue(start: datetime, end: datetime) -> None:
    """Revenue of orders placed between two days, inclusive."""
    try:
        total = DashboardHandler(build_repositories().orders).revenue_between(
            start.date(), end.date()
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Revenue {start:%Y-%m-%d} .. {end:%Y-%m-%d}: {total:,.2f}")


# --- analytics --------------------------------------------------------------


def _analytics() -> AnalyticsHandler:
    repos = build_repositories()
    return AnalyticsHandler(order_repo=repos.orders, product_repo=repos.products)


@click.command("overview")
def analytics_overview() -> None:
    """Revenue, order and product totals with weekly and monthly series."""
    overview = _analytics().overview()
    _warn_degraded(overview.degraded)
    click.echo(f"Total revenue:   {overview.total_revenue:,.2f}")
    click.echo(f"Total orders:    {overview.total_orders}")
    click.echo(f"Products:        {overview.total_products}")
    click.echo(f"Avg order value: {overview.avg_order_value:,.2f}")
    click.echo("Last 7 days:")
    _display_series(overview.weekly)
    click.echo("Last 6 months:")
    _display_series(overview.monthly)


@click.command("monthly")
def analytics_monthly() -> None:
    """Orders, revenue and average order value for the last 6 months."""
    for b in _analytics().monthly():
        click.echo(
            f"  {b.year}-{b.month:02d} {b.name}  {b.orders:>6} orders  "
            f"{b.revenue:>14,.2f}  avg {b.avg_order_value:>12,.2f}"
        )


@click.command("top-products")
@click.option("--limit", type=click.IntRange(1, 1000), default=5, show_default=True)
def analytics_top_products(limit: int) -> None:
    """Products ranked by revenue."""
    ranking = _analytics().top_products(limit)
    if not ranking:
        click.echo("No orders yet.")
    for rank, p in enumerate(ranking, start=1):
        click.echo(
            f"{rank:>3}. {p.product_name} [{p.product_ref}]  qty {p.total_quantity}  "
            f"orders {p.order_count}  revenue {p.total_revenue:,.2f}"
        )


@click.command("products")
@click.option("--from", "start", type=DATE, default=None, help="First day (YYYY-MM-DD).")
@click.option("--to", "end", type=DATE, default=None, help="Last day (YYYY-MM-DD).")
def analytics_products(start: datetime | None, end: datetime | None) -> None:
    """Every catalog product with its orders, quantity and revenue."""
    try:
        rows = _analytics().product_performance(
            start.date() if start else None, end.date() if end else None
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not rows:
        click.echo("No products.")
    for row in rows:
        click.echo(
            f"  {row.product_ref:<10} {row.name:<24} {row.category or '-':<12} "
            f"{row.price:>12,.2f}  orders {row.order_count:>4}  qty {row.total_quantity:>5}  "
            f"revenue {row.total_revenue:>14,.2f}"
        )


@click.command("customers")
@click.option("--limit", type=click.IntRange(1, 1000), default=10, show_default=True)
def analytics_customers(limit: int) -> None:
    """Top customers by spend and new customers per day."""
    result = _analytics().customers(limit)
    _warn_degraded(result.degraded)
    click.echo(f"Customers: {result.total_customers}")
    for c in result.top_customers:
        click.echo(
            f"  {c.customer_name:<20} {c.mobile_number:<15} {c.order_count:>4} orders  "
            f"{c.total_spent:>14,.2f}"
        )
    click.echo("Customers per day (last 30 days, new in brackets):")
    for bucket in result.acquisition:
        if bucket.customers:
            click.echo(
                f"  {bucket.day.isoformat()}  {bucket.customers:>4}  ({bucket.new_customers})"
            )


@click.command("revenue")
@click.option("--period", type=click.Choice(REVENUE_PERIODS), default="monthly", show_default=True)
def analytics_revenue(period: str) -> None:
    """Revenue per day (30 days) or per month (6 months)."""
    try:
        series = _analytics().revenue(period)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    _display_series(series)
