import click

from orderdesk.infrastructure.cli.courier_commands import (
    courier_advance,
    courier_bulk,
    courier_list,
    courier_next,
    courier_stats,
    courier_timeline,
)
from orderdesk.infrastructure.cli.dashboard_commands import (
    analytics_customers,
    analytics_monthly,
    analytics_overview,
    analytics_products,
    analytics_revenue,
    analytics_top_products,
    dashboard_daily,
    dashboard_distribution,
    dashboard_monthly,
    dashboard_recent,
    dashboard_revenue,
    dashboard_stats,
)
from orderdesk.infrastructure.cli.order_commands import (
    order_create,
    order_delete,
    order_list,
    order_send,
    order_show,
    order_status,
    order_timeline,
    order_update,
)
from orderdesk.infrastructure.cli.product_commands import product_list, product_seed
from orderdesk.infrastructure.config import get_settings
from orderdesk.infrastructure.logging_config import configure_logging


@click.group()
def cli() -> None:
    """OrderDesk: order management backend"""
    configure_logging(get_settings().log_level)


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def courier() -> None:
    """Track orders with the courier."""


@cli.group()
def dashboard() -> None:
    """Dashboard figures."""


@cli.group()
def analytics() -> None:
    """Sales and customer analytics."""


@cli.group()
def product() -> None:
    """Manage the product catalog."""


# Register subcommands
order.add_command(order_create)
order.add_command(order_delete)
order.add_command(order_list)
order.add_command(order_send)
order.add_command(order_show)
order.add_command(order_status)
order.add_command(order_timeline)
order.add_command(order_update)
courier.add_command(courier_advance)
courier.add_command(courier_bulk)
courier.add_command(courier_list)
courier.add_command(courier_next)
courier.add_command(courier_stats)
courier.add_command(courier_timeline)
dashboard.add_command(dashboard_daily)
dashboard.add_command(dashboard_distribution)
dashboard.add_command(dashboard_monthly)
dashboard.add_command(dashboard_recent)
dashboard.add_command(dashboard_revenue)
dashboard.add_command(dashboard_stats)
analytics.add_command(analytics_customers)
analytics.add_command(analytics_monthly)
analytics.add_command(analytics_overview)
analytics.add_command(analytics_products)
analytics.add_command(analytics_revenue)
analytics.add_command(analytics_top_products)
product.add_command(product_list)
product.add_command(product_seed)
