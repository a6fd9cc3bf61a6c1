"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.  The configured
backend decides which store the repositories use.  Building the
repositories does no I/O: an unreachable store is reported by its first
query, so read-only views can still degrade.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from orderdesk.domain.model.product import Product
from orderdesk.domain.model.value_objects import Money
from orderdesk.domain.repository.order_repository import OrderRepository
from orderdesk.domain.repository.product_repository import ProductRepository
from orderdesk.infrastructure.config import Settings, get_settings
from orderdesk.infrastructure.persistence.json_order_repository import JsonOrderRepository
from orderdesk.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from orderdesk.infrastructure.persistence.memory_repository import (
    InMemoryOrderRepository,
    InMemoryProductRepository,
)
from orderdesk.infrastructure.persistence.sql_repository import (
    SqlOrderRepository,
    SqlProductRepository,
    make_engine,
)


@dataclass(frozen=True)
class Repositories:
    orders: OrderRepository
    products: ProductRepository


def build_repositories(settings: Settings | None = None) -> Repositories:
    settings = settings or get_settings()

    if settings.backend == "memory":
        # Lives only as long as the returned objects; each CLI call starts empty.
        return Repositories(
            InMemoryOrderRepository(),
            InMemoryProductRepository(default_catalog(settings.currency)),
        )

    if settings.backend == "sql":
        engine = make_engine(settings.database_url)
        return Repositories(SqlOrderRepository(engine), SqlProductRepository(engine))

    return Repositories(
        JsonOrderRepository(settings.data_dir / "orders.json"),
        JsonProductRepository(settings.data_dir / "products.json"),
    )


def default_catalog(currency: str = "LKR") -> list[Product]:
    """The products the shop sells out of the box."""
    return [
        Product(
            ref="PROD001",
            name="NIRVAAN 5KG (100% PURE COCONUT OIL)",
            price=Money(Decimal("10000.00"), currency),
            category="Coconut Oil",
            description="100% Pure Coconut Oil, 5KG pack",
        ),
        Product(
            ref="PROD002",
            name="NIRVAAN 1KG (100% PURE COCONUT OIL)",
            price=Money(Decimal("2500.00"), currency),
            category="Coconut Oil",
            description="100% Pure Coconut Oil, 1KG pack",
        ),
    ]
