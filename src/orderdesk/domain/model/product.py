"""Product aggregate.

Products live independently of orders.  Orders only keep a reference
plus a snapshot of the name and the price at order-creation time.
"""

from __future__ import annotations

from dataclasses import dataclass

from orderdesk.domain.model.value_objects import Money


@dataclass
class Product:
    """A product in the catalog, addressed by its business reference."""

    ref: str
    name: str
    price: Money
    category: str = ""
    description: str = ""
