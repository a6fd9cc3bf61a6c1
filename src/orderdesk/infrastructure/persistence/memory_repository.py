"""Process-memory implementations of the repositories.

Each instance owns its own store; nothing is shared at module level.
Stored orders are copies, so a caller mutating an ``Order`` it got back
does not change the store until it calls ``save``.
"""

from __future__ import annotations

import copy
import threading

from orderdesk.domain.exceptions import DuplicateOrderCodeError, EntityNotFoundError
from orderdesk.domain.model.order import Order
from orderdesk.domain.model.product import Product
from orderdesk.domain.repository.order_repository import OrderFilter, OrderRepository
from orderdesk.domain.repository.product_repository import ProductRepository


class InMemoryOrderRepository(OrderRepository):

    def __init__(self) -> None:
        self._store: dict[int, Order] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def create(self, order: Order) -> Order:
        with self._lock:
            code = order.order_code.value
            if any(o.order_code.value == code for o in self._store.values()):
                raise DuplicateOrderCodeError(code)
            order.id = self._next_id
            self._next_id += 1
            self._store[order.id] = copy.deepcopy(order)
        return order

    def get_by_id(self, order_id: int) -> Order | None:
        with self._lock:
            order = self._store.get(order_id)
            return copy.deepcopy(order) if order is not None else None

    def get_by_code(self, order_code: str) -> Order | None:
        with self._lock:
            for order in self._store.values():
                if order.order_code.value == order_code:
                    return copy.deepcopy(order)
        return None

    def list(self, order_filter: OrderFilter | None = None) -> list[Order]:
        with self._lock:
            orders = copy.deepcopy(list(self._store.values()))
        return (order_filter or OrderFilter()).apply(orders)

    def save(self, order: Order) -> None:
        with self._lock:
            if order.id not in self._store:
                raise EntityNotFoundError(f"Order #{order.id} not found")
            self._store[order.id] = copy.deepcopy(order)

    def delete(self, order_id: int) -> bool:
        with self._lock:
            return self._store.pop(order_id, None) is not None


class InMemoryProductRepository(ProductRepository):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._store: dict[str, Product] = {}
        for p in products or []:
            self._store[p.ref] = p

    def get_by_ref(self, ref: str) -> Product | None:
        return self._store.get(ref)

    def list_all(self) -> list[Product]:
        return list(self._store.values())

    def save(self, product: Product) -> None:
        self._store[product.ref] = product
