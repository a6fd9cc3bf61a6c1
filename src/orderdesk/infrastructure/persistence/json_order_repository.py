"""JSON-file-backed implementation of OrderRepository.

The file is created on the first write; a missing file reads as an empty
store.  Any other read or write failure surfaces as
``DependencyUnavailableError``, including a data directory that cannot be
created.
"""

from __future__ import annotations

import json
import logging
import threading
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from orderdesk.domain.exceptions import (
    DependencyUnavailableError,
    DuplicateOrderCodeError,
    EntityNotFoundError,
)
from orderdesk.domain.model.order import Order
from orderdesk.domain.model.order_status import OrderStatus
from orderdesk.domain.model.value_objects import Money, OrderCode, Quantity
from orderdesk.domain.repository.order_repository import OrderFilter, OrderRepository

logger = logging.getLogger(__name__)


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._lock = threading.Lock()

    # --- OrderRepository interface --------------------------------------------

    def create(self, order: Order) -> Order:
        with self._lock:
            orders = self._load_raw()
            code = order.order_code.value
            if any(raw["order_code"] == code for raw in orders):
                raise DuplicateOrderCodeError(code)
            order.id = max((o["id"] for o in orders), default=0) + 1
            orders.append(self._to_raw(order))
            self._persist_raw(orders)
        return order

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._load_raw():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def get_by_code(self, order_code: str) -> Order | None:
        for raw in self._load_raw():
            if raw["order_code"] == order_code:
                return self._to_domain(raw)
        return None

    def list(self, order_filter: OrderFilter | None = None) -> list[Order]:
        orders = [self._to_domain(raw) for raw in self._load_raw()]
        return (order_filter or OrderFilter()).apply(orders)

    def save(self, order: Order) -> None:
        with self._lock:
            orders = self._load_raw()
            for i, raw in enumerate(orders):
                if raw["id"] == order.id:
                    orders[i] = self._to_raw(order)
                    break
            else:
                raise EntityNotFoundError(f"Order #{order.id} not found")
            self._persist_raw(orders)

    def delete(self, order_id: int) -> bool:
        with self._lock:
            orders = self._load_raw()
            remaining = [raw for raw in orders if raw["id"] != order_id]
            if len(remaining) == len(orders):
                return False
            self._persist_raw(remaining)
        return True

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "order_code": order.order_code.value,
            "customer_name": order.customer_name,
            "address": order.address,
            "mobile_number": order.mobile_number,
            "product_ref": order.product_ref,
            "product_name": order.product_name,
            "quantity": order.quantity.value,
            "status": order.status.value,
            "total_amount": str(order.total_amount.amount),
            "currency": order.total_amount.currency,
            "notes": order.notes,
            "created_at": order.created_at.isoformat(),
            "updated_at": order.updated_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        return Order(
            id=raw["id"],
            order_code=OrderCode(raw["order_code"]),
            customer_name=raw["customer_name"],
            address=raw["address"],
            mobile_number=raw["mobile_number"],
            product_ref=raw["product_ref"],
            product_name=raw["product_name"],
            quantity=Quantity(raw["quantity"]),
            total_amount=Money(Decimal(raw["total_amount"]), raw.get("currency", "LKR")),
            status=OrderStatus.parse(raw["status"]),
            notes=raw.get("notes", ""),
            created_at=datetime.fromisoformat(raw["created_at"]),
            updated_at=datetime.fromisoformat(raw["updated_at"]),
        )

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        try:
            return json.loads(self._file_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as exc:
            logger.exception("Cannot read order store %s", self._file_path)
            raise DependencyUnavailableError() from exc

    def _persist_raw(self, orders: list[dict]) -> None:
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(
                json.dumps(orders, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
            )
        except OSError as exc:
            logger.exception("Cannot write order store %s", self._file_path)
            raise DependencyUnavailableError() from exc
