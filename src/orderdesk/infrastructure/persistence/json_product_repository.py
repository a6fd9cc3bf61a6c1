"""JSON-file-backed implementation of ProductRepository.

Like the order store, the file is created on the first write.
"""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from pathlib import Path

from orderdesk.domain.exceptions import DependencyUnavailableError
from orderdesk.domain.model.product import Product
from orderdesk.domain.model.value_objects import Money
from orderdesk.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path

    # --- ProductRepository interface ------------------------------------------

    def get_by_ref(self, ref: str) -> Product | None:
        return self._load().get(ref)

    def list_all(self) -> list[Product]:
        return list(self._load().values())

    def save(self, product: Product) -> None:
        products = self._load()
        products[product.ref] = product
        self._persist(products)

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, Product]:
        try:
            raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.exception("Cannot read product catalog %s", self._file_path)
            raise DependencyUnavailableError("Product catalog is unavailable") from exc
        return {
            item["ref"]: Product(
                ref=item["ref"],
                name=item["name"],
                price=Money(Decimal(item["price"]), item.get("currency", "LKR")),
                category=item.get("category", ""),
                description=item.get("description", ""),
            )
            for item in raw
        }

    def _persist(self, products: dict[str, Product]) -> None:
        raw = [
            {
                "ref": p.ref,
                "name": p.name,
                "price": str(p.price.amount),
                "currency": p.price.currency,
                "category": p.category,
                "description": p.description,
            }
            for p in products.values()
        ]
        try:
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(
                json.dumps(raw, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
            )
        except OSError as exc:
            logger.exception("Cannot write product catalog %s", self._file_path)
            raise DependencyUnavailableError("Product catalog is unavailable") from exc
