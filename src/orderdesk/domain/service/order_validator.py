"""Domain service: order field validation.

Runs every rule and returns all violations instead of stopping at the
first one, so a client can fix a submission in one round trip.  The
validator never raises; callers turn a non-empty result into a
``ValidationError``.
"""

from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation

from orderdesk.domain.model.order import normalize_mobile
from orderdesk.domain.repository.product_repository import ProductRepository

MIN_NAME_LENGTH = 2
MIN_ADDRESS_LENGTH = 5
PUBLIC_MAX_QUANTITY = 100

_MOBILE_DIGITS = re.compile(r"^[0-9]{10,15}$")


def parse_quantity(value: object) -> int | None:
    """Integer value of *value*, or None when it is not an integer."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def parse_amount(value: object) -> Decimal | None:
    """Decimal value of *value*, or None when it is not a number."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return amount if amount.is_finite() else None


def is_valid_mobile(value: str) -> bool:
    return bool(_MOBILE_DIGITS.match(normalize_mobile(value)))


def _blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class OrderValidator:
    """Creation-time rules for an order submission.

    A *candidate* is any object exposing ``customer_name``, ``address``,
    ``mobile_number``, ``product_ref``, ``quantity`` and ``total_amount``
    attributes (see ``orderdesk.application.dto.OrderRequest``).
    """

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def validate(self, candidate, max_quantity: int | None = None) -> list[str]:
        violations = [
            *self._check_customer_name(candidate.customer_name),
            *self._check_address(candidate.address),
            *self._check_mobile(candidate.mobile_number),
            *self._check_product(candidate.product_ref),
            *self._check_quantity(candidate.quantity, max_quantity),
        ]
        if candidate.total_amount is not None:
            violations.extend(self._check_amount(candidate.total_amount))
        return violations

    def validate_changes(self, changes: dict, max_quantity: int | None = None) -> list[str]:
        """Apply the same rules, but only to the fields present in *changes*."""
        checks = {
            "customer_name": self._check_customer_name,
            "address": self._check_address,
            "mobile_number": self._check_mobile,
            "product_ref": self._check_product,
            "quantity": lambda v: self._check_quantity(v, max_quantity),
            "total_amount": self._check_amount,
        }
        violations: list[str] = []
        for name, check in checks.items():
            if name in changes:
                violations.extend(check(changes[name]))
        return violations

    # --- Rules ----------------------------------------------------------------

    @staticmethod
    def _check_customer_name(value: object) -> list[str]:
        if not isinstance(value, str) or len(value.strip()) < MIN_NAME_LENGTH:
            return [f"Full name is required (minimum {MIN_NAME_LENGTH} characters)"]
        return []

    @staticmethod
    def _check_address(value: object) -> list[str]:
        if not isinstance(value, str) or len(value.strip()) < MIN_ADDRESS_LENGTH:
            return ["Valid address is required"]
        return []

    @staticmethod
    def _check_mobile(value: object) -> list[str]:
        if not isinstance(value, str) or not is_valid_mobile(value):
            return ["Valid mobile number is required (10-15 digits)"]
        return []

    def _check_product(self, value: object) -> list[str]:
        if _blank(value) or not isinstance(value, str):
            return ["Product ID is required"]
        if self._product_repo.get_by_ref(value.strip()) is None:
            return [f"Product not found: '{value.strip()}'"]
        return []

    @staticmethod
    def _check_quantity(value: object, max_quantity: int | None) -> list[str]:
        qty = parse_quantity(value)
        if qty is None or qty < 1:
            return ["Valid quantity is required"]
        if max_quantity is not None and qty > max_quantity:
            return [f"Valid quantity is required (1-{max_quantity})"]
        return []

    @staticmethod
    def _check_amount(value: object) -> list[str]:
        amount = parse_amount(value)
        if amount is None or amount < 0:
            return ["Total amount must be a non-negative number"]
        return []
