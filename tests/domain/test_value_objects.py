"""Unit tests for domain value objects."""

from datetime import date
from decimal import Decimal

import pytest

from orderdesk.domain.exceptions import ValidationError
from orderdesk.domain.model.value_objects import Money, OrderCode, Quantity


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_default_currency_is_lkr(self):
        assert Money(Decimal("10.50")).currency == "LKR"

    def test_of_factory_from_string(self):
        assert Money.of("25.99").amount == Decimal("25.99")

    def test_of_factory_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("ten")

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_addition_and_multiplication(self):
        assert Money.of("10") + Money.of("5.50") == Money.of("15.50")
        assert Money.of("2500") * 4 == Money.of("10000")

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(Decimal("10"), "LKR") + Money(Decimal("5"), "USD")

    def test_str_formatting(self):
        assert str(Money.of("10000")) == "LKR 10,000.00"
        assert str(Money.of("9.5")) == "LKR 9.50"

    def test_comparison(self):
        assert Money.of("5") < Money.of("10")
        assert Money.of("10") > Money.of("5")


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_valid_quantity(self):
        assert Quantity(5).value == 5

    @pytest.mark.parametrize("value", [0, -3])
    def test_non_positive_rejected(self, value):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(value)

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity(True)


# ── OrderCode ────────────────────────────────────────────────────────────────


class TestOrderCode:

    def test_build(self):
        assert OrderCode.build(date(2026, 10, 18), 7).value == "ORD20261018007"

    def test_malformed_code_rejected(self):
        with pytest.raises(ValidationError, match="Invalid order code"):
            OrderCode("ORD2026")

    def test_suffix_out_of_range_rejected(self):
        with pytest.raises(ValidationError, match="out of range"):
            OrderCode.build(date(2026, 10, 18), 1000)
