"""Integration tests for the CreateOrder use case.

Uses in-memory fake repositories, no file I/O.
"""

import pytest

from orderdesk.application.create_order import CreateOrderHandler
from orderdesk.application.dto import OrderRequest
from orderdesk.domain.exceptions import DuplicateOrderCodeError, ValidationError
from orderdesk.domain.model.value_objects import Money, OrderCode
from tests.fakes import (
    NOW,
    FakeOrderRepository,
    FakeProductRepository,
    catalog,
    fixed_clock,
    make_order,
)


def _setup(max_quantity=None):
    order_repo = FakeOrderRepository()
    product_repo = FakeProductRepository(catalog())
    handler = CreateOrderHandler(
        order_repo, product_repo, clock=fixed_clock(), max_quantity=max_quantity
    )
    return handler, order_repo, product_repo


def _request(**overrides) -> OrderRequest:
    values = dict(
        customer_name="Nimal Perera",
        address="12 Galle Road, Colombo",
        mobile_number="077-123-4567",
        product_ref="PROD001",
        quantity="2",
    )
    values.update(overrides)
    return OrderRequest(**values)


class TestCreateOrderHappyPath:

    def test_creates_placed_order_with_derived_total(self):
        handler, _, _ = _setup()
        dto = handler.handle(_request())
        assert dto.status == "placed"
        assert dto.total_amount == "LKR 20,000.00"
        assert dto.product_name == "Coconut Oil 5KG"
        assert dto.mobile_number == "0771234567"
        assert dto.order_code.startswith("ORD20261018")

    def test_mobile_stored_without_separators_or_plus(self):
        handler, _, _ = _setup()
        dto = handler.handle(_request(mobile_number="+94 77-123 4567"))
        assert dto.mobile_number == "94771234567"

    def test_explicit_amount_kept(self):
        handler, _, _ = _setup()
        dto = handler.handle(_request(total_amount="15000"))
        assert dto.total_amount == "LKR 15,000.00"

    def test_sequential_ids_and_unique_codes(self):
        handler, _, _ = _setup()
        first = handler.handle(_request())
        second = handler.handle(_request(customer_name="Kasun Silva"))
        assert second.id == first.id + 1
        assert second.order_code != first.order_code


class TestCreateOrderPriceLock:

    def test_price_snapshot_at_creation(self):
        handler, order_repo, product_repo = _setup()
        dto = handler.handle(_request(quantity=1))

        product = product_repo.get_by_ref("PROD001")
        product.price = Money.of("99999")
        product.name = "Renamed"
        product_repo.save(product)

        saved = order_repo.get_by_id(dto.id)
        assert str(saved.total_amount) == "LKR 10,000.00"
        assert saved.product_name == "Coconut Oil 5KG"


class TestCreateOrderValidation:

    def test_all_violations_reported(self):
        handler, order_repo, _ = _setup()
        with pytest.raises(ValidationError) as excinfo:
            handler.handle(_request(customer_name="", mobile_number="12345"))
        assert excinfo.value.violations == [
            "Full name is required (minimum 2 characters)",
            "Valid mobile number is required (10-15 digits)",
        ]
        assert order_repo.list() == []

    def test_unknown_product_rejected(self):
        handler, _, _ = _setup()
        with pytest.raises(ValidationError, match="Product not found"):
            handler.handle(_request(product_ref="PROD999"))

    def test_public_quantity_ceiling(self):
        handler, _, _ = _setup(max_quantity=100)
        with pytest.raises(ValidationError, match=r"\(1-100\)"):
            handler.handle(_request(quantity=101))

    def test_staff_path_has_no_ceiling(self):
        handler, _, _ = _setup()
        assert handler.handle(_request(quantity=500)).quantity == 500


class ScriptedCodes:
    """Hands out the given suffixes in order, ignoring what is stored."""

    def __init__(self, *suffixes: int) -> None:
        self._suffixes = list(suffixes)
        self.calls = 0

    def next_code(self, day):
        self.calls += 1
        return OrderCode.build(day, self._suffixes.pop(0))


class TestCreateOrderCodeClash:

    def _handler(self, codes):
        order_repo = FakeOrderRepository()
        taken = make_order()
        taken.order_code = OrderCode.build(NOW.date(), 7)
        order_repo.create(taken)
        handler = CreateOrderHandler(
            order_repo, FakeProductRepository(catalog()), code_generator=codes, clock=fixed_clock()
        )
        return handler, order_repo

    def test_taken_code_is_redrawn(self):
        codes = ScriptedCodes(7, 8)
        handler, order_repo = self._handler(codes)
        dto = handler.handle(_request())
        assert dto.order_code == "ORD20261018008"
        assert codes.calls == 2
        assert len(order_repo.list()) == 2

    def test_gives_up_after_three_clashes(self):
        codes = ScriptedCodes(7, 7, 7, 9)
        handler, order_repo = self._handler(codes)
        with pytest.raises(DuplicateOrderCodeError, match="ORD20261018007 already exists"):
            handler.handle(_request())
        assert codes.calls == 3
        assert len(order_repo.list()) == 1
