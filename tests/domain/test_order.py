"""Unit tests for the Order aggregate and its status setters."""

import itertools
from datetime import timedelta

import pytest

from orderdesk.domain.exceptions import InvalidStatusError, InvalidTransitionError, ValidationError
from orderdesk.domain.model.order import Order, normalize_mobile
from orderdesk.domain.model.order_status import COURIER_TRANSITIONS, OrderStatus
from orderdesk.domain.model.value_objects import Money, OrderCode, Quantity
from tests.fakes import NOW, make_order

LATER = NOW + timedelta(hours=3)


class TestOrderCreation:

    def _create(self, **overrides):
        values = dict(
            order_code=OrderCode("ORD20261018001"),
            customer_name="  Nimal Perera ",
            address="12 Galle Road, Colombo",
            mobile_number="077-123 4567",
            product_ref="PROD001",
            product_name="Coconut Oil 5KG",
            quantity=Quantity(2),
            unit_price=Money.of("10000"),
            now=NOW,
        )
        values.update(overrides)
        return Order.create(**values)

    def test_happy_path(self):
        order = self._create()
        assert order.id is None  # assigned by repository
        assert order.status == OrderStatus.PLACED
        assert order.customer_name == "Nimal Perera"
        assert order.mobile_number == "0771234567"
        assert order.created_at == order.updated_at == NOW

    def test_total_defaults_to_price_times_quantity(self):
        assert self._create().total_amount == Money.of("20000")

    def test_explicit_total_wins(self):
        order = self._create(total_amount=Money.of("18500"))
        assert order.total_amount == Money.of("18500")


class TestSetStatus:

    def test_any_status_allowed(self):
        order = make_order(status=OrderStatus.DELIVERED)
        order.set_status("placed", now=LATER)
        assert order.status == OrderStatus.PLACED
        assert order.updated_at == LATER

    def test_same_status_refreshes_updated_at(self):
        order = make_order(status=OrderStatus.RECEIVED)
        order.set_status(OrderStatus.RECEIVED, now=LATER)
        assert order.status == OrderStatus.RECEIVED
        assert order.updated_at == LATER

    def test_unknown_status_rejected(self):
        order = make_order()
        with pytest.raises(InvalidStatusError):
            order.set_status("lost")
        assert order.status == OrderStatus.PLACED


class TestAdvanceCourierStatus:

    def test_sent_to_in_transit(self):
        order = make_order(status=OrderStatus.SENT_TO_COURIER)
        order.advance_courier_status("in-transit", now=LATER)
        assert order.status == OrderStatus.IN_TRANSIT
        assert order.updated_at == LATER

    def test_shortcut_to_delivered(self):
        order = make_order(status=OrderStatus.SENT_TO_COURIER)
        order.advance_courier_status(OrderStatus.DELIVERED)
        assert order.is_delivered

    def test_rejected_transition_leaves_order_untouched(self):
        order = make_order(status=OrderStatus.IN_TRANSIT)
        with pytest.raises(
            InvalidTransitionError,
            match="Invalid status transition from in-transit to sent-to-courier",
        ):
            order.advance_courier_status("sent-to-courier", now=LATER)
        assert order.status == OrderStatus.IN_TRANSIT
        assert order.updated_at == NOW

    def test_placed_order_cannot_be_advanced(self):
        with pytest.raises(InvalidTransitionError):
            make_order().advance_courier_status("in-transit")

    @pytest.mark.parametrize(
        "current, target", list(itertools.product(OrderStatus, OrderStatus))
    )
    def test_every_status_pair(self, current, target):
        order = make_order(status=current)
        if target in COURIER_TRANSITIONS.get(current, ()):
            order.advance_courier_status(target, now=LATER)
            assert order.status == target
            assert order.updated_at == LATER
        else:
            with pytest.raises(InvalidTransitionError):
                order.advance_courier_status(target, now=LATER)
            assert order.status == current
            assert order.updated_at == NOW


class TestApplyChanges:

    def test_strips_and_normalizes(self):
        order = make_order()
        order.apply_changes({"address": "  7 Temple Lane  ", "mobile_number": "071 555-1234"}, now=LATER)
        assert order.address == "7 Temple Lane"
        assert order.mobile_number == "0715551234"
        assert order.updated_at == LATER

    @pytest.mark.parametrize("field", ["status", "order_code", "created_at", "id"])
    def test_protected_fields_rejected(self, field):
        with pytest.raises(ValidationError, match="cannot be updated"):
            make_order().apply_changes({field: "x"})


class TestNormalizeMobile:

    @pytest.mark.parametrize(
        "raw", ["+94 77-123 4567", "94771234567", "+94771234567", "94 77 123 4567"]
    )
    def test_separators_and_plus_dropped(self, raw):
        assert normalize_mobile(raw) == "94771234567"
