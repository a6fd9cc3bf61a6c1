"""Unit tests for the status vocabulary and courier transition table."""

import pytest

from orderdesk.domain.exceptions import InvalidStatusError
from orderdesk.domain.model.order_status import (
    OrderStatus,
    is_valid_courier_transition,
    next_courier_statuses,
    pipeline_rank,
)


class TestParse:

    def test_canonical_values(self):
        for status in OrderStatus:
            assert OrderStatus.parse(status.value) is status

    @pytest.mark.parametrize(
        "legacy, expected",
        [
            ("pending", OrderStatus.PLACED),
            ("sended", OrderStatus.SENT_TO_COURIER),
            ("sent", OrderStatus.SENT_TO_COURIER),
            ("sent_to_courier", OrderStatus.SENT_TO_COURIER),
            ("in_transit", OrderStatus.IN_TRANSIT),
            (" Delivered ", OrderStatus.DELIVERED),
        ],
    )
    def test_legacy_spellings(self, legacy, expected):
        assert OrderStatus.parse(legacy) is expected

    def test_unknown_status_rejected(self):
        with pytest.raises(InvalidStatusError, match="Invalid status 'shipped'"):
            OrderStatus.parse("shipped")

    def test_blank_status_rejected(self):
        with pytest.raises(InvalidStatusError, match="Status is required"):
            OrderStatus.parse("  ")


class TestCourierTransitions:

    def test_allowed_moves(self):
        assert is_valid_courier_transition(OrderStatus.SENT_TO_COURIER, OrderStatus.IN_TRANSIT)
        assert is_valid_courier_transition(OrderStatus.SENT_TO_COURIER, OrderStatus.DELIVERED)
        assert is_valid_courier_transition(OrderStatus.IN_TRANSIT, OrderStatus.DELIVERED)

    def test_no_backwards_moves(self):
        assert not is_valid_courier_transition(OrderStatus.IN_TRANSIT, OrderStatus.SENT_TO_COURIER)

    def test_delivered_is_terminal(self):
        assert next_courier_statuses(OrderStatus.DELIVERED) == []
        for target in OrderStatus:
            assert not is_valid_courier_transition(OrderStatus.DELIVERED, target)

    def test_non_courier_statuses_have_no_courier_moves(self):
        assert next_courier_statuses(OrderStatus.PLACED) == []

    def test_courier_flag(self):
        assert OrderStatus.IN_TRANSIT.is_courier
        assert not OrderStatus.ISSUED.is_courier


def test_pipeline_rank():
    assert pipeline_rank(OrderStatus.PLACED) == 0
    assert pipeline_rank(OrderStatus.DELIVERED) == 5
    assert pipeline_rank(OrderStatus.CANCELLED) == -1
