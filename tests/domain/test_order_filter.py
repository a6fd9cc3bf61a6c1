"""Unit tests for OrderFilter."""

from datetime import date, timedelta

import pytest

from orderdesk.domain.exceptions import InvalidStatusError, ValidationError
from orderdesk.domain.model.order_status import OrderStatus
from orderdesk.domain.repository.order_repository import MAX_LIST_LIMIT, OrderFilter
from tests.fakes import NOW, make_order


class TestBuild:

    def test_all_means_no_status_filter(self):
        assert OrderFilter.build(status="all").statuses is None

    def test_legacy_status_accepted(self):
        assert OrderFilter.build(status="pending").statuses == {OrderStatus.PLACED}

    def test_unknown_status_rejected(self):
        with pytest.raises(InvalidStatusError):
            OrderFilter.build(status="lost")

    def test_limit_capped(self):
        assert OrderFilter.build(limit=5000).limit == MAX_LIST_LIMIT

    def test_non_positive_limit_rejected(self):
        with pytest.raises(ValidationError, match="positive"):
            OrderFilter.build(limit=0)

    def test_reversed_range_rejected(self):
        with pytest.raises(ValidationError, match="Date range"):
            OrderFilter.build(date_range=(date(2026, 10, 5), date(2026, 10, 1)))


class TestApply:

    def test_newest_first_and_limited(self):
        old = make_order(customer="Old", created_at=NOW - timedelta(days=3))
        new = make_order(customer="New")
        mid = make_order(customer="Mid", created_at=NOW - timedelta(days=1))
        result = OrderFilter.build(limit=2).apply([old, new, mid])
        assert [o.customer_name for o in result] == ["New", "Mid"]

    def test_search_is_case_insensitive(self):
        orders = [make_order(customer="Nimal Perera"), make_order(customer="Kasun Silva")]
        result = OrderFilter.build(search="PERERA").apply(orders)
        assert [o.customer_name for o in result] == ["Nimal Perera"]

    def test_search_matches_order_code(self):
        order = make_order()
        assert OrderFilter.build(search=order.order_code.value[-5:]).matches(order)

    def test_date_range(self):
        order = make_order(created_at=NOW - timedelta(days=2))
        assert OrderFilter.build(date_range=(date(2026, 10, 16), date(2026, 10, 16))).matches(order)
        assert not OrderFilter.build(date_range=(date(2026, 10, 17), date(2026, 10, 18))).matches(order)
