"""Tests for the JSON-file repositories."""

import json
from datetime import timedelta
from pathlib import Path

import pytest

from orderdesk.domain.exceptions import DependencyUnavailableError, DuplicateOrderCodeError
from orderdesk.domain.model.order_status import OrderStatus
from orderdesk.domain.model.value_objects import Money
from orderdesk.domain.repository.order_repository import OrderFilter
from orderdesk.infrastructure.bootstrap import default_catalog
from orderdesk.infrastructure.persistence.json_order_repository import JsonOrderRepository
from orderdesk.infrastructure.persistence.json_product_repository import JsonProductRepository
from tests.fakes import NOW, make_order


class TestJsonOrderRepository:

    def test_file_created_on_first_write(self, tmp_path):
        path = tmp_path / "nested" / "orders.json"
        repo = JsonOrderRepository(path)
        assert not path.exists()
        assert repo.list() == []

        repo.create(make_order())
        assert len(json.loads(path.read_text())) == 1

    def test_duplicate_code_rejected(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        first = repo.create(make_order())
        clash = make_order()
        clash.order_code = first.order_code
        with pytest.raises(DuplicateOrderCodeError, match="already exists"):
            repo.create(clash)
        assert len(repo.list()) == 1

    def test_data_dir_under_a_file_is_unavailable(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        repo = JsonOrderRepository(blocker / "data" / "orders.json")
        with pytest.raises(DependencyUnavailableError):
            repo.list()
        with pytest.raises(DependencyUnavailableError):
            repo.create(make_order())

    def test_round_trip(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        created = repo.create(make_order(amount="2500.00", status=OrderStatus.IN_TRANSIT))

        reopened = JsonOrderRepository(tmp_path / "orders.json")
        loaded = reopened.get_by_id(created.id)
        assert loaded.total_amount == Money.of("2500.00")
        assert loaded.status == OrderStatus.IN_TRANSIT
        assert loaded.created_at == NOW

    def test_ids_keep_increasing_after_delete(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        repo.create(make_order())
        second = repo.create(make_order())
        repo.delete(1)
        assert repo.create(make_order()).id == second.id + 1

    def test_legacy_status_values_load(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        repo.create(make_order())
        raw = json.loads((tmp_path / "orders.json").read_text())
        raw[0]["status"] = "sended"
        (tmp_path / "orders.json").write_text(json.dumps(raw))
        assert repo.get_by_id(1).status == OrderStatus.SENT_TO_COURIER

    def test_filter_and_default_aggregates(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        repo.create(make_order(customer="Old", created_at=NOW - timedelta(days=3)))
        repo.create(make_order(customer="New", status=OrderStatus.DELIVERED))
        assert [o.customer_name for o in repo.list()] == ["New", "Old"]
        assert len(repo.list(OrderFilter.build(status="delivered"))) == 1
        assert repo.count_by_status()[OrderStatus.DELIVERED] == 1

    def test_corrupt_file_is_unavailable(self, tmp_path):
        path = tmp_path / "orders.json"
        repo = JsonOrderRepository(path)
        path.write_text("{not json")
        with pytest.raises(DependencyUnavailableError):
            repo.list()


class TestJsonProductRepository:

    def test_save_and_get(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        for product in default_catalog():
            repo.save(product)
        assert repo.get_by_ref("PROD001").price == Money.of("10000.00")
        assert len(repo.list_all()) == 2

    def test_write_failure_is_unavailable(self, tmp_path, monkeypatch):
        repo = JsonProductRepository(tmp_path / "products.json")

        def read_only(*args, **kwargs):
            raise PermissionError("read-only file system")

        monkeypatch.setattr(Path, "write_text", read_only)
        with pytest.raises(DependencyUnavailableError, match="Product catalog"):
            repo.save(default_catalog()[0])
