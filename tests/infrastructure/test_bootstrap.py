"""Tests for backend selection and the in-memory store."""

import pytest

from orderdesk.application.dashboard import DashboardHandler
from orderdesk.domain.exceptions import DuplicateOrderCodeError
from orderdesk.domain.model.order_status import OrderStatus
from orderdesk.infrastructure.bootstrap import build_repositories
from orderdesk.infrastructure.config import Settings
from orderdesk.infrastructure.persistence.json_order_repository import JsonOrderRepository
from orderdesk.infrastructure.persistence.memory_repository import InMemoryOrderRepository
from orderdesk.infrastructure.persistence.sql_repository import SqlOrderRepository
from tests.fakes import make_order


class TestBuildRepositories:

    def test_memory_backend_is_seeded(self):
        repos = build_repositories(Settings(backend="memory"))
        assert isinstance(repos.orders, InMemoryOrderRepository)
        assert repos.products.get_by_ref("PROD001").name.startswith("NIRVAAN 5KG")

    def test_memory_backend_is_per_instance(self):
        first = build_repositories(Settings(backend="memory"))
        first.orders.create(make_order())
        second = build_repositories(Settings(backend="memory"))
        assert second.orders.list() == []

    def test_json_backend(self, tmp_path):
        repos = build_repositories(Settings(backend="json", data_dir=tmp_path))
        assert isinstance(repos.orders, JsonOrderRepository)
        assert repos.orders.list() == []
        assert not (tmp_path / "orders.json").exists()

    def test_sql_backend_creates_database_dir(self, tmp_path):
        db = tmp_path / "db" / "orderdesk.db"
        repos = build_repositories(Settings(backend="sql", database_url=f"sqlite:///{db}"))
        assert isinstance(repos.orders, SqlOrderRepository)
        assert not db.parent.exists()

        assert repos.orders.list() == []
        assert db.parent.is_dir()

    def test_unusable_data_dir_degrades_dashboard(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        repos = build_repositories(Settings(backend="json", data_dir=blocker / "data"))
        stats = DashboardHandler(repos.orders).stats()
        assert stats.degraded
        assert stats.total == 0


class TestInMemoryOrderRepository:

    def test_returns_copies(self):
        repo = InMemoryOrderRepository()
        created = repo.create(make_order())
        loaded = repo.get_by_id(created.id)
        loaded.status = OrderStatus.DELIVERED
        assert repo.get_by_id(created.id).status == OrderStatus.PLACED

        repo.save(loaded)
        assert repo.get_by_id(created.id).status == OrderStatus.DELIVERED

    def test_delete(self):
        repo = InMemoryOrderRepository()
        created = repo.create(make_order())
        assert repo.delete(created.id)
        assert repo.list() == []

    def test_duplicate_code_rejected(self):
        repo = InMemoryOrderRepository()
        first = repo.create(make_order())
        clash = make_order()
        clash.order_code = first.order_code
        with pytest.raises(DuplicateOrderCodeError, match="already exists"):
            repo.create(clash)
        assert len(repo.list()) == 1
