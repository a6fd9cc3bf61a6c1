"""End-to-end tests of the click CLI against a JSON store in a temp dir."""

import pytest
from click.testing import CliRunner

from orderdesk.infrastructure.cli.main import cli
from orderdesk.infrastructure.config import get_settings


@pytest.fixture
def run(tmp_path, monkeypatch):
    monkeypatch.setenv("ORDERDESK_BACKEND", "json")
    monkeypatch.setenv("ORDERDESK_DATA_DIR", str(tmp_path))
    get_settings.cache_clear()
    runner = CliRunner()

    def invoke(*args):
        return runner.invoke(cli, list(args))

    yield invoke
    get_settings.cache_clear()


def _create(run, customer="Nimal Perera", quantity="1"):
    return run(
        "order", "create",
        "--customer", customer,
        "--address", "12 Galle Road, Colombo",
        "--mobile", "0771234567",
        "--product", "PROD001",
        "--quantity", quantity,
    )


class TestOrderCommands:

    def test_create_requires_catalog(self, run):
        result = _create(run)
        assert result.exit_code != 0
        assert "Product not found: 'PROD001'" in result.output

    def test_create_show_list(self, run):
        assert run("product", "seed").exit_code == 0
        result = _create(run)
        assert result.exit_code == 0, result.output
        assert "LKR 10,000.00" in result.output

        shown = run("order", "show", "--id", "1")
        assert "Nimal Perera" in shown.output
        assert "status=placed" in shown.output

        listed = run("order", "list", "--search", "nimal")
        assert "Nimal Perera" in listed.output

    def test_public_quantity_ceiling(self, run):
        run("product", "seed")
        result = _create(run, quantity="150")
        assert result.exit_code != 0
        assert "Valid quantity is required (1-100)" in result.output

    def test_status_and_delete(self, run):
        run("product", "seed")
        _create(run)
        result = run("order", "status", "--id", "1", "--status", "received")
        assert "updated to received" in result.output

        result = run("order", "delete", "--id", "1", "--yes")
        assert result.exit_code == 0
        assert "not found" in run("order", "show", "--id", "1").output

    def test_invalid_status(self, run):
        run("product", "seed")
        _create(run)
        result = run("order", "status", "--id", "1", "--status", "lost")
        assert result.exit_code != 0
        assert "Invalid status 'lost'" in result.output


class TestCourierCommands:

    def test_courier_flow(self, run):
        run("product", "seed")
        _create(run)
        _create(run, customer="Kasun Silva")
        run("order", "send", "--id", "1")
        run("order", "send", "--id", "2")

        result = run("courier", "advance", "--id", "1", "--status", "in-transit")
        assert "now in-transit" in result.output

        result = run("courier", "bulk", "--ids", "1,2,9", "--status", "delivered")
        assert result.exit_code == 0
        assert "Updated 2 orders, 1 failed" in result.output

        result = run("courier", "next", "--id", "1")
        assert "No further courier updates possible." in result.output

        stats = run("courier", "stats")
        assert "Delivered:        2" in stats.output

    def test_rejected_transition(self, run):
        run("product", "seed")
        _create(run)
        result = run("courier", "advance", "--id", "1", "--status", "delivered")
        assert result.exit_code != 0
        assert "Invalid status transition from placed to delivered" in result.output


class TestReportCommands:

    def test_dashboard_and_analytics(self, run):
        run("product", "seed")
        _create(run)
        _create(run, quantity="2")

        stats = run("dashboard", "stats")
        assert "Total orders:  2" in stats.output
        assert "Total revenue: 30,000.00" in stats.output

        top = run("analytics", "top-products")
        assert "PROD001" in top.output

        assert run("analytics", "revenue", "--period", "daily").exit_code == 0
        assert run("analytics", "revenue", "--period", "weekly").exit_code != 0

    def test_product_performance(self, run):
        run("product", "seed")
        _create(run)

        result = run("analytics", "products")
        assert result.exit_code == 0, result.output
        rows = [line for line in result.output.splitlines() if "PROD00" in line]
        assert "PROD001" in rows[0] and "orders    1" in rows[0]
        assert "PROD002" in rows[1] and "orders    0" in rows[1]

        result = run("analytics", "products", "--from", "2020-01-01")
        assert result.exit_code != 0
        assert "both a start and an end date" in result.output

    def test_unusable_data_dir_degrades(self, run, tmp_path, monkeypatch):
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        monkeypatch.setenv("ORDERDESK_DATA_DIR", str(blocker / "data"))
        get_settings.cache_clear()

        result = run("dashboard", "stats")
        assert result.exit_code == 0
        assert "order store unavailable" in result.output
        assert "Total orders:  0" in result.output
