"""End-to-end tests for the click command line against a temp data dir."""

import logging

import pytest
from click.testing import CliRunner

from supplyhub.infrastructure.cli.main import cli

STAFF = ["--user", "staff-1", "--role", "warehouse_staff"]
USER = ["--user", "u1", "--name", "Uma User", "--role", "internal_user"]
SUPPLIER = ["--user", "sup-1", "--name", "Acme Supply", "--role", "supplier"]


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def run(tmp_path, monkeypatch):
    monkeypatch.delenv("SUPPLYHUB_CONFIG", raising=False)
    monkeypatch.chdir(tmp_path)
    runner = CliRunner()
    env = {"SUPPLYHUB_DATA_DIR": str(tmp_path / "data")}

    def _run(*args):
        return runner.invoke(cli, list(args), env=env)

    return _run


def _published_widget(run):
    result = run(*STAFF, "inventory", "add", "--name", "Widget", "--quantity", "10",
                 "--price", "5.00", "--min-stock", "3")
    assert result.exit_code == 0, result.output
    assert "Item #1 'Widget' added with 10 units (in_stock)" in result.output
    assert run(*STAFF, "inventory", "curate", "1", "--description", "A widget").exit_code == 0
    assert run(*STAFF, "inventory", "publish", "1").exit_code == 0


class TestOrderFlow:

    def test_order_reserves_then_ships(self, run):
        _published_widget(run)

        result = run(*USER, "order", "create", "--items", "1:4")
        assert result.exit_code == 0, result.output
        assert "Order created, stock reserved." in result.output

        shown = run(*STAFF, "inventory", "show", "1")
        assert "On hand:   10  (reserved 4, available 6)" in shown.output

        assert "is now approved." in run(*STAFF, "order", "status", "1", "approved").output
        shown = run(*STAFF, "inventory", "show", "1")
        assert "On hand:   6  (reserved 0, available 6)" in shown.output

        assert "is now shipped." in run(*STAFF, "order", "status", "1", "shipped").output

    def test_domain_error_exits_non_zero(self, run):
        _published_widget(run)
        result = run(*USER, "order", "create", "--items", "1:11")
        assert result.exit_code == 1
        assert "Insufficient stock" in result.output

    def test_internal_user_cannot_change_status(self, run):
        _published_widget(run)
        run(*USER, "order", "create", "--items", "1:1")
        result = run(*USER, "order", "status", "1", "approved")
        assert result.exit_code == 1
        assert "Only admin or warehouse staff" in result.output

    def test_bad_items_format(self, run):
        result = run(*USER, "order", "create", "--items", "widget")
        assert result.exit_code == 2
        assert "Expected 'ItemID:Quantity'" in result.output


class TestInventoryCommands:

    def test_adjust_and_movements(self, run):
        _published_widget(run)
        result = run(*STAFF, "inventory", "adjust", "1", "--type", "out",
                     "--quantity", "8", "--reason", "Shrinkage")
        assert result.exit_code == 0, result.output
        assert "Item #1 now has 2 units (low_stock)" in result.output

        movements = run(*STAFF, "inventory", "movements", "--item", "1")
        assert "Shrinkage" in movements.output
        assert "Initial stock" in movements.output
        assert "Widget" in run(*STAFF, "inventory", "low-stock").output

    def test_delete_needs_confirmation(self, run):
        _published_widget(run)
        assert run(*STAFF, "inventory", "delete", "1").exit_code == 1
        result = run(*STAFF, "inventory", "delete", "1", "--yes")
        assert result.exit_code == 0, result.output
        assert "The catalog is empty." in run(*USER, "inventory", "catalog").output

    def test_update_thresholds(self, run):
        _published_widget(run)
        result = run(*STAFF, "inventory", "update", "1", "--min-stock", "12", "--location", "Bay 4")
        assert result.exit_code == 0, result.output
        assert "Item #1 'Widget' updated (low_stock)" in result.output

        shown = run(*STAFF, "inventory", "show", "1")
        assert "Location:  Bay 4" in shown.output
        assert "Levels:    min 12 / max 0" in shown.output

    def test_update_rejects_zero_price_on_published_item(self, run):
        _published_widget(run)
        result = run(*STAFF, "inventory", "update", "1", "--price", "0")
        assert result.exit_code == 1
        assert "needs a positive price" in result.output


class TestShipmentCommands:

    def test_create_track_and_deliver(self, run):
        result = run(*STAFF, "shipment", "create", "--type", "incoming", "--tracking", "1Z999",
                     "--items", "3", "--value", "120.00", "--supplier", "Acme",
                     "--eta", "2026-11-02")
        assert result.exit_code == 0, result.output
        assert "Shipment #1 (incoming) 1Z999 recorded as pending" in result.output

        result = run(*STAFF, "shipment", "status", "1", "in_transit")
        assert "Shipment #1 is now in_transit" in result.output

        listing = run(*STAFF, "shipment", "list", "--type", "incoming")
        assert "1Z999" in listing.output
        assert "2026-11-02 00:00 UTC" in listing.output
        assert "No shipments found." in run(*STAFF, "shipment", "list", "--type", "outgoing").output

        stats = run(*STAFF, "shipment", "stats")
        assert "Total shipments: 1" in stats.output
        assert "Total value:     $120.00" in stats.output

        run(*STAFF, "shipment", "status", "1", "delivered")
        result = run(*STAFF, "shipment", "status", "1", "cancelled")
        assert result.exit_code == 1
        assert "already delivered" in result.output

    def test_internal_user_cannot_record(self, run):
        result = run(*USER, "shipment", "create", "--type", "outgoing", "--tracking", "X-1")
        assert result.exit_code == 1
        assert "Only admin or warehouse staff" in result.output

    def test_delete_needs_confirmation(self, run):
        run(*STAFF, "shipment", "create", "--type", "outgoing", "--tracking", "X-1")
        assert run(*STAFF, "shipment", "delete", "1").exit_code == 1
        assert run(*STAFF, "shipment", "delete", "1", "--yes").exit_code == 0
        assert "No shipments found." in run(*STAFF, "shipment", "list").output


class TestSupplierFlow:

    def test_display_request_to_stock(self, run):
        result = run(*SUPPLIER, "product", "add", "--name", "Hex Bolt", "--price", "0.40")
        assert "Product P-1 'Hex Bolt' added at $0.40" in result.output

        result = run(*SUPPLIER, "display", "submit", "P-1")
        assert "Display request #1 submitted for Hex Bolt." in result.output

        result = run(*STAFF, "display", "review", "1", "--accept")
        assert result.exit_code == 0, result.output
        assert "quantity request #1 sent to the supplier" in result.output

        result = run(*SUPPLIER, "request", "respond", "1", "approved_full")
        assert result.exit_code == 0, result.output
        assert "Request #1 approved_full: 1 units added to inventory." in result.output

        listing = run(*STAFF, "inventory", "list")
        assert "Hex Bolt" in listing.output

    def test_other_supplier_cannot_respond(self, run):
        run(*SUPPLIER, "product", "add", "--name", "Hex Bolt", "--price", "0.40")
        run(*STAFF, "request", "create", "--product", "P-1", "--quantity", "10")
        result = run("--user", "sup-2", "--role", "supplier", "request", "respond", "1", "rejected",
                     "--reason", "No")
        assert result.exit_code == 1
        assert "Only the request's supplier or an admin" in result.output
