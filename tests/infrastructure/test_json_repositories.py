"""Tests for the JSON-file repositories, against a temporary directory."""

import json
import threading
from datetime import datetime, timezone

import pytest

from storefront.domain.exceptions import ConcurrencyError, ValidationError
from storefront.domain.model.action_log import Action, ActionLog
from storefront.domain.model.status import OrderStatus
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.paging import PageRequest
from storefront.infrastructure.persistence.json_action_log_repository import (
    JsonActionLogRepository,
)
from storefront.infrastructure.persistence.json_address_book import JsonAddressBook
from storefront.infrastructure.persistence.json_cart_repository import JsonCartRepository
from storefront.infrastructure.persistence.json_order_repository import JsonOrderRepository
from storefront.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)
from tests.builders import HOME, make_line, make_order, make_product


class TestJsonOrderRepository:

    def test_creates_missing_file(self, tmp_path):
        path = tmp_path / "nested" / "orders.json"
        JsonOrderRepository(path)
        assert json.loads(path.read_text()) == []

    def test_save_and_reload(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        order = make_order(
            make_line("p1", price="70.00", qty=2), make_line("p2", price="12.50")
        )
        repo.save(order)

        loaded = repo.get_by_id(order.id)
        assert loaded.id == "1"
        assert loaded.version == 1
        assert loaded.tracking_number == "SHP0000ABCD"
        assert loaded.shipping_address == HOME
        assert loaded.subtotal == Money.of("152.50")
        assert loaded.tax == order.tax
        assert loaded.total == order.total
        assert loaded.order_datetime == order.order_datetime
        assert loaded.delivery_date == order.delivery_date
        assert loaded.items[0].quantity.value == 2
        assert loaded.items[1].track.notes == "Order placed"

    def test_ids_increase(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        first, second = make_order(tracking="SHP00000001"), make_order(tracking="SHP00000002")
        repo.save(first)
        repo.save(second)
        assert (first.id, second.id) == ("1", "2")
        assert JsonOrderRepository(tmp_path / "orders.json").get_by_id("2") is not None

    def test_duplicate_tracking_number_rejected(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        repo.save(make_order(tracking="SHP00000001"))
        assert repo.tracking_number_exists("SHP00000001")
        with pytest.raises(ValidationError, match="already in use"):
            repo.save(make_order(tracking="SHP00000001"))

    def test_update_bumps_version(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        repo.save(make_order())
        order = repo.get_by_id("1")
        order.update_status(OrderStatus.SHIPPED)
        repo.save(order)

        reloaded = repo.get_by_id("1")
        assert reloaded.version == 2
        assert reloaded.status is OrderStatus.SHIPPED
        assert reloaded.items[0].track.status is OrderStatus.SHIPPED

    def test_stale_update_rejected(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        repo.save(make_order())
        first, second = repo.get_by_id("1"), repo.get_by_id("1")

        first.update_status(OrderStatus.PAID)
        repo.save(first)
        second.update_status(OrderStatus.RETURNED)
        with pytest.raises(ConcurrencyError):
            repo.save(second)
        assert repo.get_by_id("1").status is OrderStatus.PAID

    def test_concurrent_saves_through_separate_instances(self, tmp_path):
        path = tmp_path / "orders.json"
        JsonOrderRepository(path).save(make_order())
        repos = [JsonOrderRepository(path), JsonOrderRepository(path)]
        copies = [repo.get_by_id("1") for repo in repos]
        copies[0].update_status(OrderStatus.PAID)
        copies[1].update_status(OrderStatus.SHIPPED)

        start = threading.Barrier(2)
        errors = []

        def save(repo, order):
            start.wait()
            try:
                repo.save(order)
            except ConcurrencyError as exc:
                errors.append(exc)

        threads = [
            threading.Thread(target=save, args=(repo, order))
            for repo, order in zip(repos, copies)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)

        assert len(errors) == 1
        stored = JsonOrderRepository(path).get_by_id("1")
        assert stored.version == 2
        assert stored.status in (OrderStatus.PAID, OrderStatus.SHIPPED)

    def test_save_waits_for_lock_held_by_another_instance(self, tmp_path):
        path = tmp_path / "orders.json"
        holder, writer = JsonOrderRepository(path), JsonOrderRepository(path)
        saver = threading.Thread(target=writer.save, args=(make_order(),))

        with holder._file.locked():
            saver.start()
            saver.join(timeout=0.2)
            assert saver.is_alive()
            assert holder.get_by_id("1") is None

        saver.join(timeout=5)
        assert not saver.is_alive()
        assert holder.get_by_id("1").version == 1

    def test_persist_leaves_no_temporary_files(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        repo.save(make_order())
        assert sorted(p.name for p in tmp_path.iterdir() if not p.name.endswith(".lock")) == [
            "orders.json"
        ]

    def test_lookup_by_tracking_number(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        repo.save(make_order(tracking="SHP00000001"))
        assert repo.get_by_tracking_number("SHP00000001").id == "1"
        assert repo.get_by_tracking_number("SHP99999999") is None

    def test_listings(self, tmp_path):
        repo = JsonOrderRepository(tmp_path / "orders.json")
        repo.save(make_order(make_line(merchant_id="m1"), customer_id="alice",
                             tracking="SHP00000001"))
        repo.save(make_order(make_line(merchant_id="m2"), customer_id="bob",
                             tracking="SHP00000002"))

        assert repo.find_by_customer("bob", PageRequest()).total_items == 1
        assert repo.find_by_merchant("m1", PageRequest()).items[0].customer_id == "alice"
        assert repo.find_by_status(OrderStatus.NEW, PageRequest()).total_items == 2
        assert repo.search("00000002", PageRequest()).items[0].customer_id == "bob"

        window = repo.find_by_date_range(
            datetime(2000, 1, 1, tzinfo=timezone.utc),
            datetime(2100, 1, 1, tzinfo=timezone.utc),
            PageRequest(size=1),
        )
        assert window.total_items == 2
        assert len(window.items) == 1


class TestJsonProductRepository:

    def test_round_trip_with_discount(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        repo.save(make_product("p1", price="50.00", discount="45.00",
                               variants=[("Red", "M", 3), ("Blue", "L", 0)]))
        product = repo.get_by_id("p1")
        assert product.selling_price == Money.of("45.00")
        assert [v.stock_quantity for v in product.variants] == [3, 0]

    def test_save_replaces_existing(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        repo.save(make_product("p1"))
        product = repo.get_by_id("p1")
        product.find_variant("Red", "M").decrement(4)
        repo.save(product)

        assert repo.get_by_id("p1").find_variant("Red", "M").stock_quantity == 6
        assert len(json.loads((tmp_path / "products.json").read_text())) == 1

    def test_missing_product(self, tmp_path):
        assert JsonProductRepository(tmp_path / "products.json").get_by_id("x") is None


class TestJsonCartAndAddresses:

    def test_cart_lines_per_customer(self, tmp_path):
        path = tmp_path / "carts.json"
        path.write_text(json.dumps([
            {"customer_id": "alice", "product_id": "p1", "color": "Red", "size": "M", "quantity": 2},
            {"customer_id": "bob", "product_id": "p2", "color": "Blue", "size": "L", "quantity": 1},
        ]))
        repo = JsonCartRepository(path)

        assert [i.product_id for i in repo.list_items("alice")] == ["p1"]
        repo.clear("alice")
        assert repo.list_items("alice") == []
        assert len(repo.list_items("bob")) == 1

    def test_address_belongs_to_customer(self, tmp_path):
        path = tmp_path / "addresses.json"
        path.write_text(json.dumps([
            {"customer_id": "alice", "address_id": "home", "address_line1": "12 Elm Street",
             "city": "Springfield", "country": "US"},
        ]))
        book = JsonAddressBook(path)

        address = book.get_address("alice", "home")
        assert address.city == "Springfield"
        assert address.address_line2 == ""
        assert book.get_address("bob", "home") is None


class TestJsonActionLogRepository:

    def test_add_and_list(self, tmp_path):
        repo = JsonActionLogRepository(tmp_path / "action_logs.json")
        repo.add(ActionLog("alice", Action.CREATE, "Order", "SHP00000001", "Created",
                           timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc)))
        repo.add(ActionLog("alice", Action.CANCEL, "Order", "1", "Cancelled",
                           timestamp=datetime(2024, 1, 2, tzinfo=timezone.utc)))
        repo.add(ActionLog("bob", Action.UPDATE, "Order", "2", "Updated"))

        assert [e.action for e in repo.list_by_user("alice")] == [Action.CANCEL, Action.CREATE]
        assert len(repo.list_by_resource("Order")) == 3
