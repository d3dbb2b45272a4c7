"""Integration tests for the CreateOrder (checkout) use case.

Uses in-memory fake repositories — no file I/O.
"""

import re
import uuid

import pytest

from storefront.application.create_order import CreateOrderHandler
from storefront.domain.exceptions import (
    CartEmptyError,
    DomainException,
    EntityNotFoundError,
    ValidationError,
)
from storefront.domain.model.action_log import Action
from storefront.domain.model.cart import CartItem
from storefront.domain.model.order import PaymentMethod
from storefront.domain.model.status import OrderStatus
from storefront.domain.model.value_objects import Money
from storefront.domain.service.tracking_number import TrackingNumberGenerator
from tests.builders import HOME, assert_totals_consistent, make_product
from tests.fakes import (
    FakeActionLogRepository,
    FakeAddressBook,
    FakeCartRepository,
    FakeOrderRepository,
    FakeProductRepository,
)


def _cart(*lines: tuple[str, str, str, int], customer: str = "alice") -> FakeCartRepository:
    return FakeCartRepository(
        [CartItem(customer, pid, color, size, qty) for pid, color, size, qty in lines]
    )


class _Harness:

    def __init__(self, cart: FakeCartRepository, products=None, tracking_numbers=None):
        self.orders = FakeOrderRepository()
        self.cart = cart
        self.products = FakeProductRepository(
            products
            if products is not None
            else [
                make_product("p1", price="70.00", variants=[("Red", "M", 10)]),
                make_product("p2", price="50.00", discount="40.00", merchant_id="m2",
                             variants=[("Blue", "L", 3)]),
            ]
        )
        self.addresses = FakeAddressBook({"alice": [HOME]})
        self.actions = FakeActionLogRepository()
        self.handler = CreateOrderHandler(
            order_repo=self.orders,
            cart_repo=self.cart,
            product_repo=self.products,
            address_book=self.addresses,
            action_log_repo=self.actions,
            tracking_numbers=tracking_numbers,
        )

    def checkout(self, customer="alice", address="home", payment=PaymentMethod.CARD):
        return self.handler.handle(customer, address, payment)

    def stock(self, product_id, color, size) -> int:
        return self.products.get_by_id(product_id).find_variant(color, size).stock_quantity


class TestCreateOrderHappyPath:

    def test_builds_order_from_cart(self):
        h = _Harness(_cart(("p1", "Red", "M", 2), ("p2", "blue", "l", 1)))
        dto = h.checkout()

        assert dto.id == "1"
        assert dto.status == "NEW"
        assert dto.customer_id == "alice"
        assert dto.payment_method == "CARD"
        assert dto.shipping_address == HOME
        assert re.fullmatch(r"SHP[0-9A-F]{8}", dto.tracking_number)
        assert [i.product_id for i in dto.items] == ["p1", "p2"]
        assert dto.items[1].merchant_id == "m2"

    def test_totals(self):
        # 70 x 2 + 40 (discounted) = 180 -> free shipping
        h = _Harness(_cart(("p1", "Red", "M", 2), ("p2", "Blue", "L", 1)))
        h.checkout()
        order = h.orders.get_by_id("1")

        assert order.subtotal == Money.of("180.00")
        assert order.products_cost == Money.of("110.00")
        assert order.shipping_cost == Money.zero()
        assert order.tax == Money.of("14.40")
        assert order.total == Money.of("194.40")
        assert_totals_consistent(order)

    def test_scenario_two_lines_summing_to_120(self):
        products = [
            make_product("p1", price="80.00"),
            make_product("p2", price="40.00"),
        ]
        h = _Harness(_cart(("p1", "Red", "M", 1), ("p2", "Red", "M", 1)), products)
        dto = h.checkout()

        assert dto.subtotal == "$120.00"
        assert dto.shipping_cost == "$0.00"
        assert dto.tax == "$9.60"
        assert dto.total == "$129.60"

    def test_line_items_start_new_with_note(self):
        h = _Harness(_cart(("p1", "Red", "M", 1)))
        dto = h.checkout()
        track = dto.items[0].track
        assert track.status == "NEW"
        assert track.notes == "Order placed"

    def test_discount_price_snapshot(self):
        h = _Harness(_cart(("p2", "Blue", "L", 2)))
        dto = h.checkout()
        assert dto.items[0].unit_price == "$40.00"
        assert dto.items[0].subtotal == "$80.00"

    def test_zero_discount_falls_back_to_list_price(self):
        products = [make_product("p1", price="30.00", discount="0")]
        h = _Harness(_cart(("p1", "Red", "M", 1)), products)
        assert h.checkout().items[0].unit_price == "$30.00"

    def test_price_snapshot_survives_catalog_change(self):
        h = _Harness(_cart(("p1", "Red", "M", 1)))
        h.checkout()

        product = h.products.get_by_id("p1")
        product.price = Money.of("999.00")
        h.products.save(product)

        assert h.orders.get_by_id("1").items[0].price == Money.of("70.00")

    def test_decrements_stock(self):
        h = _Harness(_cart(("p1", "Red", "M", 4)))
        h.checkout()
        assert h.stock("p1", "Red", "M") == 6

    def test_clears_cart(self):
        h = _Harness(_cart(("p1", "Red", "M", 1)))
        h.checkout()
        assert h.cart.list_items("alice") == []

    def test_records_action(self):
        h = _Harness(_cart(("p1", "Red", "M", 1)))
        dto = h.checkout()
        [entry] = h.actions.entries
        assert entry.user_id == "alice"
        assert entry.action is Action.CREATE
        assert entry.resource_id == dto.tracking_number

    def test_persists_with_version(self):
        h = _Harness(_cart(("p1", "Red", "M", 1)))
        dto = h.checkout()
        saved = h.orders.get_by_id(dto.id)
        assert saved.version == 1
        assert saved.status is OrderStatus.NEW


class TestCreateOrderFailures:

    def test_empty_cart_rejected(self):
        h = _Harness(_cart())
        with pytest.raises(CartEmptyError, match="empty"):
            h.checkout()
        assert h.orders.get_by_id("1") is None
        assert h.actions.entries == []

    def test_unknown_address_rejected(self):
        h = _Harness(_cart(("p1", "Red", "M", 1)))
        with pytest.raises(EntityNotFoundError, match="Shipping address not found"):
            h.checkout(address="office")
        assert h.stock("p1", "Red", "M") == 10

    def test_quantity_above_stock_rejected(self):
        h = _Harness(_cart(("p2", "Blue", "L", 4)))
        with pytest.raises(ValidationError, match="Not enough stock"):
            h.checkout()
        assert h.stock("p2", "Blue", "L") == 3
        assert h.orders.get_by_id("1") is None
        assert len(h.cart.list_items("alice")) == 1

    def test_no_partial_decrement_across_products(self):
        h = _Harness(_cart(("p1", "Red", "M", 2), ("p2", "Blue", "L", 9)))
        with pytest.raises(ValidationError):
            h.checkout()
        assert h.stock("p1", "Red", "M") == 10

    def test_unknown_variant_rejected(self):
        h = _Harness(_cart(("p1", "Green", "M", 1)))
        with pytest.raises(ValidationError, match="No variant"):
            h.checkout()

    def test_unknown_product_rejected(self):
        h = _Harness(_cart(("nope", "Red", "M", 1)))
        with pytest.raises(EntityNotFoundError, match="Product not found"):
            h.checkout()


class TestTrackingNumbers:

    def test_collision_regenerated(self):
        ids = iter(
            [uuid.UUID(int=0xAAAAAAAA << 96)] * 2 + [uuid.UUID(int=0xBBBBBBBB << 96)]
        )
        generator = TrackingNumberGenerator(lambda: next(ids))
        h = _Harness(_cart(("p1", "Red", "M", 1)), tracking_numbers=generator)
        first = h.checkout()
        h.cart = _cart(("p1", "Red", "M", 1))
        h.handler._cart_repo = h.cart

        second = h.checkout()

        assert first.tracking_number == "SHPAAAAAAAA"
        assert second.tracking_number == "SHPBBBBBBBB"

    def test_gives_up_after_repeated_collisions(self):
        fixed = uuid.UUID(int=0xCCCCCCCC << 96)
        generator = TrackingNumberGenerator(lambda: fixed)
        h = _Harness(_cart(("p1", "Red", "M", 1)), tracking_numbers=generator)
        h.checkout()
        h.cart = _cart(("p1", "Red", "M", 1))
        h.handler._cart_repo = h.cart

        with pytest.raises(DomainException, match="unique tracking number"):
            h.checkout()
        assert h.stock("p1", "Red", "M") == 9
