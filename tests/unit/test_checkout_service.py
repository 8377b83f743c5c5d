"""
Unit tests for the checkout service, run against the in-memory stores.
"""

import pytest
from dataclasses import replace
from decimal import Decimal

from smartsales.domain import Customer
from smartsales.exceptions import (
    ClientPreconditionError, InsufficientStockError, PersistenceError, ProductMissingError,
)
from smartsales.services.checkout_service import checkout


class RecordingSaleStore:
    """Wraps a sale store and remembers every save call."""

    def __init__(self, inner):
        self.inner = inner
        self.calls = []

    def save(self, sale, reserve_stock=False):
        self.calls.append(sale)
        return self.inner.save(sale, reserve_stock=reserve_stock)


class FailingSaleStore:
    def save(self, sale, reserve_stock=False):
        raise PersistenceError('disk full')


class FlakyCatalog:
    """Catalog whose update_quantity fails for one product id."""

    def __init__(self, inner, failing_id):
        self.inner = inner
        self.failing_id = failing_id

    def find_by_id(self, product_id):
        return self.inner.find_by_id(product_id)

    def update_quantity(self, product_id, new_qty):
        if product_id == self.failing_id:
            raise RuntimeError('connection reset')
        self.inner.update_quantity(product_id, new_qty)


@pytest.fixture(params=[True, False], ids=['atomic', 'reference'])
def atomic_stock(request):
    return request.param


class TestCheckoutPreconditions:

    def test_empty_cart_never_calls_persistence(self, stores, cart, customer):
        recorder = RecordingSaleStore(stores.sales)
        with pytest.raises(ClientPreconditionError):
            checkout(cart, customer, stores.catalog, recorder)
        assert recorder.calls == []

    def test_missing_customer_is_rejected(self, stores, seeded, cart):
        mouse, _ = seeded
        cart.add_item(mouse, 1)
        recorder = RecordingSaleStore(stores.sales)

        with pytest.raises(ClientPreconditionError):
            checkout(cart, None, stores.catalog, recorder)
        assert recorder.calls == []
        assert not cart.is_empty()

    def test_unsaved_customer_is_rejected(self, stores, seeded, cart, unsaved_customer):
        mouse, _ = seeded
        cart.add_item(mouse, 1)
        recorder = RecordingSaleStore(stores.sales)

        with pytest.raises(ClientPreconditionError):
            checkout(cart, unsaved_customer, stores.catalog, recorder)
        assert recorder.calls == []


class TestCheckoutSuccess:

    def test_scenario_two_products(self, stores, seeded, cart, atomic_stock):
        """Mouse x5 and hub x2 for customer 7: total 204.93, stock 25 and 18."""
        mouse, hub = seeded
        cart.add_item(mouse, 5)
        cart.add_item(hub, 2)
        customer = Customer(name='Grace', email='grace@example.com', id=7)

        result = checkout(cart, customer, stores.catalog, stores.sales, atomic_stock=atomic_stock)

        sale = result.sale
        assert sale.id > 0
        assert sale.total == Decimal('204.93')
        assert sale.total == sum(line.line_total for line in sale.lines)
        for line in sale.lines:
            assert line.line_total == line.unit_price * line.quantity
        assert stores.catalog.find_by_id(2).quantity_in_stock == 25
        assert stores.catalog.find_by_id(3).quantity_in_stock == 18
        assert result.fully_applied
        assert cart.is_empty()

    def test_captures_current_catalog_price(self, stores, seeded, cart, customer):
        """The cart snapshot price is only an estimate; the sale uses the catalog price."""
        mouse, _ = seeded
        cart.add_item(mouse, 2)
        stores.catalog.add(replace(mouse, price=Decimal('19.99')))

        result = checkout(cart, customer, stores.catalog, stores.sales)

        assert result.sale.lines[0].unit_price == Decimal('19.99')
        assert result.sale.total == Decimal('39.98')

    def test_validates_against_fresh_stock_not_cart_snapshot(self, stores, seeded, cart, customer):
        mouse, _ = seeded
        cart.add_item(mouse, 10)
        stores.catalog.update_quantity(2, 4)

        with pytest.raises(InsufficientStockError):
            checkout(cart, customer, stores.catalog, stores.sales)


class TestCheckoutFailures:

    def test_insufficient_stock_scenario(self, stores, seeded, cart, customer, atomic_stock):
        """qty=100 against stock 30 fails and leaves stock at 30."""
        mouse, _ = seeded
        cart.add_item(mouse, 100)
        recorder = RecordingSaleStore(stores.sales)

        with pytest.raises(InsufficientStockError) as exc_info:
            checkout(cart, customer, stores.catalog, recorder, atomic_stock=atomic_stock)

        assert exc_info.value.requested == 100
        assert exc_info.value.available == 30
        assert exc_info.value.product_id == 2
        assert recorder.calls == []
        assert stores.catalog.find_by_id(2).quantity_in_stock == 30
        assert not cart.is_empty()

    def test_later_line_failure_leaves_every_product_untouched(self, stores, seeded, cart, customer):
        mouse, hub = seeded
        cart.add_item(mouse, 5)
        cart.add_item(hub, 50)
        recorder = RecordingSaleStore(stores.sales)

        with pytest.raises(InsufficientStockError):
            checkout(cart, customer, stores.catalog, recorder)

        assert recorder.calls == []
        assert stores.catalog.find_by_id(2).quantity_in_stock == 30
        assert stores.catalog.find_by_id(3).quantity_in_stock == 20

    def test_missing_product(self, stores, seeded, cart, customer):
        mouse, _ = seeded
        ghost = replace(mouse, id=77)
        cart.add_item(ghost, 1)
        recorder = RecordingSaleStore(stores.sales)

        with pytest.raises(ProductMissingError):
            checkout(cart, customer, stores.catalog, recorder)
        assert recorder.calls == []

    def test_persistence_failure_keeps_cart_and_stock(self, stores, seeded, cart, customer, atomic_stock):
        mouse, _ = seeded
        cart.add_item(mouse, 3)

        with pytest.raises(PersistenceError):
            checkout(cart, customer, stores.catalog, FailingSaleStore(), atomic_stock=atomic_stock)

        assert len(cart) == 1
        assert cart.get_items()[0].quantity == 3
        assert stores.catalog.find_by_id(2).quantity_in_stock == 30


class TestInventoryApply:

    def test_apply_failure_is_a_warning_and_sale_stays(self, stores, seeded, cart, customer):
        mouse, hub = seeded
        cart.add_item(mouse, 5)
        cart.add_item(hub, 2)
        catalog = FlakyCatalog(stores.catalog, failing_id=3)

        result = checkout(cart, customer, catalog, stores.sales, atomic_stock=False)

        assert result.sale.id > 0
        assert stores.sales.find_by_id(result.sale.id) is not None
        assert not result.fully_applied
        assert [w.product_id for w in result.inventory_warnings] == [3]
        assert stores.catalog.find_by_id(2).quantity_in_stock == 25
        assert stores.catalog.find_by_id(3).quantity_in_stock == 20
        assert cart.is_empty()

    def test_reference_mode_rereads_stock_at_apply_time(self, stores, seeded, cart, customer):
        """Decrement is applied to the level read after commit."""
        mouse, _ = seeded
        cart.add_item(mouse, 5)

        class RestockingSales(RecordingSaleStore):
            def save(self, sale, reserve_stock=False):
                saved = super().save(sale, reserve_stock)
                stores.catalog.update_quantity(2, 40)
                return saved

        checkout(cart, customer, stores.catalog, RestockingSales(stores.sales), atomic_stock=False)

        assert stores.catalog.find_by_id(2).quantity_in_stock == 35
