"""
Checkout against the SQLAlchemy stores, in both stock modes.
"""

import pytest
from decimal import Decimal

from smartsales.domain import Customer
from smartsales.exceptions import InsufficientStockError, PersistenceError
from smartsales.models import Sale as SaleModel, SaleLine as SaleLineModel
from smartsales.services.checkout_service import checkout


@pytest.fixture(params=[True, False], ids=['atomic', 'reference'])
def atomic_stock(request):
    return request.param


def test_checkout_persists_sale_and_decrements_stock(session, sql_stores, sql_seeded, sql_customer,
                                                      cart, atomic_stock):
    mouse, hub = sql_seeded
    cart.add_item(mouse, 5)
    cart.add_item(hub, 2)

    result = checkout(cart, sql_customer, sql_stores.catalog, sql_stores.sales, atomic_stock=atomic_stock)

    assert result.sale.id > 0
    assert result.sale.total == Decimal('204.93')
    assert sql_stores.catalog.find_by_id(2).quantity_in_stock == 25
    assert sql_stores.catalog.find_by_id(3).quantity_in_stock == 18
    assert sql_stores.sales.find_by_id(result.sale.id).total == Decimal('204.93')
    assert session.query(SaleLineModel).filter_by(sale_id=result.sale.id).count() == 2
    assert cart.is_empty()


def test_insufficient_stock_writes_nothing(session, sql_stores, sql_seeded, sql_customer, cart, atomic_stock):
    mouse, _ = sql_seeded
    cart.add_item(mouse, 100)

    with pytest.raises(InsufficientStockError) as exc_info:
        checkout(cart, sql_customer, sql_stores.catalog, sql_stores.sales, atomic_stock=atomic_stock)

    assert (exc_info.value.requested, exc_info.value.available) == (100, 30)
    assert session.query(SaleModel).count() == 0
    assert sql_stores.catalog.find_by_id(2).quantity_in_stock == 30
    assert not cart.is_empty()


def test_stock_taken_between_validation_and_save_is_caught_in_atomic_mode(
        session, sql_stores, sql_seeded, sql_customer, cart):
    """Another terminal sells units after validation; the sale transaction refuses."""
    mouse, _ = sql_seeded
    cart.add_item(mouse, 20)

    class RacingCatalog:
        def __init__(self, inner):
            self.inner = inner
            self.reads = 0

        def find_by_id(self, product_id):
            self.reads += 1
            product = self.inner.find_by_id(product_id)
            if self.reads == 2:
                # after phase 1 passed, someone else sells 15 units
                self.inner.update_quantity(product_id, product.quantity_in_stock - 15)
            return product

        def update_quantity(self, product_id, new_qty):
            self.inner.update_quantity(product_id, new_qty)

    with pytest.raises(InsufficientStockError):
        checkout(cart, sql_customer, RacingCatalog(sql_stores.catalog), sql_stores.sales, atomic_stock=True)

    assert session.query(SaleModel).count() == 0
    assert sql_stores.catalog.find_by_id(2).quantity_in_stock == 15
    assert not cart.is_empty()


def test_persistence_failure_keeps_cart(session, sql_stores, sql_seeded, cart, atomic_stock):
    mouse, _ = sql_seeded
    cart.add_item(mouse, 1)
    stranger = Customer(name='Ghost', email='ghost@example.com', id=999)

    with pytest.raises(PersistenceError):
        checkout(cart, stranger, sql_stores.catalog, sql_stores.sales, atomic_stock=atomic_stock)

    assert session.query(SaleModel).count() == 0
    assert sql_stores.catalog.find_by_id(2).quantity_in_stock == 30
    assert len(cart) == 1
