"""
In-memory stores.

Each store keeps its own id counter, so two stores never share ids and a new
store always starts from 1. Used by the test suite and by
``STORE_BACKEND=memory``.
"""
import itertools
import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import Dict, List, Optional

from smartsales.domain import Customer, Product, Sale, SaleSummary
from smartsales.exceptions import InsufficientStockError, ProductMissingError
from smartsales.repositories.base import (
    check_limit, check_new_price, check_new_quantity, check_sale_preconditions,
)

logger = logging.getLogger(__name__)


class InMemoryProductCatalog:
    """Product catalog backed by a dict of immutable Product values."""

    def __init__(self, products=None):
        self._products: Dict[int, Product] = {}
        self._ids = itertools.count(1)
        self.lock = threading.RLock()
        for product in products or []:
            self.add(product)

    def add(self, product: Product) -> Product:
        check_new_price(product.price)
        check_new_quantity(product.quantity_in_stock)
        with self.lock:
            if product.id <= 0:
                product = replace(product, id=self._next_free_id())
            self._products[product.id] = product
            return product

    def _next_free_id(self) -> int:
        for candidate in self._ids:
            if candidate not in self._products:
                return candidate

    def find_by_id(self, product_id: int) -> Optional[Product]:
        with self.lock:
            return self._products.get(product_id)

    def find_all(self) -> List[Product]:
        with self.lock:
            return sorted(self._products.values(), key=lambda p: p.id)

    def search(self, term: str) -> List[Product]:
        t = term.lower()
        return [
            p for p in self.find_all()
            if t in p.name.lower() or t in p.manufacturer.lower()
        ]

    def update_quantity(self, product_id: int, new_qty: int) -> None:
        check_new_quantity(new_qty)
        with self.lock:
            product = self._products.get(product_id)
            if product is None:
                raise ProductMissingError(product_id)
            self._products[product_id] = replace(product, quantity_in_stock=new_qty)


class InMemoryCustomerStore:
    """Customer store keyed by id with a case-insensitive email index."""

    def __init__(self):
        self._customers: Dict[int, Customer] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def find_by_id(self, customer_id: int) -> Optional[Customer]:
        with self._lock:
            return self._customers.get(customer_id)

    def find_by_email(self, email: str) -> Optional[Customer]:
        key = email.lower()
        with self._lock:
            for customer in self._customers.values():
                if customer.email.lower() == key:
                    return customer
        return None

    def find_all(self) -> List[Customer]:
        with self._lock:
            return sorted(self._customers.values(), key=lambda c: (c.name, c.id))

    def create_or_get_by_email(self, name: str, email: str) -> Customer:
        with self._lock:
            key = email.lower()
            for existing in self._customers.values():
                if existing.email.lower() == key:
                    return existing
            customer = Customer(name=name, email=email, id=next(self._ids))
            self._customers[customer.id] = customer
            logger.info(f"Customer created: id={customer.id} email={email}")
            return customer


class InMemorySaleStore:
    """
    Sale store whose ``save`` applies header, lines and (optionally) stock
    reservation while holding the catalog lock, so nothing is visible until
    every check has passed. Reads take the same lock.

    Only the customer's id is checked, not that the customer store knows
    it. The SQL store also enforces the ``sale.customer_id`` foreign key and
    fails such a save with PersistenceError.
    """

    def __init__(self, catalog: InMemoryProductCatalog):
        self._catalog = catalog
        self._sales: Dict[int, Sale] = {}
        self._ids = itertools.count(1)

    def save(self, sale: Sale, reserve_stock: bool = False) -> Sale:
        check_sale_preconditions(sale)

        with self._catalog.lock:
            new_levels = {}
            if reserve_stock:
                for line in sale.lines:
                    current = self._catalog.find_by_id(line.product.id)
                    if current is None:
                        raise ProductMissingError(line.product.id)
                    if current.quantity_in_stock < line.quantity:
                        raise InsufficientStockError(
                            current.id, current.name, line.quantity, current.quantity_in_stock
                        )
                    new_levels[current.id] = current.quantity_in_stock - line.quantity

            saved = sale.persisted_as(next(self._ids), datetime.now())
            self._sales[saved.id] = saved
            for product_id, qty in new_levels.items():
                self._catalog.update_quantity(product_id, qty)

        logger.debug(f"Sale {saved.id} stored in memory with {len(saved.lines)} lines")
        return saved

    def find_by_id(self, sale_id: int) -> Optional[Sale]:
        with self._catalog.lock:
            return self._sales.get(sale_id)

    def recent_summaries(self, limit: int) -> List[SaleSummary]:
        check_limit(limit)
        with self._catalog.lock:
            snapshot = list(self._sales.values())
        ordered = sorted(snapshot, key=lambda s: (s.created_at, s.id), reverse=True)
        return [
            SaleSummary(
                sale_id=s.id,
                created_at=s.created_at,
                customer_name=s.customer.name,
                customer_email=s.customer.email,
                total=s.total,
            )
            for s in ordered[:limit]
        ]
