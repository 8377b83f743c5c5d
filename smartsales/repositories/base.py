"""
Store capabilities used by the checkout core.

Backends implement these structurally; nothing inherits from them. The
in-memory backend lives in :mod:`smartsales.repositories.memory`, the
SQLAlchemy backend in :mod:`smartsales.repositories.sql`.
"""
from typing import List, Optional, Protocol

from smartsales.domain import Customer, Product, Sale, SaleSummary
from smartsales.exceptions import ClientPreconditionError


class ProductCatalog(Protocol):
    def find_by_id(self, product_id: int) -> Optional[Product]: ...

    def find_all(self) -> List[Product]: ...

    def search(self, term: str) -> List[Product]: ...

    def update_quantity(self, product_id: int, new_qty: int) -> None: ...

    def add(self, product: Product) -> Product: ...


class CustomerStore(Protocol):
    def find_by_id(self, customer_id: int) -> Optional[Customer]: ...

    def find_by_email(self, email: str) -> Optional[Customer]: ...

    def find_all(self) -> List[Customer]: ...

    def create_or_get_by_email(self, name: str, email: str) -> Customer: ...


class SaleStore(Protocol):
    def save(self, sale: Sale, reserve_stock: bool = False) -> Sale:
        """
        Persist the sale header and all its lines as one unit.

        Not idempotent: two calls with the same content create two sales.
        With ``reserve_stock`` the store also decrements stock for every line
        inside the same transaction, failing the whole save if any line
        cannot be covered.
        """
        ...

    def find_by_id(self, sale_id: int) -> Optional[Sale]: ...

    def recent_summaries(self, limit: int) -> List[SaleSummary]: ...


def check_sale_preconditions(sale: Sale) -> None:
    """Reject a sale that must not reach storage. Performs no writes."""
    if sale.customer is None or sale.customer.id <= 0:
        raise ClientPreconditionError('Sale must have a valid customer with a persisted id')
    if not sale.lines:
        raise ClientPreconditionError('Cannot save a sale with no line items')
    for line in sale.lines:
        if line.product is None or line.product.id <= 0:
            raise ClientPreconditionError('Sale line must have a valid product with a persisted id')
        if line.quantity <= 0:
            raise ClientPreconditionError('Sale line quantity must be greater than 0')


def check_new_price(price) -> None:
    if not price.is_finite():
        raise ClientPreconditionError('Price must be a number')
    if price < 0:
        raise ClientPreconditionError(f'Price cannot be negative (got {price})')


def check_new_quantity(new_qty: int) -> None:
    if new_qty < 0:
        raise ClientPreconditionError(f'Stock cannot be negative (got {new_qty})')


def check_limit(limit: int) -> None:
    if limit <= 0:
        raise ClientPreconditionError('Limit must be greater than 0')
