"""
Checkout service: turns a cart and a persisted customer into a durable sale.

Phases, in order:

1. validate every cart line against freshly read stock (full pass),
2. build the Sale, re-reading each product to capture its current price,
3. hand the Sale to the sale store, which writes header and lines as one unit,
4. apply the stock decrements.

With ``atomic_stock`` (the default) phase 4 happens inside the sale store's
transaction as a conditional decrement, so two checkouts cannot both take the
last units. Without it, the decrements are separate writes after commit and a
failure there leaves the sale committed and is reported as a warning.
"""
import logging
from dataclasses import dataclass, field
from typing import List

from smartsales.domain import Customer, Sale, ShoppingCart
from smartsales.exceptions import (
    ClientPreconditionError, InsufficientStockError, InventoryApplyError,
    ProductMissingError, SmartSalesError,
)

logger = logging.getLogger(__name__)


@dataclass
class CheckoutResult:
    """The persisted sale plus any post-commit inventory problems."""
    sale: Sale
    inventory_warnings: List[InventoryApplyError] = field(default_factory=list)

    @property
    def fully_applied(self) -> bool:
        return not self.inventory_warnings

    def to_dict(self) -> dict:
        return {
            'sale': self.sale.to_dict(),
            'inventory_warnings': [w.to_dict() for w in self.inventory_warnings],
        }


def checkout(cart: ShoppingCart, customer: Customer, catalog, sales,
             atomic_stock: bool = True) -> CheckoutResult:
    """
    Check out ``cart`` for ``customer``.

    Raises:
        ClientPreconditionError: empty cart or customer without a persisted id
        ProductMissingError: a cart product is no longer in the catalog
        InsufficientStockError: a line asks for more than is in stock
        PersistenceError: the sale could not be written; the cart is kept

    The cart is cleared only once the sale has been committed.
    """
    if cart is None or cart.is_empty():
        raise ClientPreconditionError('Cart is empty')
    if customer is None or customer.id <= 0:
        raise ClientPreconditionError('A persisted customer is required for checkout')

    items = cart.get_items()
    logger.info(f"Checkout started: customer={customer.id} lines={len(items)}")

    try:
        _validate_stock(items, catalog)
        sale = _build_sale(items, customer, catalog)
        saved = sales.save(sale, reserve_stock=atomic_stock)
    except SmartSalesError as e:
        logger.warning(f"Checkout aborted for customer {customer.id}: {e.message}")
        raise

    warnings = [] if atomic_stock else _apply_inventory(saved, catalog)

    cart.clear()
    logger.info(f"Checkout completed for sale id {saved.id} total {saved.total}")
    return CheckoutResult(sale=saved, inventory_warnings=warnings)


def _validate_stock(items, catalog) -> None:
    """Phase 1: every line is checked before anything is built or written."""
    for item in items:
        fresh = catalog.find_by_id(item.product_id)
        if fresh is None:
            raise ProductMissingError(item.product_id)
        if item.quantity > fresh.quantity_in_stock:
            raise InsufficientStockError(
                fresh.id, fresh.name, item.quantity, fresh.quantity_in_stock
            )


def _build_sale(items, customer: Customer, catalog) -> Sale:
    """Phase 2: capture the price each product has right now."""
    sale = Sale(customer=customer)
    for item in items:
        fresh = catalog.find_by_id(item.product_id)
        if fresh is None:
            raise ProductMissingError(item.product_id)
        sale = sale.add_line(fresh, item.quantity, fresh.price)
    return sale


def _apply_inventory(sale: Sale, catalog) -> List[InventoryApplyError]:
    """Phase 4 (non-atomic mode): decrement stock after the sale is committed."""
    warnings = []
    for line in sale.lines:
        product_id = line.product.id
        try:
            current = catalog.find_by_id(product_id)
            if current is None:
                raise ProductMissingError(product_id)
            catalog.update_quantity(product_id, current.quantity_in_stock - line.quantity)
        except Exception as e:
            warning = InventoryApplyError(
                product_id,
                f"Sale {sale.id}: could not decrement stock for product {product_id}: {e}",
            )
            logger.warning(warning.message)
            warnings.append(warning)
    return warnings
