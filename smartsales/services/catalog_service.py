"""Catalog helpers shared by the API and the CLI."""
from decimal import Decimal, InvalidOperation
from typing import List

from smartsales.domain import Product
from smartsales.exceptions import ClientPreconditionError, ProductMissingError


def search_products(catalog, term: str) -> List[Product]:
    term = (term or '').strip()
    if not term:
        raise ClientPreconditionError('Search term cannot be empty')
    # Same length cap as the POS search box
    return catalog.search(term[:100])


def get_product_or_error(catalog, product_id: int) -> Product:
    product = catalog.find_by_id(product_id)
    if product is None:
        raise ProductMissingError(product_id)
    return product


def parse_quantity(raw) -> int:
    """Parse a user-supplied quantity into a positive int."""
    try:
        qty = int(str(raw).strip())
    except (TypeError, ValueError):
        raise ClientPreconditionError('Enter a valid quantity')
    if qty <= 0:
        raise ClientPreconditionError('Quantity must be greater than 0')
    return qty


def create_product(catalog, name: str, manufacturer: str, price, quantity_in_stock) -> Product:
    """Validate raw input and add a new product to the catalog."""
    name = (name or '').strip()
    manufacturer = (manufacturer or '').strip()
    if not name:
        raise ClientPreconditionError('Product name is required')

    try:
        price = Decimal(str(price))
    except (InvalidOperation, ValueError, TypeError):
        raise ClientPreconditionError('Price must be a number')
    if not price.is_finite():
        raise ClientPreconditionError('Price must be a number')
    if price < 0:
        raise ClientPreconditionError('Price cannot be negative')

    try:
        stock = int(quantity_in_stock)
    except (TypeError, ValueError):
        raise ClientPreconditionError('Stock must be a whole number')
    if stock < 0:
        raise ClientPreconditionError('Stock cannot be negative')

    return catalog.add(Product(id=0, name=name, manufacturer=manufacturer, price=price,
                               quantity_in_stock=stock))
