"""Shopping cart held for the duration of one POS session."""
from decimal import Decimal
from typing import List, Optional

from smartsales.domain.product import Product
from smartsales.exceptions import ClientPreconditionError


class CartItem:
    """One product snapshot plus the quantity the customer wants."""

    def __init__(self, product: Product, quantity: int):
        self.product = product
        self.quantity = quantity

    @property
    def product_id(self) -> int:
        return self.product.id

    def increment(self, amount: int) -> None:
        self.quantity += amount

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity

    def __repr__(self):
        return f"<CartItem(product_id={self.product.id}, qty={self.quantity})>"


class ShoppingCart:
    """
    Ordered collection of cart items, merged by product id.

    The cart keeps value snapshots of products. Its total is only an estimate
    for display; checkout re-reads authoritative stock and prices by id.
    """

    def __init__(self, items: Optional[List[CartItem]] = None):
        self._items: List[CartItem] = list(items or [])

    def add_item(self, product: Product, qty: int) -> CartItem:
        """Add ``qty`` units of ``product``, merging with an existing line."""
        if isinstance(qty, bool) or not isinstance(qty, int) or qty <= 0:
            raise ClientPreconditionError('Quantity must be a positive integer')

        for item in self._items:
            if item.product_id == product.id:
                item.increment(qty)
                return item

        item = CartItem(product, qty)
        self._items.append(item)
        return item

    def get_items(self) -> List[CartItem]:
        return list(self._items)

    items = property(get_items)

    def get_total(self) -> Decimal:
        return sum((item.line_total for item in self._items), Decimal('0.00'))

    def is_empty(self) -> bool:
        return not self._items

    def clear(self) -> None:
        self._items.clear()

    def __len__(self):
        return len(self._items)

    # Session (de)serialization: Decimals are stored as strings

    def to_dict(self) -> dict:
        return {
            'items': [
                {'product': item.product.to_dict(), 'qty': item.quantity}
                for item in self._items
            ]
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> 'ShoppingCart':
        cart = cls()
        for entry in (data or {}).get('items', []):
            raw = entry['product']
            product = Product(
                id=int(raw['id']),
                name=raw['name'],
                manufacturer=raw['manufacturer'],
                price=Decimal(str(raw['price'])),
                quantity_in_stock=int(raw['quantity_in_stock']),
            )
            cart.add_item(product, int(entry['qty']))
        return cart
