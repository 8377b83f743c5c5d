"""Catalog and customer value objects."""
from dataclasses import dataclass
from decimal import Decimal

MONEY_PLACES = Decimal('0.01')


def to_money(value) -> Decimal:
    """Coerce a price-like value into a two-place Decimal.

    NaN and infinities are returned as-is for the caller to reject.
    """
    amount = Decimal(str(value))
    if not amount.is_finite():
        return amount
    return amount.quantize(MONEY_PLACES)


@dataclass(frozen=True)
class Product:
    """A catalog entry as seen at the moment it was read.

    Stock is changed only through the catalog (``update_quantity``); a Product
    value never changes after it has been handed out.
    """
    id: int
    name: str
    manufacturer: str
    price: Decimal
    quantity_in_stock: int

    def __post_init__(self):
        object.__setattr__(self, 'price', to_money(self.price))

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'manufacturer': self.manufacturer,
            'price': str(self.price),
            'quantity_in_stock': self.quantity_in_stock,
        }

    def __str__(self):
        return (
            f"Product[id={self.id}, name={self.name}, maker={self.manufacturer}, "
            f"price={self.price}, stock={self.quantity_in_stock}]"
        )


@dataclass(frozen=True)
class Customer:
    """Customer identity. ``id`` stays 0 until the customer store persists it."""
    name: str
    email: str
    id: int = 0

    @property
    def is_persisted(self) -> bool:
        return self.id > 0

    def to_dict(self) -> dict:
        return {'id': self.id, 'name': self.name, 'email': self.email}
