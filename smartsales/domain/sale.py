"""Sale records produced by checkout."""
from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple

from smartsales.domain.product import Customer, Product, to_money


@dataclass(frozen=True)
class SaleLine:
    """A product, a quantity and the unit price captured at checkout."""
    product: Product
    quantity: int
    unit_price: Decimal

    def __post_init__(self):
        object.__setattr__(self, 'unit_price', to_money(self.unit_price))

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def to_dict(self) -> dict:
        return {
            'product_id': self.product.id,
            'product_name': self.product.name,
            'quantity': self.quantity,
            'unit_price': str(self.unit_price),
            'line_total': str(self.line_total),
        }


@dataclass(frozen=True)
class Sale:
    """
    A customer plus an ordered collection of priced lines.

    ``id`` is 0 until the sale store assigns one. Stores return a new Sale
    carrying the generated id and timestamp; the unsaved value is left as is.
    The total is always derived from the lines.
    """
    customer: Optional[Customer]
    lines: Tuple[SaleLine, ...] = ()
    id: int = 0
    created_at: Optional[datetime] = None

    def add_line(self, product: Product, quantity: int, unit_price) -> 'Sale':
        return replace(self, lines=self.lines + (SaleLine(product, quantity, unit_price),))

    @property
    def total(self) -> Decimal:
        return sum((line.line_total for line in self.lines), Decimal('0.00'))

    @property
    def is_persisted(self) -> bool:
        return self.id > 0

    def persisted_as(self, sale_id: int, created_at: datetime) -> 'Sale':
        return replace(self, id=sale_id, created_at=created_at)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'customer': self.customer.to_dict() if self.customer else None,
            'lines': [line.to_dict() for line in self.lines],
            'total': str(self.total),
        }


@dataclass(frozen=True)
class SaleSummary:
    """Lightweight report view of one persisted sale."""
    sale_id: int
    created_at: Optional[datetime]
    customer_name: str
    customer_email: str
    total: Decimal = field(default=Decimal('0.00'))

    def __post_init__(self):
        object.__setattr__(self, 'total', to_money(self.total))

    def to_dict(self) -> dict:
        return {
            'sale_id': self.sale_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'customer_name': self.customer_name,
            'customer_email': self.customer_email,
            'total': str(self.total),
        }
