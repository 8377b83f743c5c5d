"""Sale Line model."""
from sqlalchemy import Column, BigInteger, Integer, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from smartsales.database import Base


class SaleLine(Base):
    """Sale Line (one product of a sale at its captured price)."""

    __tablename__ = 'sale_line'
    __table_args__ = (
        CheckConstraint('qty > 0', name='ck_sale_line_qty_positive'),
        CheckConstraint('unit_price >= 0', name='ck_sale_line_price_non_negative'),
    )

    id = Column(BigInteger().with_variant(Integer(), 'sqlite'), primary_key=True, autoincrement=True)
    sale_id = Column(ForeignKey('sale.id'), nullable=False, index=True)
    product_id = Column(ForeignKey('product.id'), nullable=False)
    qty = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)

    # Relationships
    sale = relationship('Sale', back_populates='lines')
    product = relationship('Product')

    def __repr__(self):
        return f"<SaleLine(id={self.id}, product_id={self.product_id}, qty={self.qty})>"
