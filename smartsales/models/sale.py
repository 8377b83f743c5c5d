"""Sale model."""
from sqlalchemy import Column, BigInteger, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from smartsales.database import Base


class Sale(Base):
    """Sale header. The total is derived from its lines and never stored."""

    __tablename__ = 'sale'

    id = Column(BigInteger().with_variant(Integer(), 'sqlite'), primary_key=True, autoincrement=True)
    customer_id = Column(ForeignKey('customer.id'), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    customer = relationship('Customer', back_populates='sales')
    lines = relationship('SaleLine', back_populates='sale', cascade='all, delete-orphan',
                         order_by='SaleLine.id')

    def __repr__(self):
        return f"<Sale(id={self.id}, customer_id={self.customer_id})>"
