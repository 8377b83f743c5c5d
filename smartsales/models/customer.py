"""Customer model."""
from sqlalchemy import Column, BigInteger, Integer, String, DateTime, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from smartsales.database import Base


class Customer(Base):
    """Customer (buyer identified by email)."""

    __tablename__ = 'customer'

    id = Column(BigInteger().with_variant(Integer(), 'sqlite'), primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    sales = relationship('Sale', back_populates='customer')

    def __repr__(self):
        return f"<Customer(id={self.id}, name='{self.name}', email='{self.email}')>"


# Emails are unique regardless of case
Index('uq_customer_email_lower', func.lower(Customer.email), unique=True)
