"""Models package - exports all SQLAlchemy models."""
from smartsales.models.product import Product
from smartsales.models.product_stock import ProductStock
from smartsales.models.customer import Customer
from smartsales.models.sale import Sale
from smartsales.models.sale_line import SaleLine

__all__ = ['Product', 'ProductStock', 'Customer', 'Sale', 'SaleLine']
