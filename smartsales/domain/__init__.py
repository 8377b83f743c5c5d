"""Domain values shared by the stores, services and blueprints."""
from smartsales.domain.product import Product, Customer, to_money
from smartsales.domain.cart import CartItem, ShoppingCart
from smartsales.domain.sale import Sale, SaleLine, SaleSummary

__all__ = [
    'Product', 'Customer', 'to_money',
    'CartItem', 'ShoppingCart',
    'Sale', 'SaleLine', 'SaleSummary',
]
