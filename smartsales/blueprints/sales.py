"""Sales blueprint for POS cart management and checkout."""
from flask import Blueprint, request, session, jsonify, current_app, Response
from typing import Tuple

from smartsales.domain import ShoppingCart
from smartsales.exceptions import ClientPreconditionError, SaleNotFoundError
from smartsales.repositories import get_stores
from smartsales.services.catalog_service import get_product_or_error, parse_quantity
from smartsales.services.checkout_service import checkout
from smartsales.services.customer_service import get_customer_or_error

sales_bp = Blueprint('sales', __name__, url_prefix='/sales')

CART_SESSION_KEY = 'cart'


def get_cart() -> ShoppingCart:
    """Get cart from session."""
    return ShoppingCart.from_dict(session.get(CART_SESSION_KEY))


def save_cart(cart: ShoppingCart) -> None:
    """Save cart to session (Decimals are stored as strings)."""
    session[CART_SESSION_KEY] = cart.to_dict()
    session.modified = True


def _cart_payload(cart: ShoppingCart) -> dict:
    return {
        'items': [
            {
                'product': item.product.to_dict(),
                'qty': item.quantity,
                'subtotal': str(item.line_total),
            }
            for item in cart.get_items()
        ],
        'total': str(cart.get_total()),
    }


def _get_payload() -> dict:
    if request.is_json:
        return request.get_json(silent=True) or {}
    return request.form.to_dict()


@sales_bp.route('/cart', methods=['GET'])
def view_cart() -> Response:
    """Cart contents with the estimated total."""
    return jsonify(_cart_payload(get_cart()))


@sales_bp.route('/cart/items', methods=['POST'])
def cart_add() -> Tuple[Response, int]:
    """Add product to cart."""
    payload = _get_payload()
    stores = get_stores()

    product_id_raw = payload.get('product_id')
    if product_id_raw in (None, ''):
        raise ClientPreconditionError('Missing product id')
    try:
        product_id = int(product_id_raw)
    except (TypeError, ValueError):
        raise ClientPreconditionError('Invalid product id')
    qty = parse_quantity(payload.get('qty', 1))

    product = get_product_or_error(stores.catalog, product_id)

    cart = get_cart()
    already = next((i.quantity for i in cart.get_items() if i.product_id == product_id), 0)
    if already + qty > product.quantity_in_stock:
        raise ClientPreconditionError(
            f'Invalid quantity for "{product.name}". Available: {product.quantity_in_stock}',
            payload={'available': product.quantity_in_stock},
        )

    cart.add_item(product, qty)
    save_cart(cart)

    current_app.logger.info(f"Added to cart: {qty} x {product.name} (id {product.id})")
    return jsonify(_cart_payload(cart)), 201


@sales_bp.route('/cart', methods=['DELETE'])
def cart_clear() -> Response:
    cart = get_cart()
    cart.clear()
    save_cart(cart)
    return jsonify(_cart_payload(cart))


@sales_bp.route('/checkout', methods=['POST'])
def checkout_cart() -> Tuple[Response, int]:
    """
    Check out the session cart for the selected customer.

    On any failure the session cart is left as it was so the cashier can
    retry; it is emptied only after the sale is committed.
    """
    payload = _get_payload()
    stores = get_stores()

    cart = get_cart()
    if cart.is_empty():
        raise ClientPreconditionError('Cart empty.')
    customer = get_customer_or_error(stores.customers, payload.get('customer_id'))

    result = checkout(
        cart,
        customer,
        stores.catalog,
        stores.sales,
        atomic_stock=current_app.config.get('ATOMIC_STOCK_DECREMENT', True),
    )
    save_cart(cart)

    for warning in result.inventory_warnings:
        current_app.logger.warning(f"Inventory not fully applied: {warning.message}")

    return jsonify(result.to_dict()), 201


@sales_bp.route('/<int:sale_id>', methods=['GET'])
def sale_detail(sale_id: int) -> Response:
    """Reload a persisted sale with its lines."""
    sale = get_stores().sales.find_by_id(sale_id)
    if sale is None:
        raise SaleNotFoundError(sale_id)
    return jsonify(sale.to_dict())
