"""Catalog blueprint: product listing, search and creation."""
from flask import Blueprint, request, jsonify, Response
from typing import Tuple

from smartsales.repositories import get_stores
from smartsales.services.catalog_service import create_product, get_product_or_error, search_products

catalog_bp = Blueprint('catalog', __name__, url_prefix='/products')


@catalog_bp.route('/', methods=['GET'])
def list_products() -> Response:
    """List the inventory, or search it when ``q`` is given."""
    catalog = get_stores().catalog
    search_query = request.args.get('q')

    if search_query is not None:
        products = search_products(catalog, search_query)
    else:
        products = catalog.find_all()

    return jsonify({'products': [p.to_dict() for p in products]})


@catalog_bp.route('/<int:product_id>', methods=['GET'])
def product_detail(product_id: int) -> Response:
    product = get_product_or_error(get_stores().catalog, product_id)
    return jsonify(product.to_dict())


@catalog_bp.route('/', methods=['POST'])
def product_create() -> Tuple[Response, int]:
    payload = request.get_json(silent=True) or request.form.to_dict()
    product = create_product(
        get_stores().catalog,
        payload.get('name'),
        payload.get('manufacturer'),
        payload.get('price'),
        payload.get('quantity_in_stock', 0),
    )
    return jsonify(product.to_dict()), 201
