"""Customers blueprint: listing, lookup by email and registration."""
from flask import Blueprint, request, jsonify, current_app, Response
from typing import Tuple

from smartsales.exceptions import ClientPreconditionError, NotFoundError
from smartsales.repositories import get_stores
from smartsales.services.customer_service import register_customer

customers_bp = Blueprint('customers', __name__, url_prefix='/customers')


@customers_bp.route('/', methods=['GET'])
def list_customers() -> Response:
    customers = get_stores().customers.find_all()
    return jsonify({'customers': [c.to_dict() for c in customers]})


@customers_bp.route('/lookup', methods=['GET'])
def find_by_email() -> Response:
    """Find a customer by email (case-insensitive)."""
    email = request.args.get('email', '').strip()
    if not email:
        raise ClientPreconditionError('Email is required')

    customer = get_stores().customers.find_by_email(email)
    if customer is None:
        raise NotFoundError(f'No customer with email {email}')
    return jsonify(customer.to_dict())


@customers_bp.route('/', methods=['POST'])
def create_customer() -> Tuple[Response, int]:
    """Create a customer, or return the existing one for that email."""
    payload = request.get_json(silent=True) or request.form.to_dict()
    customer = register_customer(get_stores().customers, payload.get('name'), payload.get('email'))
    current_app.logger.info(f"Customer saved with id: {customer.id}")
    return jsonify(customer.to_dict()), 201
