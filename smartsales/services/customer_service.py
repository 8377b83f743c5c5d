"""Customer service: registration and lookup for the POS."""
from smartsales.domain import Customer
from smartsales.exceptions import ClientPreconditionError, CustomerNotFoundError


def register_customer(customers, name: str, email: str) -> Customer:
    """
    Create a customer or return the one already registered under ``email``.

    Email matching is case-insensitive, so registering the same address twice
    returns the first customer unchanged.
    """
    name = (name or '').strip()
    email = (email or '').strip()
    if not name or not email:
        raise ClientPreconditionError('Name and email are required')
    return customers.create_or_get_by_email(name, email)


def get_customer_or_error(customers, customer_id) -> Customer:
    """Resolve a customer id coming from user input."""
    try:
        customer_id = int(customer_id)
    except (TypeError, ValueError):
        raise ClientPreconditionError('A customer must be selected')

    customer = customers.find_by_id(customer_id)
    if customer is None:
        raise CustomerNotFoundError(customer_id)
    return customer
