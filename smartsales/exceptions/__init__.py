"""Custom exceptions for the Smart Sales application."""


class SmartSalesError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv


class ClientPreconditionError(SmartSalesError):
    """Raised for invalid caller input: empty cart, no customer, bad quantity."""
    def __init__(self, message, status_code=400, payload=None):
        super().__init__(message, status_code, payload)


class NotFoundError(SmartSalesError):
    """Exception raised when a resource is not found."""
    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)


class ProductMissingError(NotFoundError):
    """Raised when a product referenced by id no longer exists in the catalog."""
    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product missing: {product_id}", payload={'product_id': product_id})


class CustomerNotFoundError(NotFoundError):
    def __init__(self, customer_id):
        self.customer_id = customer_id
        super().__init__(f"Customer not found: {customer_id}", payload={'customer_id': customer_id})


class SaleNotFoundError(NotFoundError):
    def __init__(self, sale_id):
        self.sale_id = sale_id
        super().__init__(f"Sale not found: {sale_id}", payload={'sale_id': sale_id})


class InsufficientStockError(ClientPreconditionError):
    """Raised when an operation fails due to lack of stock."""
    def __init__(self, product_id, product_name, requested, available):
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available
        message = (
            f"Not enough stock for {product_name}: "
            f"requested {requested}, available {available}"
        )
        super().__init__(
            message,
            status_code=409,
            payload={
                'product_id': product_id,
                'requested': requested,
                'available': available,
            },
        )


class PersistenceError(SmartSalesError):
    """Raised when a sale and its lines could not be written as a unit."""
    def __init__(self, message="Persistence failed"):
        super().__init__(message, 500)


class InventoryApplyError(SmartSalesError):
    """A post-commit stock decrement failed; the sale itself stays committed."""
    def __init__(self, product_id, message):
        self.product_id = product_id
        super().__init__(message, 500, payload={'product_id': product_id})
