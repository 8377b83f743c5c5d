import pytest
from decimal import Decimal

from config import TestConfig
from smartsales import create_app
from smartsales import database
from smartsales.domain import Customer, Product, ShoppingCart
from smartsales.repositories import get_stores, memory_stores


class MemoryTestConfig(TestConfig):
    STORE_BACKEND = 'memory'


@pytest.fixture(scope='function')
def app():
    """Create application instance backed by a fresh in-memory SQLite db."""
    app = create_app(TestConfig)
    yield app
    database.get_session().remove()
    database.engine.dispose()


@pytest.fixture(scope='function')
def memory_app():
    """Application instance using the in-memory stores."""
    app = create_app(MemoryTestConfig)
    yield app
    database.get_session().remove()
    database.engine.dispose()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def session(app):
    """Create database session for testing."""
    session = database.get_session()
    yield session
    session.rollback()
    session.close()


@pytest.fixture(scope='function')
def sql_stores(app):
    """SQLAlchemy stores bound to the test app."""
    with app.app_context():
        yield get_stores()


@pytest.fixture(scope='function')
def stores():
    """Fresh in-memory stores."""
    return memory_stores()


def _seed(stores):
    mouse = stores.catalog.add(Product(id=2, name='Wireless Mouse', manufacturer='Logitech',
                                       price=Decimal('24.99'), quantity_in_stock=30))
    hub = stores.catalog.add(Product(id=3, name='USB-C Hub', manufacturer='Anker',
                                     price=Decimal('39.99'), quantity_in_stock=20))
    return mouse, hub


@pytest.fixture(scope='function')
def seeded(stores):
    """Memory stores holding products 2 (24.99, stock 30) and 3 (39.99, stock 20)."""
    return _seed(stores)


@pytest.fixture(scope='function')
def sql_seeded(sql_stores):
    """SQL stores holding products 2 (24.99, stock 30) and 3 (39.99, stock 20)."""
    return _seed(sql_stores)


@pytest.fixture(scope='function')
def customer(stores):
    return stores.customers.create_or_get_by_email('Ada Lovelace', 'ada@example.com')


@pytest.fixture(scope='function')
def sql_customer(sql_stores):
    return sql_stores.customers.create_or_get_by_email('Ada Lovelace', 'ada@example.com')


@pytest.fixture(scope='function')
def cart():
    return ShoppingCart()


@pytest.fixture(scope='function')
def unsaved_customer():
    return Customer(name='Nobody', email='nobody@example.com')
