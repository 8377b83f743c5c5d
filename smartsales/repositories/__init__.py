"""Store selection: the backend is picked by ``STORE_BACKEND``."""
from typing import NamedTuple

from smartsales.repositories.base import ProductCatalog, CustomerStore, SaleStore
from smartsales.repositories.memory import (
    InMemoryProductCatalog, InMemoryCustomerStore, InMemorySaleStore,
)

EXTENSION_KEY = 'smartsales.stores'


class Stores(NamedTuple):
    catalog: ProductCatalog
    customers: CustomerStore
    sales: SaleStore


def memory_stores() -> Stores:
    """Fresh, empty in-memory stores with their own id counters."""
    catalog = InMemoryProductCatalog()
    return Stores(catalog, InMemoryCustomerStore(), InMemorySaleStore(catalog))


def sql_stores(session) -> Stores:
    from smartsales.repositories.sql import SqlProductCatalog, SqlCustomerStore, SqlSaleStore
    return Stores(SqlProductCatalog(session), SqlCustomerStore(session), SqlSaleStore(session))


def build_stores(backend: str, session=None) -> Stores:
    if backend == 'memory':
        return memory_stores()
    if backend == 'database':
        if session is None:
            raise ValueError('The database backend needs a session')
        return sql_stores(session)
    raise ValueError(f'Unknown STORE_BACKEND: {backend!r}')


def init_stores(app):
    """Attach the configured stores to the Flask app."""
    from smartsales.database import get_session

    backend = app.config.get('STORE_BACKEND', 'database')
    session = get_session() if backend == 'database' else None
    app.extensions[EXTENSION_KEY] = build_stores(backend, session)
    app.logger.info(f"Stores initialized with backend '{backend}'")


def get_stores() -> Stores:
    from flask import current_app
    return current_app.extensions[EXTENSION_KEY]


__all__ = [
    'ProductCatalog', 'CustomerStore', 'SaleStore', 'Stores',
    'memory_stores', 'sql_stores', 'build_stores', 'init_stores', 'get_stores',
]
