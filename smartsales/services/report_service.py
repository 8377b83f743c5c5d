"""
Read-only reports over the catalog and persisted sales.

Nothing here takes part in checkout; every function only reads.
"""
from decimal import Decimal
from typing import Any, Dict

from smartsales.exceptions import ClientPreconditionError


def inventory_report(catalog) -> Dict[str, Any]:
    """All products with SKU count and total units in stock."""
    products = catalog.find_all()
    return {
        'products': products,
        'total_skus': len(products),
        'total_units': sum(p.quantity_in_stock for p in products),
    }


def low_stock_report(catalog, threshold: int) -> Dict[str, Any]:
    """Products whose stock is at or below ``threshold``."""
    if threshold < 0:
        raise ClientPreconditionError('Threshold must be 0 or greater')
    products = [p for p in catalog.find_all() if p.quantity_in_stock <= threshold]
    return {'threshold': threshold, 'products': products}


def recent_sales_report(sales, limit: int) -> Dict[str, Any]:
    """
    Most recent sales first, with count and grand total.

    Args:
        sales: sale store
        limit: how many sales to include, must be positive

    Returns:
        dict with ``summaries`` (list of SaleSummary), ``count`` and ``grand_total``
    """
    if limit <= 0:
        raise ClientPreconditionError('Enter a number greater than 0')
    summaries = sales.recent_summaries(limit)
    return {
        'summaries': summaries,
        'count': len(summaries),
        'grand_total': sum((s.total for s in summaries), Decimal('0.00')),
    }
