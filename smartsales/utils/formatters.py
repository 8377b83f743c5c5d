"""Formatting helpers for CLI output."""
from decimal import Decimal, InvalidOperation
from datetime import datetime
from typing import Union, Optional


def money(value: Union[int, float, Decimal, str, None]) -> str:
    """
    Format an amount with a thousands separator and two decimals.

    Examples:
        money(204.93) -> "$204.93"
        money(1500) -> "$1,500.00"
        money(None) -> "-"
    """
    if value is None or value == "":
        return "-"
    try:
        num = Decimal(str(value)).quantize(Decimal('0.01'))
    except (InvalidOperation, ValueError, TypeError):
        return "-"
    return f"${num:,.2f}"


def timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return "-"
    return value.strftime('%Y-%m-%d %H:%M:%S')
