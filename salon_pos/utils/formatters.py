"""
Formatting helpers for money shown to the cashier.
"""
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union


def money(value: Union[int, float, Decimal, str, None], symbol: str = '£') -> str:
    """
    Format an amount with two decimals and a thousands separator.

    Examples:
        money(24) -> "£24.00"
        money(Decimal('1234.5')) -> "£1,234.50"
        money(-3, '€') -> "-€3.00"
        money(None) -> "-"
    """
    if value is None or value == "":
        return "-"

    try:
        num = Decimal(str(value)).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)
    except (InvalidOperation, ValueError, TypeError):
        return "-"

    sign = '-' if num < 0 else ''
    return f"{sign}{symbol}{abs(num):,.2f}"
