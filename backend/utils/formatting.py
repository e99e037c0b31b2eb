from datetime import date, datetime
from decimal import Decimal
from enum import Enum


def format_currency(amount: Decimal, symbol: str = "") -> str:
    if amount is None:
        amount = Decimal(0)
    amount = Decimal(amount)
    sign = "-" if amount < 0 else ""
    formatted = f"{abs(amount):,.2f}"
    if symbol:
        return f"{sign}{symbol}{formatted}"
    return f"{sign}{formatted}"


def format_cell(value) -> str:
    """Plain text form of a report value, used by the CSV and PDF writers."""
    if value is None:
        return ""
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, Decimal):
        return f"{value:.2f}"
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)
