"""
Validation utilities
"""
import re
from decimal import Decimal, InvalidOperation


def normalize_decimal_input(value) -> str:
    """
    Normalize an amount typed by the user: trim and use '.' as decimal separator

    Example:
        >>> normalize_decimal_input(" 100,50 ")
        '100.50'
    """
    return str(value).strip().replace(",", ".")


def parse_amount(value, max_decimal_places: int = 2) -> Decimal:
    """
    Parse a money amount (str / int / float / Decimal) into Decimal

    Raises:
        ValueError: not a finite number or too many decimal places

    Example:
        >>> parse_amount("1200,5")
        Decimal('1200.5')
        >>> parse_amount("abc")
        ValueError: Invalid amount
    """
    if isinstance(value, bool):
        raise ValueError("Invalid amount")

    normalized = normalize_decimal_input(value)
    try:
        amount = Decimal(normalized)
    except (InvalidOperation, ValueError):
        raise ValueError("Invalid amount")

    if not amount.is_finite():
        raise ValueError("Invalid amount")

    pattern = rf"^-?\d+(\.\d{{1,{max_decimal_places}}})?$"
    if not re.match(pattern, format(amount, "f")):
        raise ValueError(f"At most {max_decimal_places} decimal places allowed")

    return amount
