"""
Transaction domain constants and value checks
"""
from decimal import Decimal

KIND_INCOME = "income"
KIND_EXPENSE = "expense"
TRANSACTION_KINDS = (KIND_INCOME, KIND_EXPENSE)

FREQUENCY_WEEKLY = "weekly"
FREQUENCY_MONTHLY = "monthly"
FREQUENCIES = (FREQUENCY_WEEKLY, FREQUENCY_MONTHLY)


def normalize_kind(value) -> str:
    """'  Expense ' -> 'expense'"""
    return str(value or "").strip().lower()


def is_valid_kind(value) -> bool:
    return normalize_kind(value) in TRANSACTION_KINDS


def is_valid_amount(amount: Decimal) -> bool:
    """Amount must be a finite number greater than zero"""
    return amount.is_finite() and amount > 0
