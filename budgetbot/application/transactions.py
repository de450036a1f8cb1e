"""
Transaction use cases - business logic for transaction operations
"""
import logging
from datetime import datetime, tzinfo
from decimal import Decimal
from typing import List

from sqlalchemy.orm import Session

from budgetbot.config import get_settings
from budgetbot.domain.category_rules import normalize
from budgetbot.domain.transaction import (
    FREQUENCIES, FREQUENCY_MONTHLY, is_valid_amount, is_valid_kind, normalize_kind,
)
from budgetbot.infrastructure.db.models import Transaction
from budgetbot.utils.dates import now_local, to_local
from budgetbot.utils.validation import parse_amount

logger = logging.getLogger(__name__)


class TransactionValidationError(ValueError):
    """Invalid transaction input"""
    pass


class TransactionNotFoundError(ValueError):
    pass


def _clean_kind(kind) -> str:
    if not is_valid_kind(kind):
        raise TransactionValidationError("type must be income or expense")
    return normalize_kind(kind)


def _clean_category(category) -> str:
    value = str(category or "").strip()
    if not value:
        raise TransactionValidationError("category is required")
    return value


def _clean_amount(amount) -> Decimal:
    try:
        value = parse_amount(amount)
    except ValueError:
        raise TransactionValidationError("amount must be a positive number")
    if not is_valid_amount(value):
        raise TransactionValidationError("amount must be a positive number")
    return value


def _clean_frequency(frequency) -> str:
    value = str(frequency or FREQUENCY_MONTHLY).strip().lower()
    if value not in FREQUENCIES:
        raise TransactionValidationError("frequency must be weekly or monthly")
    return value


def _get_owned(db: Session, account_id: int, transaction_id: int) -> Transaction:
    tx = db.query(Transaction).filter(
        Transaction.id == transaction_id,
        Transaction.account_id == account_id,
    ).first()
    if not tx:
        raise TransactionNotFoundError("Transaction not found")
    return tx


class CreateTransactionUseCase:
    """
    Use case: create an income or expense

    Validation happens here so that only well-formed rows ever reach the
    aggregation code.
    """

    def __init__(self, db: Session, tz: tzinfo | None = None):
        self.db = db
        self.tz = tz or get_settings().get_timezone()

    def execute(
        self,
        account_id: int,
        kind: str,
        category: str,
        amount,
        occurred_at: datetime | None = None,
        is_recurring: bool = False,
        frequency: str = FREQUENCY_MONTHLY,
    ) -> Transaction:
        """
        Args:
            account_id: owner user id
            kind: income / expense (case-insensitive)
            category: raw category text
            amount: positive number (str / Decimal / int / float)
            occurred_at: operation date (default=now)

        Returns:
            created Transaction
        """
        tx = Transaction(
            account_id=account_id,
            kind=_clean_kind(kind),
            category=_clean_category(category),
            amount=_clean_amount(amount),
            occurred_at=to_local(occurred_at, self.tz) if occurred_at else now_local(self.tz),
            is_recurring=bool(is_recurring),
            frequency=_clean_frequency(frequency),
        )
        self.db.add(tx)
        self.db.commit()
        self.db.refresh(tx)

        logger.info(f"Transaction created: id={tx.id} account={account_id} kind={tx.kind} amount={tx.amount}")
        return tx


class UpdateTransactionUseCase:
    """Partial update; only the fields passed in `changes` are touched."""

    ALLOWED = ("kind", "category", "amount", "occurred_at", "is_recurring", "frequency")

    def __init__(self, db: Session, tz: tzinfo | None = None):
        self.db = db
        self.tz = tz or get_settings().get_timezone()

    def execute(self, account_id: int, transaction_id: int, **changes) -> Transaction:
        tx = _get_owned(self.db, account_id, transaction_id)

        unknown = set(changes) - set(self.ALLOWED)
        if unknown:
            raise TransactionValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

        # Validate everything before touching the row
        cleaned = {}
        if "kind" in changes:
            cleaned["kind"] = _clean_kind(changes["kind"])
        if "category" in changes:
            cleaned["category"] = _clean_category(changes["category"])
        if "amount" in changes:
            cleaned["amount"] = _clean_amount(changes["amount"])
        if "occurred_at" in changes:
            if changes["occurred_at"] is None:
                raise TransactionValidationError("invalid date")
            cleaned["occurred_at"] = to_local(changes["occurred_at"], self.tz)
        if "is_recurring" in changes:
            cleaned["is_recurring"] = bool(changes["is_recurring"])
        if "frequency" in changes:
            cleaned["frequency"] = _clean_frequency(changes["frequency"])

        for field, value in cleaned.items():
            setattr(tx, field, value)
        self.db.commit()
        self.db.refresh(tx)

        logger.info(f"Transaction updated: id={tx.id} account={account_id} fields={sorted(changes)}")
        return tx


class DeleteTransactionUseCase:

    def __init__(self, db: Session):
        self.db = db

    def execute(self, account_id: int, transaction_id: int) -> None:
        tx = _get_owned(self.db, account_id, transaction_id)
        self.db.delete(tx)
        self.db.commit()
        logger.info(f"Transaction deleted: id={transaction_id} account={account_id}")


def _matches_category(tx: Transaction, category: str) -> bool:
    wanted = category.strip().lower()
    return normalize(tx.category).lower() == wanted or tx.category.strip().lower() == wanted


def _matches_search(tx: Transaction, search: str) -> bool:
    needle = search.strip().lower()
    return needle in tx.category.lower() or needle in normalize(tx.category).lower()


def list_transactions(
    db: Session,
    account_id: int,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
    kind: str | None = None,
    category: str | None = None,
    search: str | None = None,
    tz: tzinfo | None = None,
) -> List[Transaction]:
    """
    Owner-scoped listing, newest first.

    date_from / date_to are both inclusive. An unrecognized kind is ignored
    rather than rejected. category matches either the canonical group or the
    raw category text; search is a case-insensitive substring over both.
    """
    tz = tz or get_settings().get_timezone()

    query = db.query(Transaction).filter(Transaction.account_id == account_id)

    if date_from is not None:
        query = query.filter(Transaction.occurred_at >= to_local(date_from, tz))
    if date_to is not None:
        query = query.filter(Transaction.occurred_at <= to_local(date_to, tz))

    if kind and is_valid_kind(kind):
        query = query.filter(Transaction.kind == normalize_kind(kind))

    items = query.order_by(Transaction.occurred_at.desc(), Transaction.id.desc()).all()

    if category and category.strip():
        items = [tx for tx in items if _matches_category(tx, category)]
    if search and search.strip():
        items = [tx for tx in items if _matches_search(tx, search)]

    return items
