"""
Budget use cases and query helpers.

Budgets are keyed by (account_id, year, month, category). Saving a limit for
an existing key updates it in place; the database enforces the key, so two
concurrent saves cannot create duplicates.
"""
import logging
from decimal import Decimal
from typing import List

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from budgetbot.domain.budget_progress import BudgetProgressRow, Period, aggregate
from budgetbot.infrastructure.db.models import Budget, Transaction
from budgetbot.utils.validation import parse_amount

logger = logging.getLogger(__name__)


class BudgetValidationError(ValueError):
    pass


class BudgetNotFoundError(ValueError):
    pass


_UPSERT_BY_DIALECT = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def list_budgets(
    db: Session,
    account_id: int,
    month: int | None = None,
    year: int | None = None,
) -> List[Budget]:
    """Budgets of the account, optionally narrowed to a month and/or year."""
    query = db.query(Budget).filter(Budget.account_id == account_id)
    if month:
        query = query.filter(Budget.month == month)
    if year:
        query = query.filter(Budget.year == year)
    return query.order_by(Budget.category.asc()).all()


class UpsertBudgetUseCase:
    """Insert or update the limit for (account, month, year, category)."""

    def __init__(self, db: Session):
        self.db = db

    def execute(
        self,
        account_id: int,
        month: int,
        year: int,
        category: str,
        limit,
    ) -> Budget:
        category = str(category or "").strip()
        if not category:
            raise BudgetValidationError("Category is required")

        try:
            limit_amount = parse_amount(limit)
        except ValueError:
            raise BudgetValidationError("Limit must be a valid number")
        if limit_amount < 0:
            raise BudgetValidationError("Limit must be a valid number")

        if not month or not year:
            raise BudgetValidationError("Month and Year are required")
        try:
            month, year = int(month), int(year)
        except (TypeError, ValueError):
            raise BudgetValidationError("Month and Year must be numbers")
        if not 1 <= int(month) <= 12:
            raise BudgetValidationError("Month must be between 1 and 12")
        if int(year) < 1:
            raise BudgetValidationError("Year must be positive")

        self._upsert(account_id, int(month), int(year), category, limit_amount)
        self.db.commit()

        budget = self.db.query(Budget).filter(
            Budget.account_id == account_id,
            Budget.year == int(year),
            Budget.month == int(month),
            Budget.category == category,
        ).execution_options(populate_existing=True).one()

        logger.info(
            f"Budget saved: id={budget.id} account={account_id} "
            f"{year}-{int(month):02d} {category!r} limit={limit_amount}"
        )
        return budget

    def _upsert(self, account_id: int, month: int, year: int, category: str, limit_amount: Decimal) -> None:
        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_BY_DIALECT.get(dialect)
        if insert is None:
            raise RuntimeError(f"Budget upsert is not supported for dialect {dialect!r}")

        stmt = insert(Budget).values(
            account_id=account_id,
            year=year,
            month=month,
            category=category,
            limit_amount=limit_amount,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["account_id", "year", "month", "category"],
            set_={
                "limit_amount": stmt.excluded.limit_amount,
                "updated_at": func.now(),
            },
        )
        self.db.execute(stmt)


class DeleteBudgetUseCase:

    def __init__(self, db: Session):
        self.db = db

    def execute(self, account_id: int, budget_id: int) -> None:
        budget = self.db.query(Budget).filter(
            Budget.id == budget_id,
            Budget.account_id == account_id,
        ).first()
        if not budget:
            raise BudgetNotFoundError("Not found")

        self.db.delete(budget)
        self.db.commit()
        logger.info(f"Budget deleted: id={budget_id} account={account_id}")


def load_period_transactions(db: Session, account_id: int, period: Period) -> List[Transaction]:
    """Transactions of the account within [period.start, period.end)."""
    return db.query(Transaction).filter(
        Transaction.account_id == account_id,
        Transaction.occurred_at >= period.start,
        Transaction.occurred_at < period.end,
    ).all()


def build_budget_progress(db: Session, account_id: int, period: Period) -> List[BudgetProgressRow]:
    """Spent vs limit per canonical group for the period."""
    transactions = load_period_transactions(db, account_id, period)
    budgets = list_budgets(db, account_id, month=period.month, year=period.year)
    return aggregate(transactions, budgets, period)
