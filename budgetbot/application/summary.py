"""
Summary service: month insights and chart series.

All figures use canonical groups, the same way the budget progress view does.
"""
from decimal import Decimal
from typing import Any, Dict, Iterable, List

from sqlalchemy.orm import Session

from budgetbot.application.budgets import build_budget_progress, load_period_transactions
from budgetbot.domain.budget_progress import (
    BudgetProgressRow, Period, STATUS_EXCEEDED, STATUS_SAFE, STATUS_WARNING,
    spent_by_group, to_decimal,
)
from budgetbot.domain.category_rules import normalize
from budgetbot.domain.transaction import KIND_EXPENSE, KIND_INCOME
from budgetbot.infrastructure.db.models import Transaction

_ZERO = Decimal("0")

_MONTH_LABELS = {
    1: "Jan", 2: "Feb", 3: "Mar", 4: "Apr", 5: "May", 6: "Jun",
    7: "Jul", 8: "Aug", 9: "Sep", 10: "Oct", 11: "Nov", 12: "Dec",
}


def month_label(period: Period) -> str:
    return f"{_MONTH_LABELS[period.month]} {period.year}"


def build_month_summary(transactions: Iterable[Any], rows: Iterable[BudgetProgressRow]) -> Dict[str, Any]:
    """
    Income / expense totals, top group, biggest expense and budget status counts.

    savings_rate is a percent of income; 0 when there is no income.
    """
    income = _ZERO
    expense = _ZERO
    biggest = None

    expense_items = []
    for tx in transactions:
        amount = to_decimal(tx.amount)
        if tx.kind == KIND_INCOME:
            income += amount
        elif tx.kind == KIND_EXPENSE:
            expense += amount
            expense_items.append(tx)
            if biggest is None or amount > to_decimal(biggest.amount):
                biggest = tx

    top_category = None
    by_group = expenses_by_group(expense_items)
    if by_group:
        top_category = by_group[0]

    counts = {STATUS_SAFE: 0, STATUS_WARNING: 0, STATUS_EXCEEDED: 0}
    for row in rows:
        if row.status in counts:
            counts[row.status] += 1

    return {
        "income": income,
        "expense": expense,
        "balance": income - expense,
        "savings_rate": (income - expense) * 100 / income if income else _ZERO,
        "top_category": top_category,
        "biggest_expense": {
            "category": biggest.category,
            "group": normalize(biggest.category),
            "amount": to_decimal(biggest.amount),
            "occurred_at": getattr(biggest, "occurred_at", None),
        } if biggest is not None else None,
        "safe": counts[STATUS_SAFE],
        "warning": counts[STATUS_WARNING],
        "exceeded": counts[STATUS_EXCEEDED],
    }


def expenses_by_group(transactions: Iterable[Any]) -> List[Dict[str, Any]]:
    """Spent per canonical group, biggest first."""
    totals = spent_by_group(transactions)
    items = [{"category": group, "amount": amount} for group, amount in totals.items()]
    items.sort(key=lambda item: (-item["amount"], item["category"]))
    return items


def income_expense_by_month(transactions: Iterable[Any], period: Period, months: int = 6) -> List[Dict[str, Any]]:
    """
    Income and expense per month for the `months` months ending at `period`.

    Oldest month first; transactions outside the window are ignored.
    """
    buckets: Dict[str, Dict[str, Any]] = {}
    for offset in range(months - 1, -1, -1):
        p = period.shift(-offset)
        buckets[p.key] = {"month": month_label(p), "key": p.key, "income": _ZERO, "expense": _ZERO}

    for tx in transactions:
        moment = tx.occurred_at
        if moment.tzinfo is not None and period.tz is not None:
            moment = moment.astimezone(period.tz)
        bucket = buckets.get(f"{moment.year:04d}-{moment.month:02d}")
        if bucket is None:
            continue
        if tx.kind in (KIND_INCOME, KIND_EXPENSE):
            bucket[tx.kind] += to_decimal(tx.amount)

    return list(buckets.values())


class SummaryService:
    """Load data for a user and build summary / chart payloads."""

    def __init__(self, db: Session):
        self.db = db

    def month_summary(self, account_id: int, period: Period) -> Dict[str, Any]:
        transactions = load_period_transactions(self.db, account_id, period)
        rows = build_budget_progress(self.db, account_id, period)
        summary = build_month_summary(transactions, rows)
        summary["month"] = month_label(period)
        return summary

    def charts(self, account_id: int, period: Period, months: int = 6) -> Dict[str, Any]:
        first = period.shift(-(months - 1))
        window = self.db.query(Transaction).filter(
            Transaction.account_id == account_id,
            Transaction.occurred_at >= first.start,
            Transaction.occurred_at < period.end,
        ).all()
        current = [tx for tx in window if period.contains(tx.occurred_at)]

        return {
            "expenses_by_category": expenses_by_group(current),
            "income_vs_expense": income_expense_by_month(window, period, months),
            "budget_progress": build_budget_progress(self.db, account_id, period),
        }
