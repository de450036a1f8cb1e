"""
Budget progress: spent vs limit per canonical group for one month.

Pure functions over already-loaded transactions and budgets. Inputs are
duck-typed so ORM rows and plain objects both work:

    transaction: kind, category, amount, occurred_at (optional)
    budget:      category, limit_amount, month / year (optional)
"""
from dataclasses import dataclass
from datetime import MAXYEAR, MINYEAR, datetime, tzinfo
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from budgetbot.domain.category_rules import budget_group, normalize
from budgetbot.domain.transaction import KIND_EXPENSE

STATUS_EXCEEDED = "exceeded"
STATUS_WARNING = "warning"
STATUS_SAFE = "safe"
STATUS_NO_LIMIT = "no_limit"

# Years a Period can cover; the end of December must still be a valid datetime
MIN_YEAR = MINYEAR
MAX_YEAR = MAXYEAR - 1

WARNING_PERCENT = Decimal("80")
EXCEEDED_PERCENT = Decimal("100")

# Most severe first
_SEVERITY = {
    STATUS_EXCEEDED: 0,
    STATUS_WARNING: 1,
    STATUS_SAFE: 2,
    STATUS_NO_LIMIT: 3,
}

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")


def to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if value is None:
        return _ZERO
    return Decimal(str(value))


@dataclass(frozen=True)
class Period:
    """Calendar month, treated as the half-open range [start, end)."""
    year: int
    month: int
    tz: Optional[tzinfo] = None

    def __post_init__(self):
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be 1..12, got {self.month}")
        if not MIN_YEAR <= self.year <= MAX_YEAR:
            raise ValueError(f"year must be {MIN_YEAR}..{MAX_YEAR}, got {self.year}")

    @classmethod
    def current(cls, tz: Optional[tzinfo] = None) -> "Period":
        now = datetime.now(tz)
        return cls(now.year, now.month, tz)

    @property
    def start(self) -> datetime:
        return datetime(self.year, self.month, 1, tzinfo=self.tz)

    @property
    def end(self) -> datetime:
        """First instant of the next month (exclusive)."""
        return self.shift(1).start

    def shift(self, months: int) -> "Period":
        index = self.year * 12 + (self.month - 1) + months
        return Period(index // 12, index % 12 + 1, self.tz)

    def contains(self, moment: datetime) -> bool:
        if moment.tzinfo is not None and self.tz is not None:
            moment = moment.astimezone(self.tz)
        return (moment.year, moment.month) == (self.year, self.month)

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass(frozen=True)
class BudgetProgressRow:
    category: str
    limit_amount: Decimal
    spent_amount: Decimal
    percent: Decimal
    status: str


def classify(spent, limit) -> str:
    """
    Status of a spent/limit pair.

    limit <= 0 -> no_limit; >= 100% -> exceeded; 80%..100% -> warning;
    below 80% -> safe. Both boundaries are inclusive on the upper status.
    """
    limit = to_decimal(limit)
    if limit <= 0:
        return STATUS_NO_LIMIT

    percent = to_decimal(spent) * _HUNDRED / limit
    if percent >= EXCEEDED_PERCENT:
        return STATUS_EXCEEDED
    if percent >= WARNING_PERCENT:
        return STATUS_WARNING
    return STATUS_SAFE


def spent_by_group(transactions: Iterable[Any], period: Optional[Period] = None) -> Dict[str, Decimal]:
    """Sum expense amounts per canonical group. Income is ignored."""
    totals: Dict[str, Decimal] = {}
    for tx in transactions:
        if tx.kind != KIND_EXPENSE:
            continue
        occurred_at = getattr(tx, "occurred_at", None)
        if period is not None and occurred_at is not None and not period.contains(occurred_at):
            continue
        group = normalize(tx.category)
        totals[group] = totals.get(group, _ZERO) + to_decimal(tx.amount)
    return totals


def limit_by_group(budgets: Iterable[Any], period: Optional[Period] = None) -> Dict[str, Decimal]:
    """Sum budget limits per canonical group (several raw budgets may fold into one)."""
    totals: Dict[str, Decimal] = {}
    for budget in budgets:
        if period is not None:
            month = getattr(budget, "month", None)
            year = getattr(budget, "year", None)
            if month is not None and year is not None and (year, month) != (period.year, period.month):
                continue
        group = budget_group(budget.category)
        totals[group] = totals.get(group, _ZERO) + to_decimal(budget.limit_amount)
    return totals


def aggregate(
    transactions: Iterable[Any],
    budgets: Iterable[Any],
    period: Optional[Period] = None,
) -> List[BudgetProgressRow]:
    """
    Join spent and limit totals per canonical group.

    Groups without a positive limit have no budget and are left out.
    Rows are ordered exceeded -> warning -> safe, then by percent descending
    (group name breaks remaining ties).
    """
    spent = spent_by_group(transactions, period)
    limits = limit_by_group(budgets, period)

    rows: List[BudgetProgressRow] = []
    for group, limit in limits.items():
        if limit <= 0:
            continue
        group_spent = spent.get(group, _ZERO)
        rows.append(BudgetProgressRow(
            category=group,
            limit_amount=limit,
            spent_amount=group_spent,
            percent=group_spent * _HUNDRED / limit,
            status=classify(group_spent, limit),
        ))

    rows.sort(key=lambda r: (_SEVERITY[r.status], -r.percent, r.category))
    return rows
