"""
Summary and chart data endpoints
"""
from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from budgetbot.api.deps import get_db, get_period, get_user_context, UserContext
from budgetbot.application.summary import SummaryService
from budgetbot.config import get_settings
from budgetbot.domain.budget_progress import BudgetProgressRow, Period


router = APIRouter(prefix="/api/v1/summary", tags=["summary"])


def _jsonable(value: Any) -> Any:
    """Decimal -> str (rates/percents -> rounded float), recursively"""
    if isinstance(value, BudgetProgressRow):
        return {
            "category": value.category,
            "limit": str(value.limit_amount),
            "spent": str(value.spent_amount),
            "percent": round(float(value.percent), 2),
            "status": value.status,
        }
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_jsonable(v) for v in value]
    return value


@router.get("/")
def month_summary(
    period: Period = Depends(get_period),
    ctx: UserContext = Depends(get_user_context),
    db: Session = Depends(get_db),
):
    """Income, expense, balance and budget insights for the month"""
    summary = SummaryService(db).month_summary(ctx.user_id, period)
    summary["savings_rate"] = round(float(summary["savings_rate"]), 2)
    summary["currency"] = get_settings().CURRENCY
    return _jsonable(summary)


@router.get("/charts")
def charts(
    period: Period = Depends(get_period),
    months: int = Query(6, ge=1, le=24),
    ctx: UserContext = Depends(get_user_context),
    db: Session = Depends(get_db),
):
    """Pie (expenses by group), bars (income vs expense) and budget progress"""
    try:
        period.shift(-(months - 1))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    data = SummaryService(db).charts(ctx.user_id, period, months=months)
    data["currency"] = get_settings().CURRENCY
    return _jsonable(data)
