"""
Budget API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from budgetbot.api.deps import get_db, get_period, get_user_context, UserContext
from budgetbot.application.budgets import (
    UpsertBudgetUseCase, DeleteBudgetUseCase, BudgetValidationError, BudgetNotFoundError,
    build_budget_progress, list_budgets,
)
from budgetbot.domain.budget_progress import Period
from budgetbot.domain.category_rules import CANONICAL_GROUPS, RULES_VERSION, budget_group
from budgetbot.infrastructure.db.models import Budget


router = APIRouter(prefix="/api/v1/budgets", tags=["budgets"])


# === Request/Response models ===

class UpsertBudgetRequest(BaseModel):
    category: str
    limit: str | int | float
    month: int
    year: int


class BudgetResponse(BaseModel):
    id: int
    category: str
    group: str
    limit: str
    month: int
    year: int


class BudgetProgressResponse(BaseModel):
    category: str
    limit: str
    spent: str
    percent: float
    status: str


class GroupsResponse(BaseModel):
    version: int
    groups: list[str]


def _to_response(budget: Budget) -> BudgetResponse:
    return BudgetResponse(
        id=budget.id,
        category=budget.category,
        group=budget_group(budget.category),
        limit=str(budget.limit_amount),
        month=budget.month,
        year=budget.year,
    )


# === Endpoints ===

@router.get("/", response_model=list[BudgetResponse])
def get_budgets(
    month: int | None = None,
    year: int | None = None,
    ctx: UserContext = Depends(get_user_context),
    db: Session = Depends(get_db),
):
    return [_to_response(b) for b in list_budgets(db, ctx.user_id, month=month, year=year)]


@router.get("/groups", response_model=GroupsResponse)
def get_groups(ctx: UserContext = Depends(get_user_context)):
    """Canonical groups for the budget form"""
    return GroupsResponse(version=RULES_VERSION, groups=list(CANONICAL_GROUPS))


@router.get("/progress", response_model=list[BudgetProgressResponse])
def get_progress(
    period: Period = Depends(get_period),
    ctx: UserContext = Depends(get_user_context),
    db: Session = Depends(get_db),
):
    """Spent vs limit per group, most critical first"""
    rows = build_budget_progress(db, ctx.user_id, period)
    return [
        BudgetProgressResponse(
            category=row.category,
            limit=str(row.limit_amount),
            spent=str(row.spent_amount),
            percent=round(float(row.percent), 2),
            status=row.status,
        )
        for row in rows
    ]


@router.post("/", response_model=BudgetResponse, status_code=201)
def upsert_budget(
    req: UpsertBudgetRequest,
    ctx: UserContext = Depends(get_user_context),
    db: Session = Depends(get_db),
):
    """Create the budget or update the limit of the existing one"""
    try:
        budget = UpsertBudgetUseCase(db).execute(
            account_id=ctx.user_id,
            month=req.month,
            year=req.year,
            category=req.category,
            limit=req.limit,
        )
    except BudgetValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _to_response(budget)


@router.delete("/{budget_id}")
def delete_budget(
    budget_id: int,
    ctx: UserContext = Depends(get_user_context),
    db: Session = Depends(get_db),
):
    try:
        DeleteBudgetUseCase(db).execute(ctx.user_id, budget_id)
    except BudgetNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {"message": "Deleted"}
