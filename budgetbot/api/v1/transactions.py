"""
Transaction API endpoints
"""
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from budgetbot.api.deps import get_db, get_user_context, UserContext
from budgetbot.application.transactions import (
    CreateTransactionUseCase, UpdateTransactionUseCase, DeleteTransactionUseCase,
    TransactionValidationError, TransactionNotFoundError, list_transactions,
)
from budgetbot.domain.category_rules import normalize, suggest_categories
from budgetbot.infrastructure.db.models import Transaction


router = APIRouter(prefix="/api/v1/transactions", tags=["transactions"])


# === Request models ===

class CreateTransactionRequest(BaseModel):
    type: str  # income / expense
    category: str
    amount: str | int | float  # Decimal as string preferred
    date: datetime | None = None
    is_recurring: bool = False
    frequency: str = "monthly"


class UpdateTransactionRequest(BaseModel):
    type: str | None = None
    category: str | None = None
    amount: str | int | float | None = None
    date: datetime | None = None
    is_recurring: bool | None = None
    frequency: str | None = None


class TransactionResponse(BaseModel):
    id: int
    type: str
    category: str
    group: str
    amount: str
    date: datetime
    is_recurring: bool
    frequency: str


# === Helper function ===

def _to_response(tx: Transaction) -> TransactionResponse:
    return TransactionResponse(
        id=tx.id,
        type=tx.kind,
        category=tx.category,
        group=normalize(tx.category),
        amount=str(tx.amount),
        date=tx.occurred_at,
        is_recurring=tx.is_recurring,
        frequency=tx.frequency,
    )


# Request field -> use case field
_FIELD_MAP = {
    "type": "kind",
    "date": "occurred_at",
}


# === Endpoints ===

@router.get("/", response_model=list[TransactionResponse])
def get_transactions(
    ctx: UserContext = Depends(get_user_context),
    db: Session = Depends(get_db),
    date_from: datetime | None = Query(None, alias="from"),
    date_to: datetime | None = Query(None, alias="to"),
    kind: str | None = Query(None, alias="type"),
    category: str | None = None,
    q: str | None = None,
):
    """List transactions; without from/to returns everything"""
    items = list_transactions(
        db,
        account_id=ctx.user_id,
        date_from=date_from,
        date_to=date_to,
        kind=kind,
        category=category,
        search=q,
    )
    return [_to_response(tx) for tx in items]


@router.get("/suggest", response_model=list[str])
def suggest(note: str = "", ctx: UserContext = Depends(get_user_context)):
    """Category groups suggested for a free-text note"""
    return suggest_categories(note)


@router.post("/", response_model=TransactionResponse, status_code=201)
def add_transaction(
    req: CreateTransactionRequest,
    ctx: UserContext = Depends(get_user_context),
    db: Session = Depends(get_db),
):
    try:
        tx = CreateTransactionUseCase(db).execute(
            account_id=ctx.user_id,
            kind=req.type,
            category=req.category,
            amount=req.amount,
            occurred_at=req.date,
            is_recurring=req.is_recurring,
            frequency=req.frequency,
        )
    except TransactionValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _to_response(tx)


@router.put("/{transaction_id}", response_model=TransactionResponse)
def update_transaction(
    transaction_id: int,
    req: UpdateTransactionRequest,
    ctx: UserContext = Depends(get_user_context),
    db: Session = Depends(get_db),
):
    changes = {
        _FIELD_MAP.get(key, key): value
        for key, value in req.model_dump(exclude_unset=True).items()
    }
    try:
        tx = UpdateTransactionUseCase(db).execute(ctx.user_id, transaction_id, **changes)
    except TransactionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TransactionValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _to_response(tx)


@router.delete("/{transaction_id}")
def delete_transaction(
    transaction_id: int,
    ctx: UserContext = Depends(get_user_context),
    db: Session = Depends(get_db),
):
    try:
        DeleteTransactionUseCase(db).execute(ctx.user_id, transaction_id)
    except TransactionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {"message": "Transaction deleted"}
