"""
FastAPI dependencies (DB session, authentication, period)
"""
from dataclasses import dataclass
from zoneinfo import ZoneInfo

from fastapi import Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from budgetbot.config import get_settings
from budgetbot.domain.budget_progress import MAX_YEAR, MIN_YEAR, Period
from budgetbot.infrastructure.db.session import get_db as _get_db
from budgetbot.infrastructure.db.models import User


# Re-export get_db for routers
get_db = _get_db


@dataclass(frozen=True)
class UserContext:
    """
    Identity of the caller, resolved once per request

    Routers pass it (or its user_id) explicitly to use cases instead of
    reading the session themselves.
    """
    user_id: int
    email: str
    name: str


def get_user_context(request: Request, db: Session = Depends(get_db)) -> UserContext:
    """
    Resolve the logged-in user from the session cookie

    Raises:
        HTTPException(401): no session or the user no longer exists

    Usage:
        @router.get("/profile")
        def get_profile(ctx: UserContext = Depends(get_user_context)):
            ...
    """
    user_id = request.session.get("user_id")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    return UserContext(user_id=user.id, email=user.email, name=user.name)


def get_timezone() -> ZoneInfo:
    return get_settings().get_timezone()


def get_period(
    month: int | None = Query(None, ge=1, le=12),
    year: int | None = Query(None, ge=MIN_YEAR, le=MAX_YEAR),
    tz: ZoneInfo = Depends(get_timezone),
) -> Period:
    """Period from ?month=&year=, missing parts default to the current month"""
    current = Period.current(tz)
    return Period(year or current.year, month or current.month, tz)
