"""
Authentication routes (signup, login, logout, me)
"""
from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from budgetbot.api.deps import get_db, get_user_context, UserContext
from budgetbot.auth import AuthError, authenticate, register_user


router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


# === Request/Response models ===

class SignupRequest(BaseModel):
    name: str = ""
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class UserResponse(BaseModel):
    id: int
    name: str
    email: str


# === Endpoints ===

@router.post("/signup", response_model=UserResponse, status_code=201)
def signup(request: Request, req: SignupRequest, db: Session = Depends(get_db)):
    """Register and log in"""
    try:
        user = register_user(db, req.name, req.email, req.password)
    except AuthError as e:
        raise HTTPException(status_code=400, detail=str(e))

    request.session["user_id"] = user.id
    return UserResponse(id=user.id, name=user.name, email=user.email)


@router.post("/login", response_model=UserResponse)
def login(request: Request, req: LoginRequest, db: Session = Depends(get_db)):
    try:
        user = authenticate(db, req.email, req.password)
    except AuthError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))

    request.session["user_id"] = user.id
    return UserResponse(id=user.id, name=user.name, email=user.email)


@router.post("/logout")
def logout(request: Request):
    request.session.clear()
    return {"message": "Logged out"}


@router.get("/me", response_model=UserResponse)
def me(ctx: UserContext = Depends(get_user_context)):
    return UserResponse(id=ctx.user_id, name=ctx.name, email=ctx.email)
