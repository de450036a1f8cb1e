import logging

from passlib.context import CryptContext
from sqlalchemy.orm import Session

from budgetbot.infrastructure.db.models import User

logger = logging.getLogger(__name__)

# pbkdf2_sha256: primary
# bcrypt: hashes imported from the old backend
pwd_context = CryptContext(schemes=["pbkdf2_sha256", "bcrypt"], deprecated=["bcrypt"])

MIN_PASSWORD_LENGTH = 6


class AuthError(ValueError):
    pass


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def normalize_email(email: str) -> str:
    return str(email or "").strip().lower()


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == normalize_email(email)).first()


def register_user(db: Session, name: str, email: str, password: str) -> User:
    """Create a user; raises AuthError on invalid input or taken email"""
    email = normalize_email(email)
    name = str(name or "").strip()
    if not email or "@" not in email:
        raise AuthError("Valid email is required")
    if len(password or "") < MIN_PASSWORD_LENGTH:
        raise AuthError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if get_user_by_email(db, email):
        raise AuthError("User already exists")

    user = User(name=name, email=email, password_hash=hash_password(password))
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"User registered: id={user.id} email={user.email}")
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        logger.warning(f"Failed login for {normalize_email(email)!r}")
        raise AuthError("Invalid email or password")
    return user
