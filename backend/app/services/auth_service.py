"""Password hashing, bearer tokens and account lookup/creation."""
from __future__ import annotations

import logging
from datetime import timedelta

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from app.config import get_settings
from app.errors import NotAuthenticated, PermissionDenied, ValidationFailed
from app.models import User
from app.schemas.auth import TokenUser
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=10)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(user: User) -> str:
    settings = get_settings()
    expire = utcnow() + timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)
    claims = {
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "name": user.name,
        "exp": expire,
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> TokenUser:
    """Validate signature and expiry; invalid or expired -> ``PermissionDenied``."""
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        return TokenUser.model_validate(payload)
    except (JWTError, ValueError) as exc:
        logger.debug("Rejected bearer token: %s", exc)
        raise PermissionDenied("Invalid or expired token")


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def create_user(
    db: Session,
    name: str,
    email: str,
    password: str,
    role: str = "student",
    department: str | None = None,
) -> User:
    email = email.strip().lower()
    if get_user_by_email(db, email):
        raise ValidationFailed("Email already registered")
    user = User(
        name=name.strip(),
        email=email,
        username=email.split("@")[0],
        password_hash=hash_password(password),
        role=role,
        department=department,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created %s account %s", role, email)
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.password_hash):
        raise NotAuthenticated("Invalid email or password")
    return user
