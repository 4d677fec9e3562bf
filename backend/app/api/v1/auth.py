"""Signup, login and the current-user endpoint."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.config import get_settings
from app.database import get_db
from app.errors import NotFound, ValidationFailed
from app.models import User
from app.schemas.auth import LoginRequest, SignupRequest, TokenResponse, TokenUser, UserResponse
from app.schemas.common import Role
from app.services.auth_service import authenticate, create_access_token, create_user

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/signup", response_model=TokenResponse, status_code=201)
def signup(payload: SignupRequest, db: Session = Depends(get_db)):
    if payload.role == Role.ADMIN:
        raise ValidationFailed("Admin accounts cannot be self-registered")
    if payload.email.strip().lower() == get_settings().QR_FEEDBACK_EMAIL.strip().lower():
        raise ValidationFailed("This email address is reserved")
    user = create_user(
        db,
        name=payload.name,
        email=payload.email,
        password=payload.password,
        role=payload.role.value,
        department=payload.department,
    )
    return TokenResponse(token=create_access_token(user), user=UserResponse.model_validate(user))


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    user = authenticate(db, payload.email, payload.password)
    logger.info("User %s signed in", user.email)
    return TokenResponse(token=create_access_token(user), user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
def me(current: TokenUser = Depends(get_current_user), db: Session = Depends(get_db)):
    user = db.query(User).filter(User.id == current.id).first()
    if not user:
        raise NotFound("User not found")
    return user
