"""Signup / login schemas and the public user shape."""
from pydantic import Field
from app.schemas.common import CamelModel, Role

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class SignupRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=255)
    password: str = Field(..., min_length=6, max_length=72)  # bcrypt input limit
    role: Role = Role.STUDENT
    department: str | None = None


class LoginRequest(CamelModel):
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=1)


class UserResponse(CamelModel):
    id: str
    email: str
    name: str
    role: Role
    department: str | None = None


class TokenResponse(CamelModel):
    token: str
    user: UserResponse


class TokenUser(CamelModel):
    """Claims carried by a bearer token."""
    id: str
    email: str
    role: Role
    name: str
