"""Shared / common schemas: enums, camelCase base model, simple responses."""
from datetime import datetime
from enum import Enum
from pydantic import BaseModel
from pydantic.alias_generators import to_camel


# ── Enums ──────────────────────────────────────────────────────────────

class Role(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


class DoubtStatus(str, Enum):
    OPEN = "open"
    ANSWERED = "answered"


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    MIXED = "mixed"


# ── Base model ─────────────────────────────────────────────────────────

class CamelModel(BaseModel):
    """snake_case in Python, camelCase on the wire (both accepted on input)."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


# ── Common Responses ───────────────────────────────────────────────────

class MessageResponse(CamelModel):
    message: str
    detail: str | None = None


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(CamelModel):
    status: str
    version: str
    timestamp: datetime
