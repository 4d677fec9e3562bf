"""Feedback submission and listing schemas."""
from datetime import datetime
from pydantic import Field, StrictInt
from app.schemas.common import CamelModel


class FeedbackCreate(CamelModel):
    teacher_id: str = Field(..., min_length=1)
    rating: StrictInt
    comment: str | None = None
    anonymous: bool = False
    doubt: str | None = None


class QrFeedbackCreate(CamelModel):
    rating: StrictInt
    comment: str | None = None


class FeedbackResponse(CamelModel):
    id: str
    teacher_id: str
    student_id: str
    student_name: str
    rating: int
    comment: str | None
    subject: str | None
    created_at: datetime


class FeedbackWithTeacher(FeedbackResponse):
    teacher_name: str
    department: str | None = None


class ReminderStatus(CamelModel):
    needs_reminder: bool
    last_feedback_date: datetime | None
    days_since_last_feedback: int | None
