"""Doubt schemas."""
from datetime import datetime
from app.schemas.common import CamelModel, DoubtStatus


class DoubtAnswer(CamelModel):
    answer: str | None = None


class DoubtResponse(CamelModel):
    id: str
    teacher_id: str
    student_id: str
    student_name: str
    question: str
    answer: str | None
    status: DoubtStatus
    created_at: datetime
    answered_at: datetime | None


class DoubtWithTeacher(DoubtResponse):
    teacher_name: str | None = None
    department: str | None = None
