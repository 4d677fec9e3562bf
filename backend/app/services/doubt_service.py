"""Doubt lifecycle (open -> answered) and the overdue-doubt SLA view."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from app.errors import AlreadyAnswered, NotFound, ValidationFailed
from app.models import Doubt, Teacher
from app.utils.helpers import ensure_utc, utcnow
from app.utils.text_cleaning import normalize_optional_text

logger = logging.getLogger(__name__)


def _doubt_dict(doubt: Doubt, teacher_name: str | None, department: str | None) -> dict:
    return {
        "id": doubt.id,
        "teacher_id": doubt.teacher_id,
        "student_id": doubt.student_id,
        "student_name": doubt.student_name,
        "question": doubt.question,
        "answer": doubt.answer,
        "status": doubt.status,
        "created_at": doubt.created_at,
        "answered_at": doubt.answered_at,
        "teacher_name": teacher_name,
        "department": department,
    }


def answer_doubt(db: Session, doubt_id: str, answer: str | None, now: datetime | None = None) -> Doubt:
    """Record the answer; a doubt can be answered once."""
    text = normalize_optional_text(answer)
    if not text:
        raise ValidationFailed("Answer is required")

    doubt = db.query(Doubt).filter(Doubt.id == doubt_id).with_for_update().first()
    if not doubt:
        raise NotFound("Doubt not found")
    if doubt.status == "answered":
        raise AlreadyAnswered()

    doubt.answer = text
    doubt.status = "answered"
    doubt.answered_at = ensure_utc(now or utcnow())
    db.commit()
    db.refresh(doubt)
    logger.info("Doubt %s answered", doubt_id)
    return doubt


def overdue_doubts(db: Session, days: int, now: datetime | None = None) -> list[dict]:
    """Open doubts created at least *days* ago, newest first."""
    cutoff = ensure_utc(now or utcnow()) - timedelta(days=days)
    rows = (
        db.query(Doubt, Teacher.name, Teacher.department)
        .outerjoin(Teacher, Doubt.teacher_id == Teacher.id)
        .filter(Doubt.status == "open", Doubt.created_at <= cutoff)
        .order_by(Doubt.created_at.desc())
        .all()
    )
    return [_doubt_dict(d, name, department) for d, name, department in rows]


def doubts_for_student(db: Session, student_id: str) -> list[Doubt]:
    return (
        db.query(Doubt)
        .filter(Doubt.student_id == student_id)
        .order_by(Doubt.created_at.desc())
        .all()
    )


def doubts_for_teachers(db: Session, teacher_id: str | None = None) -> list[dict]:
    query = (
        db.query(Doubt, Teacher.name, Teacher.department)
        .join(Teacher, Doubt.teacher_id == Teacher.id)
    )
    if teacher_id:
        query = query.filter(Doubt.teacher_id == teacher_id)
    rows = query.order_by(Doubt.created_at.desc()).all()
    return [_doubt_dict(d, name, department) for d, name, department in rows]
