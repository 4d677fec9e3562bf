"""Maintains the cached rating aggregates on ``Teacher``.

``Teacher.average_rating`` must equal the mean rating of the teacher's
current feedback rows (0.0 when there are none) and ``total_feedback`` their
count. Recomputation runs inside the caller's transaction, after the
triggering insert/delete has been flushed, and never commits on its own.
"""
from __future__ import annotations

import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.errors import NotFound
from app.models import Feedback, Teacher

logger = logging.getLogger(__name__)


def compute_aggregates(ratings: list[int]) -> tuple[float, int]:
    """Mean and count of *ratings*; ``(0.0, 0)`` for an empty list."""
    if not ratings:
        return 0.0, 0
    return sum(ratings) / len(ratings), len(ratings)


def recompute_teacher_aggregates(db: Session, teacher_id: str) -> Teacher:
    # Row lock serialises concurrent writers on dialects that support it
    # (SQLite ignores FOR UPDATE and serialises writes at the file level).
    teacher = (
        db.query(Teacher)
        .filter(Teacher.id == teacher_id)
        .with_for_update()
        .first()
    )
    if not teacher:
        raise NotFound("Teacher not found")

    count, avg = (
        db.query(func.count(Feedback.id), func.avg(Feedback.rating))
        .filter(Feedback.teacher_id == teacher_id)
        .one()
    )
    teacher.total_feedback = int(count or 0)
    teacher.average_rating = float(avg) if count else 0.0
    db.flush()

    logger.debug(
        "Recomputed aggregates for teacher %s: avg=%.3f count=%d",
        teacher_id, teacher.average_rating, teacher.total_feedback,
    )
    return teacher
