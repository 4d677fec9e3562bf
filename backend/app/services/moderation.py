"""Abusive-language filtering and the admin moderation queue.

The deny-list is an immutable ``AbuseFilter`` built once per process from
``ABUSE_WORDS`` and handed to whoever needs it. Submission-time rejection and
the moderation re-scan use the same filter, so content accepted before the
list changed still surfaces in ``flagged_feedback``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

from sqlalchemy.orm import Session

from app.config import get_settings
from app.errors import NotFound
from app.models import Feedback, Teacher
from app.services.aggregates import recompute_teacher_aggregates

logger = logging.getLogger(__name__)

DEFAULT_ABUSIVE_WORDS: tuple[str, ...] = ("idiot", "stupid", "dumb", "bastard", "bloody", "fuck", "shit")

ABUSE_REJECTION_MESSAGE = "Please remove inappropriate language from your feedback before submitting."


@dataclass(frozen=True)
class AbuseFilter:
    words: tuple[str, ...]

    def matches(self, text: str | None) -> list[str]:
        """Deny-list entries contained in *text* (case-insensitive substring)."""
        if not text:
            return []
        lower = text.lower()
        return [w for w in self.words if w in lower]

    def is_abusive(self, text: str | None) -> bool:
        return bool(self.matches(text))


def build_abuse_filter(raw: str | None) -> AbuseFilter:
    """Parse a comma-separated override; empty means the built-in list."""
    words = tuple(w.strip().lower() for w in (raw or "").split(",") if w.strip())
    return AbuseFilter(words=words or DEFAULT_ABUSIVE_WORDS)


@lru_cache
def get_abuse_filter() -> AbuseFilter:
    """Process-wide filter (FastAPI dependency)."""
    abuse_filter = build_abuse_filter(get_settings().ABUSE_WORDS)
    logger.info("Abuse filter loaded with %d term(s)", len(abuse_filter.words))
    return abuse_filter


# ── Moderation queue ──────────────────────────────────────────────────

def flagged_feedback(db: Session, abuse_filter: AbuseFilter) -> list[dict]:
    """Feedback whose comment hits the deny-list, newest first, with teacher info."""
    rows = (
        db.query(Feedback, Teacher.name, Teacher.department)
        .outerjoin(Teacher, Feedback.teacher_id == Teacher.id)
        .filter(Feedback.comment.isnot(None))
        .order_by(Feedback.created_at.desc())
        .all()
    )
    flagged = []
    for fb, teacher_name, department in rows:
        if not abuse_filter.is_abusive(fb.comment):
            continue
        flagged.append({
            "id": fb.id,
            "teacher_id": fb.teacher_id,
            "student_id": fb.student_id,
            "student_name": fb.student_name,
            "rating": fb.rating,
            "comment": fb.comment,
            "subject": fb.subject,
            "created_at": fb.created_at,
            "teacher_name": teacher_name or "Unknown Teacher",
            "department": department,
        })
    return flagged


def delete_feedback(db: Session, feedback_id: str) -> str:
    """Remove a feedback row and refresh its teacher's aggregates atomically.

    Returns the affected teacher id.
    """
    fb = db.query(Feedback).filter(Feedback.id == feedback_id).first()
    if not fb:
        raise NotFound("Feedback not found")

    teacher_id = fb.teacher_id
    try:
        db.delete(fb)
        db.flush()
        recompute_teacher_aggregates(db, teacher_id)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Deleted feedback %s (teacher %s)", feedback_id, teacher_id)
    return teacher_id
