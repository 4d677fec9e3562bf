"""Read-only reporting views over feedback and teachers.

Trends, monthly rollups, department comparison, leaderboards, the activity
feed and the student reminder. Every function is side-effect free; grouping
by calendar day/month happens in Python so the same code runs on SQLite and
PostgreSQL.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, time, timedelta, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models import Feedback, Teacher
from app.services.aggregates import compute_aggregates
from app.utils.helpers import ensure_utc, utcnow

logger = logging.getLogger(__name__)

REMINDER_THRESHOLD_DAYS = 7
MIN_FEEDBACK_FOR_IMPROVEMENT = 3


def teacher_to_dict(teacher: Teacher) -> dict:
    return {
        "id": teacher.id,
        "name": teacher.name,
        "department": teacher.department,
        "subject": teacher.subject,
        "average_rating": teacher.average_rating or 0.0,
        "total_feedback": teacher.total_feedback or 0,
        "bio": teacher.bio,
        "profile_image": teacher.profile_image,
        "office_hours": teacher.office_hours,
        "contact_info": teacher.contact_info,
        "teaching_philosophy": teacher.teaching_philosophy,
        "created_at": teacher.created_at,
    }


def feedback_to_dict(fb: Feedback, teacher_name: str | None = None, department: str | None = None) -> dict:
    return {
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
    }


def _bucket(rows: list[tuple[int, datetime]], fmt: str) -> list[tuple[str, int, float]]:
    buckets: dict[str, list[int]] = defaultdict(list)
    for rating, created_at in rows:
        buckets[ensure_utc(created_at).strftime(fmt)].append(rating)
    out = []
    for key in sorted(buckets):
        avg, count = compute_aggregates(buckets[key])
        out.append((key, count, round(avg, 4)))
    return out


# ── Trends ────────────────────────────────────────────────────────────

def feedback_trends(
    db: Session,
    teacher_id: str,
    start_date: date | None = None,
    end_date: date | None = None,
) -> list[dict]:
    """Per-day count and mean rating; both window bounds are inclusive days."""
    query = db.query(Feedback.rating, Feedback.created_at).filter(Feedback.teacher_id == teacher_id)
    if start_date:
        query = query.filter(Feedback.created_at >= datetime.combine(start_date, time.min, tzinfo=timezone.utc))
    if end_date:
        next_day = end_date + timedelta(days=1)
        query = query.filter(Feedback.created_at < datetime.combine(next_day, time.min, tzinfo=timezone.utc))
    return [
        {"date": day, "count": count, "avg_rating": avg}
        for day, count, avg in _bucket(query.all(), "%Y-%m-%d")
    ]


def monthly_performance(db: Session, teacher_id: str) -> list[dict]:
    rows = db.query(Feedback.rating, Feedback.created_at).filter(Feedback.teacher_id == teacher_id).all()
    return [
        {"month": month, "count": count, "avg_rating": avg}
        for month, count, avg in _bucket(rows, "%Y-%m")
    ]


def department_comparison(db: Session) -> list[dict]:
    rows = (
        db.query(
            Teacher.department,
            func.avg(Teacher.average_rating),
            func.sum(Teacher.total_feedback),
        )
        .group_by(Teacher.department)
        .order_by(Teacher.department)
        .all()
    )
    return [
        {
            "department": department,
            "avg_rating": round(float(avg or 0.0), 4),
            "total_feedback": int(total or 0),
        }
        for department, avg, total in rows
    ]


# ── Leaderboards ──────────────────────────────────────────────────────

def _ranked(teachers: list[Teacher]) -> list[dict]:
    return [{**teacher_to_dict(t), "rank": i + 1} for i, t in enumerate(teachers)]


def top_rated(db: Session, limit: int = 10) -> list[dict]:
    teachers = (
        db.query(Teacher)
        .filter(Teacher.average_rating > 0)
        .order_by(Teacher.average_rating.desc(), Teacher.total_feedback.desc(), Teacher.name)
        .limit(limit)
        .all()
    )
    return _ranked(teachers)


def most_feedback(db: Session, limit: int = 10) -> list[dict]:
    teachers = (
        db.query(Teacher)
        .filter(Teacher.total_feedback > 0)
        .order_by(Teacher.total_feedback.desc(), Teacher.average_rating.desc(), Teacher.name)
        .limit(limit)
        .all()
    )
    return _ranked(teachers)


def most_improved(
    db: Session,
    limit: int = 10,
    window_days: int = 30,
    now: datetime | None = None,
) -> list[dict]:
    """Rank teachers by mean rating over the trailing window minus the window before it.

    A teacher qualifies with at least one rating in each window and at least
    ``MIN_FEEDBACK_FOR_IMPROVEMENT`` across both; only positive deltas are listed.
    """
    now = ensure_utc(now or utcnow())
    recent_start = now - timedelta(days=window_days)
    previous_start = recent_start - timedelta(days=window_days)

    rows = (
        db.query(Feedback.teacher_id, Feedback.rating, Feedback.created_at)
        .filter(Feedback.created_at >= previous_start, Feedback.created_at <= now)
        .all()
    )
    recent: dict[str, list[int]] = defaultdict(list)
    previous: dict[str, list[int]] = defaultdict(list)
    for teacher_id, rating, created_at in rows:
        if ensure_utc(created_at) >= recent_start:
            recent[teacher_id].append(rating)
        else:
            previous[teacher_id].append(rating)

    scored: list[tuple[str, float, float, float]] = []
    for teacher_id, recent_ratings in recent.items():
        previous_ratings = previous.get(teacher_id)
        if not previous_ratings:
            continue
        if len(recent_ratings) + len(previous_ratings) < MIN_FEEDBACK_FOR_IMPROVEMENT:
            continue
        recent_avg, _ = compute_aggregates(recent_ratings)
        previous_avg, _ = compute_aggregates(previous_ratings)
        delta = recent_avg - previous_avg
        if delta > 0:
            scored.append((teacher_id, delta, recent_avg, previous_avg))

    scored.sort(key=lambda s: (-s[1], -s[2]))
    scored = scored[:limit]
    if not scored:
        return []

    teachers = {t.id: t for t in db.query(Teacher).filter(Teacher.id.in_([s[0] for s in scored])).all()}
    out = []
    for teacher_id, delta, recent_avg, previous_avg in scored:
        teacher = teachers.get(teacher_id)
        if teacher is None:
            continue
        out.append({
            **teacher_to_dict(teacher),
            "rank": len(out) + 1,
            "improvement": round(delta, 4),
            "recent_average": round(recent_avg, 4),
            "previous_average": round(previous_avg, 4),
        })
    return out


# ── Feeds ─────────────────────────────────────────────────────────────

def recent_activity(db: Session, limit: int = 20) -> list[dict]:
    rows = (
        db.query(Feedback, Teacher.name, Teacher.department)
        .outerjoin(Teacher, Feedback.teacher_id == Teacher.id)
        .order_by(Feedback.created_at.desc())
        .limit(limit)
        .all()
    )
    return [feedback_to_dict(fb, name, department) for fb, name, department in rows]


def feedback_for_teacher(db: Session, teacher_id: str) -> list[Feedback]:
    return (
        db.query(Feedback)
        .filter(Feedback.teacher_id == teacher_id)
        .order_by(Feedback.created_at.desc())
        .all()
    )


def received_feedback(db: Session, teacher_id: str | None = None) -> list[dict]:
    query = (
        db.query(Feedback, Teacher.name, Teacher.department)
        .join(Teacher, Feedback.teacher_id == Teacher.id)
    )
    if teacher_id:
        query = query.filter(Feedback.teacher_id == teacher_id)
    rows = query.order_by(Feedback.created_at.desc()).all()
    return [feedback_to_dict(fb, name, department) for fb, name, department in rows]


def student_feedback(db: Session, student_id: str) -> list[dict]:
    rows = (
        db.query(Feedback, Teacher)
        .outerjoin(Teacher, Feedback.teacher_id == Teacher.id)
        .filter(Feedback.student_id == student_id)
        .order_by(Feedback.created_at.desc())
        .all()
    )
    out = []
    for fb, teacher in rows:
        item = feedback_to_dict(fb, teacher.name if teacher else None, teacher.department if teacher else None)
        if teacher:
            item["subject"] = teacher.subject
        out.append(item)
    return out


def submitted_teacher_ids(db: Session, student_id: str) -> list[str]:
    rows = db.query(Feedback.teacher_id).filter(Feedback.student_id == student_id).all()
    return [r[0] for r in rows]


def reminder_status(db: Session, student_id: str, now: datetime | None = None) -> dict:
    last = (
        db.query(func.max(Feedback.created_at))
        .filter(Feedback.student_id == student_id)
        .scalar()
    )
    if last is None:
        return {"needs_reminder": True, "last_feedback_date": None, "days_since_last_feedback": None}

    last = ensure_utc(last)
    now = ensure_utc(now or utcnow())
    days_since = int((now - last).total_seconds() // 86400)
    return {
        "needs_reminder": days_since >= REMINDER_THRESHOLD_DAYS,
        "last_feedback_date": last,
        "days_since_last_feedback": days_since,
    }
