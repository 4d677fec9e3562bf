"""Feedback submission: validation, duplicate guard, persistence.

Two entry points share one validator:

- ``submit_feedback``: authenticated students; one row per (teacher, student),
  enforced by the ``uq_feedback_teacher_student_account`` index. The
  existence check beforehand only gives a fast, friendly rejection.
- ``submit_qr_feedback``: unauthenticated kiosk path; rows belong to a
  shared synthetic account and are never duplicate-checked.

The feedback insert, the optional doubt and the aggregate refresh are
committed together.
"""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.errors import AppError, DuplicateFeedback, NotFound, ValidationFailed
from app.models import Doubt, Feedback, Teacher, User
from app.models.feedback import ACCOUNT_CHANNEL, QR_CHANNEL
from app.schemas.auth import TokenUser
from app.schemas.feedback import FeedbackCreate
from app.services.aggregates import recompute_teacher_aggregates
from app.services.auth_service import get_user_by_email, hash_password
from app.services.moderation import ABUSE_REJECTION_MESSAGE, AbuseFilter
from app.utils.text_cleaning import normalize_optional_text

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5
ANONYMOUS_NAME = "Anonymous Student"
QR_STUDENT_NAME = "QR Student"
QR_ACCOUNT_NAME = "QR Feedback Student"
QR_ACCOUNT_DEPARTMENT = "QR"
DUPLICATE_INDEX = "uq_feedback_teacher_student_account"


@dataclass(frozen=True)
class NormalizedSubmission:
    rating: int
    comment: str | None


def validate_submission(rating, comment: str | None, abuse_filter: AbuseFilter) -> NormalizedSubmission:
    """Check rating bounds and comment content; no database access."""
    if isinstance(rating, bool) or not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
        raise ValidationFailed(f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}")

    comment = normalize_optional_text(comment)
    if comment and abuse_filter.is_abusive(comment):
        logger.info("Rejected feedback: inappropriate language (%s)", ", ".join(abuse_filter.matches(comment)))
        raise ValidationFailed(ABUSE_REJECTION_MESSAGE)

    return NormalizedSubmission(rating=rating, comment=comment)


def has_feedback(db: Session, teacher_id: str, student_id: str) -> bool:
    return (
        db.query(Feedback.id)
        .filter(
            Feedback.teacher_id == teacher_id,
            Feedback.student_id == student_id,
            Feedback.channel == ACCOUNT_CHANNEL,
        )
        .first()
        is not None
    )


def _is_duplicate_violation(db: Session, exc: IntegrityError, teacher_id: str, student_id: str) -> bool:
    """True when *exc* comes from the one-per-student index.

    PostgreSQL names the index in the message; SQLite only lists the
    columns, so fall back to checking for the committed row.
    """
    if DUPLICATE_INDEX in str(exc.orig):
        return True
    row = (
        db.query(Feedback.id)
        .filter(
            Feedback.teacher_id == teacher_id,
            Feedback.student_id == student_id,
            Feedback.channel == ACCOUNT_CHANNEL,
        )
        .first()
    )
    return row is not None


def _get_teacher(db: Session, teacher_id: str) -> Teacher:
    teacher = db.query(Teacher).filter(Teacher.id == teacher_id).first()
    if not teacher:
        raise NotFound("Teacher not found")
    return teacher


def submit_feedback(
    db: Session,
    user: TokenUser,
    payload: FeedbackCreate,
    abuse_filter: AbuseFilter,
) -> Feedback:
    submission = validate_submission(payload.rating, payload.comment, abuse_filter)
    teacher = _get_teacher(db, payload.teacher_id)

    if has_feedback(db, teacher.id, user.id):
        logger.info("Rejected feedback: duplicate (teacher=%s student=%s)", teacher.id, user.id)
        raise DuplicateFeedback()

    display_name = ANONYMOUS_NAME if payload.anonymous else user.name
    fb = Feedback(
        teacher_id=teacher.id,
        student_id=user.id,
        student_name=display_name,
        rating=submission.rating,
        comment=submission.comment,
        subject=teacher.subject,
        channel=ACCOUNT_CHANNEL,
    )
    try:
        db.add(fb)
        db.flush()

        question = normalize_optional_text(payload.doubt)
        if question:
            db.add(Doubt(
                teacher_id=teacher.id,
                student_id=user.id,
                student_name=display_name,
                question=question,
                status="open",
            ))

        recompute_teacher_aggregates(db, teacher.id)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        if not _is_duplicate_violation(db, exc, teacher.id, user.id):
            raise
        # Lost the race against a concurrent submission from the same student
        logger.info("Rejected feedback: duplicate at insert (teacher=%s student=%s)", teacher.id, user.id)
        raise DuplicateFeedback()
    except Exception:
        db.rollback()
        raise

    db.refresh(fb)
    logger.info("Feedback %s accepted for teacher %s (rating=%d)", fb.id, teacher.id, fb.rating)
    return fb


def _check_qr_account(user: User) -> User:
    if user.role != "student" or user.department != QR_ACCOUNT_DEPARTMENT or user.name != QR_ACCOUNT_NAME:
        logger.error("QR feedback email %s belongs to a non-kiosk account (role=%s)", user.email, user.role)
        raise AppError("QR feedback is unavailable")
    return user


def get_or_create_qr_account(db: Session, qr_email: str) -> User:
    """Synthetic student that owns every kiosk submission; created on first use."""
    user = get_user_by_email(db, qr_email)
    if user:
        return _check_qr_account(user)
    user = User(
        name=QR_ACCOUNT_NAME,
        email=qr_email.strip().lower(),
        username=qr_email.split("@")[0],
        # Nobody signs in as the kiosk account
        password_hash=hash_password(secrets.token_urlsafe(32)),
        role="student",
        department=QR_ACCOUNT_DEPARTMENT,
    )
    try:
        db.add(user)
        db.commit()
    except IntegrityError:
        db.rollback()
        return _check_qr_account(get_user_by_email(db, qr_email))
    db.refresh(user)
    logger.info("Created QR feedback account %s", qr_email)
    return user


def submit_qr_feedback(
    db: Session,
    teacher_id: str,
    rating,
    comment: str | None,
    abuse_filter: AbuseFilter,
    qr_email: str,
) -> Feedback:
    submission = validate_submission(rating, comment, abuse_filter)
    teacher = _get_teacher(db, teacher_id)
    qr_user = get_or_create_qr_account(db, qr_email)

    fb = Feedback(
        teacher_id=teacher.id,
        student_id=qr_user.id,
        student_name=QR_STUDENT_NAME,
        rating=submission.rating,
        comment=submission.comment,
        subject=teacher.subject,
        channel=QR_CHANNEL,
    )
    try:
        db.add(fb)
        db.flush()
        recompute_teacher_aggregates(db, teacher.id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(fb)
    logger.info("QR feedback %s accepted for teacher %s (rating=%d)", fb.id, teacher.id, fb.rating)
    return fb
