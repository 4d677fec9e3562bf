"""Feedback submission (account and QR kiosk) and feedback listings."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, require_student, require_teacher
from app.config import get_settings
from app.database import get_db
from app.schemas.auth import TokenUser
from app.schemas.feedback import (
    FeedbackCreate,
    FeedbackResponse,
    FeedbackWithTeacher,
    QrFeedbackCreate,
    ReminderStatus,
)
from app.services import feedback_service, reporting
from app.services.moderation import AbuseFilter, get_abuse_filter

router = APIRouter()
qr_router = APIRouter()


@router.post("", response_model=FeedbackResponse, status_code=201)
def submit_feedback(
    payload: FeedbackCreate,
    user: TokenUser = Depends(require_student),
    db: Session = Depends(get_db),
    abuse_filter: AbuseFilter = Depends(get_abuse_filter),
):
    return feedback_service.submit_feedback(db, user, payload, abuse_filter)


@router.get("/teacher/{teacher_id}", response_model=list[FeedbackResponse])
def list_teacher_feedback(teacher_id: str, db: Session = Depends(get_db)):
    return reporting.feedback_for_teacher(db, teacher_id)


@router.get("/my-submissions", response_model=list[str])
def my_submissions(user: TokenUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """Teacher ids the caller has already rated."""
    return reporting.submitted_teacher_ids(db, user.id)


@router.get("/my", response_model=list[FeedbackWithTeacher])
def my_feedback(user: TokenUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return reporting.student_feedback(db, user.id)


@router.get("/reminder-status", response_model=ReminderStatus)
def reminder_status(user: TokenUser = Depends(require_student), db: Session = Depends(get_db)):
    return reporting.reminder_status(db, user.id)


@router.get("/received", response_model=list[FeedbackWithTeacher], dependencies=[Depends(require_teacher)])
def received_feedback(
    teacher_id: str | None = Query(None, alias="teacherId"),
    db: Session = Depends(get_db),
):
    return reporting.received_feedback(db, teacher_id)


@qr_router.post("/qr-feedback/{teacher_id}", response_model=FeedbackResponse, status_code=201)
def submit_qr_feedback(
    teacher_id: str,
    payload: QrFeedbackCreate,
    db: Session = Depends(get_db),
    abuse_filter: AbuseFilter = Depends(get_abuse_filter),
):
    """Unauthenticated kiosk submission; never duplicate-checked."""
    return feedback_service.submit_qr_feedback(
        db,
        teacher_id,
        payload.rating,
        payload.comment,
        abuse_filter,
        get_settings().QR_FEEDBACK_EMAIL,
    )
