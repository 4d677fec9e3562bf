"""Admin moderation: overdue doubts, flagged feedback, feedback deletion."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.config import get_settings
from app.database import get_db
from app.schemas.common import MessageResponse
from app.schemas.doubt import DoubtWithTeacher
from app.schemas.feedback import FeedbackWithTeacher
from app.services import doubt_service, moderation
from app.services.moderation import AbuseFilter, get_abuse_filter

router = APIRouter(dependencies=[Depends(require_admin)])


@router.get("/doubts/overdue", response_model=list[DoubtWithTeacher])
def overdue_doubts(days: int | None = Query(None, ge=0), db: Session = Depends(get_db)):
    threshold = get_settings().OVERDUE_DOUBT_DAYS if days is None else days
    return doubt_service.overdue_doubts(db, threshold)


@router.get("/feedback/flagged", response_model=list[FeedbackWithTeacher])
def flagged_feedback(
    db: Session = Depends(get_db),
    abuse_filter: AbuseFilter = Depends(get_abuse_filter),
):
    return moderation.flagged_feedback(db, abuse_filter)


@router.delete("/feedback/{feedback_id}", response_model=MessageResponse)
def delete_feedback(feedback_id: str, db: Session = Depends(get_db)):
    moderation.delete_feedback(db, feedback_id)
    return MessageResponse(message="Feedback deleted")
