"""Threaded replies under a feedback entry."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.database import get_db
from app.errors import NotFound, PermissionDenied, ValidationFailed
from app.models import Feedback, Reply
from app.schemas.auth import TokenUser
from app.schemas.common import MessageResponse, Role
from app.schemas.reply import ReplyCreate, ReplyResponse
from app.utils.text_cleaning import normalize_optional_text

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/feedback/{feedback_id}/replies", response_model=list[ReplyResponse])
def list_replies(feedback_id: str, db: Session = Depends(get_db)):
    return (
        db.query(Reply)
        .filter(Reply.feedback_id == feedback_id)
        .order_by(Reply.created_at.asc())
        .all()
    )


@router.post("/feedback/{feedback_id}/replies", response_model=ReplyResponse, status_code=201)
def create_reply(
    feedback_id: str,
    payload: ReplyCreate,
    user: TokenUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    content = normalize_optional_text(payload.content)
    if not content:
        raise ValidationFailed("Reply content is required")
    if not db.query(Feedback.id).filter(Feedback.id == feedback_id).first():
        raise NotFound("Feedback not found")

    reply = Reply(
        feedback_id=feedback_id,
        user_id=user.id,
        user_name=user.name,
        user_role=user.role.value,
        content=content,
    )
    db.add(reply)
    db.commit()
    db.refresh(reply)
    return reply


@router.delete("/replies/{reply_id}", response_model=MessageResponse)
def delete_reply(reply_id: str, user: TokenUser = Depends(get_current_user), db: Session = Depends(get_db)):
    reply = db.query(Reply).filter(Reply.id == reply_id).first()
    if not reply:
        raise NotFound("Reply not found")
    if reply.user_id != user.id and user.role != Role.ADMIN:
        raise PermissionDenied("You can only delete your own replies")
    db.delete(reply)
    db.commit()
    logger.info("Reply %s deleted by %s", reply_id, user.id)
    return MessageResponse(message="Reply deleted")
