"""Persistence for AI output: per-feedback analyses, teacher summaries, chat history."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from app.models import ChatHistory, FeedbackAnalysis, TeacherSummary
from app.services.ai_service import FeedbackSummary, QualityScore, SentimentAnalysis
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)

CHAT_HISTORY_TURNS = 5


def save_feedback_analysis(
    db: Session,
    feedback_id: str,
    sentiment: SentimentAnalysis,
    quality: QualityScore,
) -> FeedbackAnalysis:
    """Insert or overwrite the analysis row for *feedback_id*."""
    analysis = db.query(FeedbackAnalysis).filter(FeedbackAnalysis.feedback_id == feedback_id).first()
    if analysis is None:
        analysis = FeedbackAnalysis(feedback_id=feedback_id)
        db.add(analysis)
    analysis.sentiment = sentiment.sentiment
    analysis.sentiment_score = sentiment.score
    analysis.keywords = list(sentiment.keywords)
    analysis.quality_score = quality.score
    analysis.analyzed_at = utcnow()
    db.commit()
    db.refresh(analysis)
    return analysis


def get_feedback_analysis(db: Session, feedback_id: str) -> FeedbackAnalysis | None:
    return db.query(FeedbackAnalysis).filter(FeedbackAnalysis.feedback_id == feedback_id).first()


def save_teacher_summary(db: Session, teacher_id: str, summary: FeedbackSummary) -> TeacherSummary:
    row = TeacherSummary(
        teacher_id=teacher_id,
        summary=summary.summary,
        strengths=list(summary.strengths),
        improvements=list(summary.improvements),
        overall_sentiment=summary.overall_sentiment,
        generated_at=utcnow(),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Stored summary %s for teacher %s", row.id, teacher_id)
    return row


def latest_teacher_summary(db: Session, teacher_id: str) -> TeacherSummary | None:
    return (
        db.query(TeacherSummary)
        .filter(TeacherSummary.teacher_id == teacher_id)
        .order_by(TeacherSummary.generated_at.desc())
        .first()
    )


def recent_chat_turns(db: Session, user_id: str | None, turns: int = CHAT_HISTORY_TURNS) -> list[tuple[str, str]]:
    """Last *turns* exchanges for *user_id* as ``(role, content)`` pairs, oldest first."""
    if not user_id:
        return []
    rows = (
        db.query(ChatHistory)
        .filter(ChatHistory.user_id == user_id)
        .order_by(ChatHistory.created_at.desc())
        .limit(turns)
        .all()
    )
    history: list[tuple[str, str]] = []
    for row in reversed(rows):
        history.append(("user", row.message))
        history.append(("assistant", row.response))
    return history


def save_chat_turn(db: Session, user_id: str | None, message: str, response: str) -> ChatHistory:
    row = ChatHistory(user_id=user_id, message=message, response=response, created_at=utcnow())
    db.add(row)
    db.commit()
    return row
