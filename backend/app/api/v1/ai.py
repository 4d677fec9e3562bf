"""AI helper endpoints.

Inference failures never turn into 5xx here: the service layer returns a
fallback ``AIResult`` and the response carries ``fallback: true`` where the
schema has room for it.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_optional_user, require_student, require_teacher
from app.database import get_db
from app.errors import NotFound
from app.models import Feedback, Teacher
from app.schemas.ai import (
    AnalyzeFeedbackResponse,
    ChatRequest,
    ChatResponse,
    CommentRequest,
    FeedbackAnalysisResponse,
    ImproveFeedbackResponse,
    RecommendRequest,
    RecommendResponse,
    Recommendation,
    ReplyTemplatesResponse,
    TeacherSummaryResponse,
)
from app.schemas.auth import TokenUser
from app.services import ai_service, ai_store
from app.services.reporting import teacher_to_dict

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/analyze-feedback/{feedback_id}",
    response_model=AnalyzeFeedbackResponse,
    dependencies=[Depends(get_current_user)],
)
async def analyze_feedback(feedback_id: str, db: Session = Depends(get_db)):
    fb = db.query(Feedback).filter(Feedback.id == feedback_id).first()
    if not fb:
        raise NotFound("Feedback not found")

    sentiment = await ai_service.analyze_sentiment(fb.comment)
    quality = await ai_service.score_feedback_quality(fb.comment, fb.rating)
    if sentiment.ok and quality.ok:
        ai_store.save_feedback_analysis(db, fb.id, sentiment.value, quality.value)

    return AnalyzeFeedbackResponse(
        sentiment=sentiment.value.sentiment,
        sentiment_score=sentiment.value.score,
        keywords=list(sentiment.value.keywords),
        quality_score=quality.value.score,
        quality_reasoning=quality.value.reasoning,
        fallback=not (sentiment.ok and quality.ok),
    )


@router.get("/feedback-analysis/{feedback_id}", response_model=FeedbackAnalysisResponse)
def get_feedback_analysis(feedback_id: str, db: Session = Depends(get_db)):
    analysis = ai_store.get_feedback_analysis(db, feedback_id)
    if not analysis:
        raise NotFound("Analysis not found")
    return FeedbackAnalysisResponse(
        sentiment=analysis.sentiment,
        sentiment_score=analysis.sentiment_score,
        quality_score=analysis.quality_score,
        keywords=analysis.keywords or [],
        analyzed_at=analysis.analyzed_at,
    )


@router.post(
    "/teacher-summary/{teacher_id}",
    response_model=TeacherSummaryResponse,
    dependencies=[Depends(require_teacher)],
)
async def generate_teacher_summary(teacher_id: str, db: Session = Depends(get_db)):
    if not db.query(Teacher.id).filter(Teacher.id == teacher_id).first():
        raise NotFound("Teacher not found")

    rows = db.query(Feedback.rating, Feedback.comment).filter(Feedback.teacher_id == teacher_id).all()
    result = await ai_service.generate_feedback_summary([(r, c) for r, c in rows])
    summary = result.value

    generated_at = None
    if result.ok:
        generated_at = ai_store.save_teacher_summary(db, teacher_id, summary).generated_at

    return TeacherSummaryResponse(
        summary=summary.summary,
        strengths=list(summary.strengths),
        improvements=list(summary.improvements),
        overall_sentiment=summary.overall_sentiment,
        generated_at=generated_at,
        fallback=not result.ok,
    )


@router.get("/teacher-summary/{teacher_id}", response_model=TeacherSummaryResponse)
def get_teacher_summary(teacher_id: str, db: Session = Depends(get_db)):
    row = ai_store.latest_teacher_summary(db, teacher_id)
    if not row:
        raise NotFound("No summary generated yet")
    return TeacherSummaryResponse(
        summary=row.summary,
        strengths=row.strengths or [],
        improvements=row.improvements or [],
        overall_sentiment=row.overall_sentiment,
        generated_at=row.generated_at,
    )


@router.post("/recommend-teachers", response_model=RecommendResponse, dependencies=[Depends(require_student)])
async def recommend_teachers(payload: RecommendRequest, db: Session = Depends(get_db)):
    teachers = [teacher_to_dict(t) for t in db.query(Teacher).order_by(Teacher.name).all()]
    result = await ai_service.recommend_teachers(payload.preferences, teachers)
    return RecommendResponse(
        recommendations=[
            Recommendation(teacher_id=r.teacher_id, score=r.score, reasoning=r.reasoning)
            for r in result.value
        ]
    )


@router.post(
    "/improve-feedback",
    response_model=ImproveFeedbackResponse,
    dependencies=[Depends(get_current_user)],
)
async def improve_feedback(payload: CommentRequest):
    result = await ai_service.improve_feedback(payload.comment or "")
    return ImproveFeedbackResponse(improved_comment=result.value)


@router.post(
    "/reply-templates",
    response_model=ReplyTemplatesResponse,
    dependencies=[Depends(require_teacher)],
)
async def reply_templates(payload: CommentRequest):
    result = await ai_service.generate_reply_templates(payload.comment or "")
    return ReplyTemplatesResponse(templates=result.value)


@router.post("/chat", response_model=ChatResponse)
async def chat(
    payload: ChatRequest,
    user: TokenUser | None = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    user_id = user.id if user else None
    history = ai_store.recent_chat_turns(db, user_id)
    result = await ai_service.chatbot(payload.message, history)
    if result.ok:
        ai_store.save_chat_turn(db, user_id, payload.message, result.value)
    return ChatResponse(response=result.value)
