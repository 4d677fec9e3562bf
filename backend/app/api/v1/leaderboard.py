"""Leaderboards and the recent-activity feed."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.config import get_settings
from app.database import get_db
from app.schemas.feedback import FeedbackWithTeacher
from app.schemas.teacher import ImprovedTeacher, RankedTeacher
from app.services import reporting

router = APIRouter()


@router.get("/leaderboard/top-rated", response_model=list[RankedTeacher])
def top_rated(limit: int = Query(10, ge=1, le=100), db: Session = Depends(get_db)):
    return reporting.top_rated(db, limit)


@router.get("/leaderboard/most-feedback", response_model=list[RankedTeacher])
def most_feedback(limit: int = Query(10, ge=1, le=100), db: Session = Depends(get_db)):
    return reporting.most_feedback(db, limit)


@router.get("/leaderboard/most-improved", response_model=list[ImprovedTeacher])
def most_improved(limit: int = Query(10, ge=1, le=100), db: Session = Depends(get_db)):
    """Trailing-window mean minus the preceding window's mean, positive deltas only."""
    return reporting.most_improved(db, limit, window_days=get_settings().IMPROVEMENT_WINDOW_DAYS)


@router.get("/activity/recent", response_model=list[FeedbackWithTeacher])
def recent_activity(limit: int = Query(20, ge=1, le=100), db: Session = Depends(get_db)):
    return reporting.recent_activity(db, limit)
