"""Reporting views: per-teacher trends, monthly rollups, department comparison."""
from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from app.database import get_db
from app.models import Teacher
from app.schemas.analytics import DepartmentComparison, MonthlyPoint, TrendPoint
from app.services import reporting

router = APIRouter()


def _require_teacher_row(db: Session, teacher_id: str) -> None:
    if not db.query(Teacher.id).filter(Teacher.id == teacher_id).first():
        raise HTTPException(status_code=404, detail="Teacher not found")


@router.get("/teacher/{teacher_id}/trends", response_model=list[TrendPoint])
def teacher_trends(
    teacher_id: str,
    start_date: date | None = Query(None, alias="startDate"),
    end_date: date | None = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
):
    _require_teacher_row(db, teacher_id)
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="startDate must not be after endDate")
    return reporting.feedback_trends(db, teacher_id, start_date, end_date)


@router.get("/teacher/{teacher_id}/monthly", response_model=list[MonthlyPoint])
def teacher_monthly(teacher_id: str, db: Session = Depends(get_db)):
    _require_teacher_row(db, teacher_id)
    return reporting.monthly_performance(db, teacher_id)


@router.get("/departments/comparison", response_model=list[DepartmentComparison])
def departments_comparison(db: Session = Depends(get_db)):
    return reporting.department_comparison(db)
