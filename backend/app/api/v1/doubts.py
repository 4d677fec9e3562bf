"""Student doubts: own list, teacher inbox, answering."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, require_teacher
from app.database import get_db
from app.schemas.auth import TokenUser
from app.schemas.doubt import DoubtAnswer, DoubtResponse, DoubtWithTeacher
from app.services import doubt_service

router = APIRouter()


@router.get("/my", response_model=list[DoubtResponse])
def my_doubts(user: TokenUser = Depends(get_current_user), db: Session = Depends(get_db)):
    return doubt_service.doubts_for_student(db, user.id)


@router.get("/teacher", response_model=list[DoubtWithTeacher], dependencies=[Depends(require_teacher)])
def teacher_doubts(
    teacher_id: str | None = Query(None, alias="teacherId"),
    db: Session = Depends(get_db),
):
    return doubt_service.doubts_for_teachers(db, teacher_id)


@router.post("/{doubt_id}/answer", response_model=DoubtResponse, dependencies=[Depends(require_teacher)])
def answer_doubt(doubt_id: str, payload: DoubtAnswer, db: Session = Depends(get_db)):
    return doubt_service.answer_doubt(db, doubt_id, payload.answer)
