"""Teacher directory: list, detail, create, profile update, delete."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import require_admin, require_teacher
from app.database import get_db
from app.models import Teacher
from app.schemas.common import MessageResponse
from app.schemas.teacher import TeacherCreate, TeacherProfileUpdate, TeacherResponse

router = APIRouter()
logger = logging.getLogger(__name__)


def _get_or_404(db: Session, teacher_id: str) -> Teacher:
    teacher = db.query(Teacher).filter(Teacher.id == teacher_id).first()
    if not teacher:
        raise HTTPException(status_code=404, detail="Teacher not found")
    return teacher


@router.get("", response_model=list[TeacherResponse])
def list_teachers(db: Session = Depends(get_db)):
    return db.query(Teacher).order_by(Teacher.name).all()


@router.get("/{teacher_id}", response_model=TeacherResponse)
def get_teacher(teacher_id: str, db: Session = Depends(get_db)):
    return _get_or_404(db, teacher_id)


@router.post("", response_model=TeacherResponse, status_code=201, dependencies=[Depends(require_admin)])
def create_teacher(payload: TeacherCreate, db: Session = Depends(get_db)):
    teacher = Teacher(**payload.model_dump())
    db.add(teacher)
    db.commit()
    db.refresh(teacher)
    logger.info("Created teacher %s (%s)", teacher.id, teacher.name)
    return teacher


@router.patch("/{teacher_id}/profile", response_model=TeacherResponse, dependencies=[Depends(require_teacher)])
def update_teacher_profile(teacher_id: str, payload: TeacherProfileUpdate, db: Session = Depends(get_db)):
    teacher = _get_or_404(db, teacher_id)
    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(teacher, field, value)
    db.commit()
    db.refresh(teacher)
    return teacher


@router.delete("/{teacher_id}", response_model=MessageResponse, dependencies=[Depends(require_admin)])
def delete_teacher(teacher_id: str, db: Session = Depends(get_db)):
    teacher = _get_or_404(db, teacher_id)
    db.delete(teacher)
    db.commit()
    logger.info("Deleted teacher %s", teacher_id)
    return MessageResponse(message="Teacher deleted")
