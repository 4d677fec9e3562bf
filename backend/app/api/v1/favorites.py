"""A student's bookmarked teachers."""
from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import require_student
from app.database import get_db
from app.errors import NotFound
from app.models import Favorite, Teacher
from app.schemas.auth import TokenUser
from app.schemas.common import MessageResponse

router = APIRouter()


@router.get("/my", response_model=list[str])
def list_favorites(user: TokenUser = Depends(require_student), db: Session = Depends(get_db)):
    rows = (
        db.query(Favorite.teacher_id)
        .filter(Favorite.student_id == user.id)
        .order_by(Favorite.created_at)
        .all()
    )
    return [r[0] for r in rows]


@router.post("/{teacher_id}", response_model=MessageResponse, status_code=201)
def add_favorite(teacher_id: str, user: TokenUser = Depends(require_student), db: Session = Depends(get_db)):
    if not db.query(Teacher.id).filter(Teacher.id == teacher_id).first():
        raise NotFound("Teacher not found")
    exists = (
        db.query(Favorite.id)
        .filter(Favorite.student_id == user.id, Favorite.teacher_id == teacher_id)
        .first()
    )
    if not exists:
        try:
            db.add(Favorite(student_id=user.id, teacher_id=teacher_id))
            db.commit()
        except IntegrityError:
            # Concurrent add of the same favorite
            db.rollback()
    return MessageResponse(message="Added to favorites")


@router.delete("/{teacher_id}", response_model=MessageResponse)
def remove_favorite(teacher_id: str, user: TokenUser = Depends(require_student), db: Session = Depends(get_db)):
    (
        db.query(Favorite)
        .filter(Favorite.student_id == user.id, Favorite.teacher_id == teacher_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return MessageResponse(message="Removed from favorites")
