"""Teacher model: the people being rated.

``average_rating`` and ``total_feedback`` are a cached projection of the
teacher's feedback rows, owned by ``app.services.aggregates``.
"""
import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Text, Float, Integer, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base


class Teacher(Base):
    __tablename__ = "teachers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    department: Mapped[str] = mapped_column(String(255), nullable=False)
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    average_rating: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total_feedback: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    profile_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    office_hours: Mapped[str | None] = mapped_column(Text, nullable=True)
    contact_info: Mapped[str | None] = mapped_column(Text, nullable=True)
    teaching_philosophy: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # Relationships
    feedback = relationship("Feedback", back_populates="teacher", cascade="all, delete-orphan", lazy="dynamic")
    doubts = relationship("Doubt", back_populates="teacher", cascade="all, delete-orphan", lazy="dynamic")
    favorites = relationship("Favorite", back_populates="teacher", cascade="all, delete-orphan", lazy="dynamic")
    summaries = relationship("TeacherSummary", back_populates="teacher", cascade="all, delete-orphan", lazy="dynamic")

    __table_args__ = (
        Index("ix_teachers_department", "department"),
        Index("ix_teachers_average_rating", "average_rating"),
    )

    def __repr__(self) -> str:
        return f"<Teacher {self.name!r} ({self.subject})>"
