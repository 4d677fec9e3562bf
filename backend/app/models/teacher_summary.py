"""TeacherSummary model: AI-generated digests of a teacher's feedback (append-only)."""
import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Text, DateTime, JSON, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base


class TeacherSummary(Base):
    __tablename__ = "teacher_summaries"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    teacher_id: Mapped[str] = mapped_column(String(36), ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    strengths: Mapped[list | None] = mapped_column(JSON, nullable=True)
    improvements: Mapped[list | None] = mapped_column(JSON, nullable=True)
    overall_sentiment: Mapped[str | None] = mapped_column(String(20), nullable=True)
    generated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # Relationships
    teacher = relationship("Teacher", back_populates="summaries")

    __table_args__ = (
        Index("ix_teacher_summaries_teacher_generated", "teacher_id", "generated_at"),
    )
