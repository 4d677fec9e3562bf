"""Feedback model: one student rating (and optional comment) of a teacher."""
import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Text, Integer, DateTime, ForeignKey, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base

ACCOUNT_CHANNEL = "account"
QR_CHANNEL = "qr"


class Feedback(Base):
    __tablename__ = "feedback"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    teacher_id: Mapped[str] = mapped_column(String(36), ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False)
    student_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    student_name: Mapped[str] = mapped_column(String(255), nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)  # 1-5
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    subject: Mapped[str | None] = mapped_column(String(255), nullable=True)
    channel: Mapped[str] = mapped_column(String(20), nullable=False, default=ACCOUNT_CHANNEL)  # account | qr
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # Relationships
    teacher = relationship("Teacher", back_populates="feedback")
    student = relationship("User", back_populates="feedback")
    replies = relationship("Reply", back_populates="feedback", cascade="all, delete-orphan", lazy="dynamic")
    analysis = relationship("FeedbackAnalysis", back_populates="feedback", cascade="all, delete-orphan", uselist=False)

    __table_args__ = (
        # One authenticated submission per (teacher, student); kiosk rows share
        # a synthetic student and are exempt.
        Index(
            "uq_feedback_teacher_student_account",
            "teacher_id",
            "student_id",
            unique=True,
            sqlite_where=text("channel = 'account'"),
            postgresql_where=text("channel = 'account'"),
        ),
        Index("ix_feedback_teacher_id", "teacher_id"),
        Index("ix_feedback_student_id", "student_id"),
        Index("ix_feedback_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Feedback rating={self.rating} teacher={self.teacher_id[:8]}>"
