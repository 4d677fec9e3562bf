"""FeedbackAnalysis model: cached AI sentiment/quality output per feedback."""
import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Float, Integer, DateTime, JSON, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base


class FeedbackAnalysis(Base):
    __tablename__ = "feedback_analysis"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    feedback_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("feedback.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    sentiment: Mapped[str | None] = mapped_column(String(20), nullable=True)  # positive | negative | neutral
    sentiment_score: Mapped[float | None] = mapped_column(Float, nullable=True)  # -1 to 1
    quality_score: Mapped[int | None] = mapped_column(Integer, nullable=True)  # 1-10
    keywords: Mapped[list | None] = mapped_column(JSON, nullable=True)
    analyzed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # Relationships
    feedback = relationship("Feedback", back_populates="analysis")
