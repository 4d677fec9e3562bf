"""User model: students, teachers and admins who sign in."""
import uuid
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default="student")  # student | teacher | admin
    department: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    # Relationships
    feedback = relationship("Feedback", back_populates="student", cascade="all, delete-orphan", lazy="dynamic")
    doubts = relationship("Doubt", back_populates="student", cascade="all, delete-orphan", lazy="dynamic")
    favorites = relationship("Favorite", back_populates="student", cascade="all, delete-orphan", lazy="dynamic")
    replies = relationship("Reply", back_populates="user", cascade="all, delete-orphan", lazy="dynamic")
    chat_history = relationship("ChatHistory", back_populates="user", cascade="all, delete-orphan", lazy="dynamic")

    __table_args__ = (
        Index("ix_users_role", "role"),
    )

    def __repr__(self) -> str:
        return f"<User {self.email!r} ({self.role})>"
