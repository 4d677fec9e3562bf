"""SQLAlchemy ORM models package."""
from app.models.user import User
from app.models.teacher import Teacher
from app.models.feedback import Feedback
from app.models.reply import Reply
from app.models.doubt import Doubt
from app.models.favorite import Favorite
from app.models.feedback_analysis import FeedbackAnalysis
from app.models.teacher_summary import TeacherSummary
from app.models.chat_history import ChatHistory

__all__ = [
    "User",
    "Teacher",
    "Feedback",
    "Reply",
    "Doubt",
    "Favorite",
    "FeedbackAnalysis",
    "TeacherSummary",
    "ChatHistory",
]
