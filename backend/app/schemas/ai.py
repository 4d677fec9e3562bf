"""Request/response schemas for the AI helper endpoints."""
from datetime import datetime
from pydantic import Field
from app.schemas.common import CamelModel, Sentiment


class AnalyzeFeedbackResponse(CamelModel):
    sentiment: Sentiment
    sentiment_score: float
    keywords: list[str]
    quality_score: int
    quality_reasoning: str
    fallback: bool = False


class FeedbackAnalysisResponse(CamelModel):
    sentiment: Sentiment | None
    sentiment_score: float | None
    quality_score: int | None
    keywords: list[str]
    analyzed_at: datetime


class TeacherSummaryResponse(CamelModel):
    summary: str
    strengths: list[str]
    improvements: list[str]
    overall_sentiment: Sentiment | None = None
    generated_at: datetime | None = None
    fallback: bool = False


class RecommendRequest(CamelModel):
    preferences: str = Field(..., min_length=1)


class Recommendation(CamelModel):
    teacher_id: str
    score: float
    reasoning: str


class RecommendResponse(CamelModel):
    recommendations: list[Recommendation]


class CommentRequest(CamelModel):
    comment: str | None = None


class ImproveFeedbackResponse(CamelModel):
    improved_comment: str


class ReplyTemplatesResponse(CamelModel):
    templates: list[str]


class ChatRequest(CamelModel):
    message: str = Field(..., min_length=1)


class ChatResponse(CamelModel):
    response: str
