"""AI helpers: sentiment, quality scoring, summaries, recommendations, chat.

Every operation returns an ``AIResult``: either a success carrying the typed
payload, or a fallback carrying a safe default plus the reason it was used
(no token configured, timeout, provider error, unparsable or malformed
output). Nothing in here raises for provider trouble, so routes that merely
enrich a response never fail because inference is unavailable.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, TypeVar

import httpx

from app.services.llm_http import InferenceNotConfigured, generate_text
from app.utils.json_utils import (
    coerce_quality,
    coerce_recommendations,
    coerce_sentiment,
    coerce_summary,
    coerce_templates,
    safe_parse_json,
)
from app.utils.text_cleaning import collapse_whitespace

logger = logging.getLogger(__name__)

T = TypeVar("T")

_INFERENCE_ERRORS = (InferenceNotConfigured, httpx.HTTPError, ValueError)

JSON_SUFFIX = "\n\nReturn only valid JSON, no extra text.\n\nINPUT:\n"

CHATBOT_PERSONA = (
    "You are EduBot, a helpful assistant for the EduFeedback system - a lecture feedback platform. "
    "You help students and teachers with: how to give feedback, how to view feedback, understanding "
    "ratings and analytics, navigation help, and teacher profile information. "
    "Be concise, friendly, and helpful. If you don't know something, admit it."
)
CHAT_QUOTA_MESSAGE = "AI service is temporarily unavailable due to quota limits. Please contact the admin."
CHAT_ERROR_MESSAGE = "I'm experiencing technical difficulties. Please try again later."
CHAT_EMPTY_MESSAGE = "I'm sorry, I couldn't process that."


@dataclass(frozen=True)
class AIResult(Generic[T]):
    value: T
    ok: bool
    reason: str | None = None

    @classmethod
    def success(cls, value: T) -> "AIResult[T]":
        return cls(value=value, ok=True)

    @classmethod
    def fallback(cls, value: T, reason: str) -> "AIResult[T]":
        return cls(value=value, ok=False, reason=reason)

    @property
    def is_fallback(self) -> bool:
        return not self.ok


@dataclass(frozen=True)
class SentimentAnalysis:
    sentiment: str = "neutral"
    score: float = 0.0
    keywords: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class QualityScore:
    score: int
    reasoning: str


@dataclass(frozen=True)
class FeedbackSummary:
    summary: str
    strengths: list[str] = field(default_factory=list)
    improvements: list[str] = field(default_factory=list)
    overall_sentiment: str = "neutral"


@dataclass(frozen=True)
class TeacherRecommendation:
    teacher_id: str
    score: float
    reasoning: str


def _failure_reason(exc: Exception) -> str:
    if isinstance(exc, InferenceNotConfigured):
        return "not_configured"
    if isinstance(exc, httpx.TimeoutException):
        return "timeout"
    if isinstance(exc, httpx.HTTPStatusError):
        return f"http_{exc.response.status_code}"
    if isinstance(exc, httpx.HTTPError):
        return "transport_error"
    return "bad_response"


async def _ask_json(
    label: str,
    instruction: str,
    payload: str,
    coerce: Callable[[dict[str, Any]], T],
    default: T,
) -> AIResult[T]:
    """Prompt for JSON, parse it, coerce it; any failure yields *default*."""
    try:
        raw = await generate_text(instruction + JSON_SUFFIX + payload)
    except _INFERENCE_ERRORS as exc:
        reason = _failure_reason(exc)
        logger.warning("%s: inference failed (%s: %s), using default", label, reason, exc)
        return AIResult.fallback(default, reason)

    parsed = safe_parse_json(raw)
    if not parsed.ok:
        logger.warning("%s: could not parse model output: %r", label, parsed.raw_preview)
        return AIResult.fallback(default, "parse_error")
    try:
        return AIResult.success(coerce(parsed.data))
    except ValueError as exc:
        logger.warning("%s: model output failed validation: %s", label, exc)
        return AIResult.fallback(default, "schema_error")


# ── Feedback analysis ─────────────────────────────────────────────────

async def analyze_sentiment(comment: str | None) -> AIResult[SentimentAnalysis]:
    if not comment or not comment.strip():
        return AIResult.success(SentimentAnalysis())
    return await _ask_json(
        "sentiment",
        "You are a sentiment analysis expert. Analyze the sentiment of student feedback about teachers. "
        'Return a JSON object with: sentiment ("positive", "negative", or "neutral"), '
        "score (number from -1 to 1), and keywords (array of 3-5 key words or phrases).",
        comment.strip(),
        lambda d: SentimentAnalysis(**coerce_sentiment(d)),
        SentimentAnalysis(),
    )


async def score_feedback_quality(comment: str | None, rating: int) -> AIResult[QualityScore]:
    if not comment or not comment.strip():
        return AIResult.success(QualityScore(score=1, reasoning="No comment provided"))
    return await _ask_json(
        "quality",
        "You are an education feedback quality assessor. Rate the quality and helpfulness of student "
        "feedback on a scale of 1-10. Consider specificity, constructiveness, actionable insights, and "
        "clarity. Return JSON with: score (number 1-10) and reasoning (brief explanation).",
        f"Rating: {rating}/5, Comment: {comment.strip()}",
        lambda d: QualityScore(**coerce_quality(d)),
        QualityScore(score=5, reasoning="Unable to assess quality"),
    )


async def generate_feedback_summary(feedback: list[tuple[int, str | None]]) -> AIResult[FeedbackSummary]:
    """Summarise ``(rating, comment)`` pairs for one teacher."""
    if not feedback:
        return AIResult.success(FeedbackSummary(summary="No feedback available yet."))

    comments = "\n".join(
        f"[Rating: {rating}/5] {collapse_whitespace(comment)}"
        for rating, comment in feedback
        if comment and comment.strip()
    )
    if not comments:
        return AIResult.success(
            FeedbackSummary(summary=f"Received {len(feedback)} ratings with no written comments.")
        )

    return await _ask_json(
        "summary",
        "You are an educational analyst. Summarize student feedback for a teacher. "
        "Return JSON with: summary (2-3 sentence overview), strengths (array of 3-5 key strengths), "
        "improvements (array of 3-5 areas for improvement), "
        'overallSentiment ("positive", "negative", or "mixed").',
        comments,
        lambda d: FeedbackSummary(**coerce_summary(d)),
        FeedbackSummary(summary="Unable to generate summary at this time."),
    )


# ── Students ──────────────────────────────────────────────────────────

async def recommend_teachers(preferences: str, teachers: list[dict]) -> AIResult[list[TeacherRecommendation]]:
    """Pick up to three teachers matching free-text *preferences*."""
    if not teachers:
        return AIResult.success([])

    listing = "\n".join(
        f"ID: {t['id']}, Name: {t['name']}, Subject: {t['subject']}, Dept: {t['department']}, "
        f"Rating: {t.get('average_rating') or 'N/A'}, Bio: {t.get('bio') or 'N/A'}"
        for t in teachers
    )
    known = {t["id"] for t in teachers}
    return await _ask_json(
        "recommend",
        "You are a teacher recommendation system. Based on student preferences and the list of available "
        "teachers, recommend the top 3 most suitable teachers. Return JSON with a \"recommendations\" array; "
        "each item has: teacherId (string), score (number 0-100), reasoning (string).",
        f"Student preferences: {preferences.strip()}\n\nAvailable teachers:\n{listing}",
        lambda d: [TeacherRecommendation(**r) for r in coerce_recommendations(d, known)],
        [],
    )


async def improve_feedback(comment: str) -> AIResult[str]:
    """Reword a comment to be polite and constructive without changing its meaning."""
    original = (comment or "").strip()
    if not original:
        return AIResult.success(original)

    prompt = (
        "You are an assistant that rewrites student feedback about a lecture or teacher. "
        "Keep the original meaning, but make the text more polite, clear, and constructive. "
        "Do not add new complaints or compliments that were not there. Return only the rewritten feedback."
        f"\n\nOriginal feedback:\n{original}\n\nImproved feedback:"
    )
    default = f"Thank you for your feedback. {original}"
    try:
        improved = (await generate_text(prompt)).strip()
    except _INFERENCE_ERRORS as exc:
        reason = _failure_reason(exc)
        logger.warning("improve: inference failed (%s: %s), using default", reason, exc)
        return AIResult.fallback(default, reason)

    if not improved:
        return AIResult.fallback(default, "empty_response")
    if improved == original:
        return AIResult.success(f"Thank you for your detailed feedback. {original}")
    return AIResult.success(improved)


# ── Teachers ──────────────────────────────────────────────────────────

async def generate_reply_templates(comment: str) -> AIResult[list[str]]:
    if not comment or not comment.strip():
        return AIResult.success([])
    return await _ask_json(
        "reply-templates",
        "You help teachers write short, polite, and professional replies to student feedback. "
        "Given the student's comment, generate 2-3 different reply options that: 1) thank the student, "
        "2) acknowledge their point, and 3) briefly mention an action or intention. "
        "Return JSON with a single field 'templates' which is an array of reply strings.",
        comment.strip(),
        coerce_templates,
        [],
    )


# ── Chat ──────────────────────────────────────────────────────────────

async def chatbot(message: str, history: list[tuple[str, str]] | None = None) -> AIResult[str]:
    """Answer *message* given prior ``(role, content)`` turns, oldest first."""
    transcript = "\n".join(f"{role.upper()}: {content}" for role, content in (history or []))
    prompt = (
        CHATBOT_PERSONA
        + "\n\nConversation so far (if any):\n"
        + (transcript + "\n\n" if transcript else "")
        + f"USER: {message.strip()}\nASSISTANT:"
    )
    try:
        text = (await generate_text(prompt)).strip()
    except _INFERENCE_ERRORS as exc:
        reason = _failure_reason(exc)
        logger.warning("chat: inference failed (%s: %s)", reason, exc)
        if reason == "http_429":
            return AIResult.fallback(CHAT_QUOTA_MESSAGE, reason)
        return AIResult.fallback(CHAT_ERROR_MESSAGE, reason)

    if not text:
        return AIResult.fallback(CHAT_EMPTY_MESSAGE, "empty_response")
    return AIResult.success(text)
