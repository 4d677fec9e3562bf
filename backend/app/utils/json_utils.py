"""JSON extraction and coercion for hosted-model output.

Model output is treated as untrusted text. Instruction-tuned models wrap
JSON in markdown fences, prepend commentary or emit reasoning blocks, so
extraction runs as:

1. **Sanitize**: strip ``<think>`` blocks and markdown fences
2. **Direct parse**: ``json.loads()`` on the cleaned text
3. **Balanced-brace extraction**: first ``{…}`` found by character scan
4. **Failure**: ``ParseResult`` with ``data=None``

The ``coerce_*`` helpers turn an accepted dict into the typed payloads used
by ``app.services.ai_service``; they raise ``ValueError`` when a required
field is missing or has the wrong shape so the caller can fall back.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any

logger = logging.getLogger(__name__)

_REASONING_TAGS = ("think", "reasoning", "thought")


def sanitize_llm_output(raw: str) -> str:
    """Remove reasoning blocks and code fences from raw model output."""
    if not raw:
        return ""
    text = raw
    for tag in _REASONING_TAGS:
        text = re.sub(rf"<{tag}>.*?</{tag}>", "", text, flags=re.DOTALL | re.IGNORECASE)
        text = re.sub(rf"<{tag}>.*$", "", text, flags=re.DOTALL | re.IGNORECASE)
    text = re.sub(r"```(?:json|JSON)?\s*\n?", "", text)
    return text.strip()


def extract_json_object(text: str) -> str | None:
    """Return the first balanced ``{…}`` substring of *text*, or ``None``.

    Braces inside JSON string literals are ignored.
    """
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None


class ParseResult:
    """Outcome of ``safe_parse_json``."""

    __slots__ = ("data", "method", "raw_preview")

    def __init__(self, data: dict[str, Any] | None, method: str, raw_preview: str = ""):
        self.data = data
        self.method = method  # "direct" | "extraction" | "failed"
        self.raw_preview = raw_preview

    @property
    def ok(self) -> bool:
        return self.data is not None


def safe_parse_json(raw: str) -> ParseResult:
    raw_preview = (raw or "")[:300]
    sanitized = sanitize_llm_output(raw or "")

    try:
        data = json.loads(sanitized)
        if isinstance(data, dict):
            return ParseResult(data, "direct", raw_preview)
    except (json.JSONDecodeError, ValueError):
        pass

    extracted = extract_json_object(sanitized)
    if extracted:
        try:
            data = json.loads(extracted)
            if isinstance(data, dict):
                return ParseResult(data, "extraction", raw_preview)
        except (json.JSONDecodeError, ValueError):
            pass

    return ParseResult(None, "failed", raw_preview)


# ── Coercion ──────────────────────────────────────────────────────────

def _string_list(value: Any, field: str, limit: int | None = None) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"'{field}' is not a list: {type(value).__name__}")
    items = [str(v).strip() for v in value if isinstance(v, (str, int, float)) and str(v).strip()]
    return items[:limit] if limit else items


def _number(value: Any, field: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{field}' is not numeric: {value!r}")
    return float(value)


def coerce_sentiment(data: dict[str, Any]) -> dict[str, Any]:
    sentiment = str(data.get("sentiment", "")).strip().lower()
    if sentiment not in ("positive", "negative", "neutral"):
        raise ValueError(f"invalid sentiment: {data.get('sentiment')!r}")
    score = max(-1.0, min(1.0, _number(data.get("score"), "score")))
    return {
        "sentiment": sentiment,
        "score": score,
        "keywords": _string_list(data.get("keywords"), "keywords", limit=5),
    }


def coerce_quality(data: dict[str, Any]) -> dict[str, Any]:
    score = int(round(_number(data.get("score"), "score")))
    reasoning = data.get("reasoning")
    return {
        "score": max(1, min(10, score)),
        "reasoning": reasoning.strip() if isinstance(reasoning, str) and reasoning.strip() else "Average quality feedback",
    }


def coerce_summary(data: dict[str, Any]) -> dict[str, Any]:
    summary = data.get("summary")
    if not isinstance(summary, str) or not summary.strip():
        raise ValueError("missing required field 'summary'")
    overall = str(data.get("overallSentiment", data.get("overall_sentiment", "neutral"))).strip().lower()
    if overall not in ("positive", "negative", "neutral", "mixed"):
        overall = "neutral"
    return {
        "summary": summary.strip(),
        "strengths": _string_list(data.get("strengths"), "strengths", limit=5),
        "improvements": _string_list(data.get("improvements"), "improvements", limit=5),
        "overall_sentiment": overall,
    }


def coerce_recommendations(data: dict[str, Any], known_ids: set[str]) -> list[dict[str, Any]]:
    items = data.get("recommendations")
    if not isinstance(items, list):
        raise ValueError("'recommendations' is not a list")
    out: list[dict[str, Any]] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        teacher_id = str(item.get("teacherId", item.get("teacher_id", "")))
        if teacher_id not in known_ids:
            logger.debug("Dropping recommendation for unknown teacher %r", teacher_id)
            continue
        try:
            score = max(0.0, min(100.0, _number(item.get("score"), "score")))
        except ValueError:
            score = 0.0
        out.append({
            "teacher_id": teacher_id,
            "score": score,
            "reasoning": str(item.get("reasoning", "")).strip(),
        })
    return out[:3]


def coerce_templates(data: dict[str, Any]) -> list[str]:
    if "templates" not in data:
        raise ValueError("missing required field 'templates'")
    return _string_list(data.get("templates"), "templates", limit=3)
