"""Text normalization for user-submitted free text."""
import re


def normalize_optional_text(text: str | None) -> str | None:
    """Trim *text*; blank or missing input becomes ``None``."""
    if text is None:
        return None
    text = text.strip()
    return text or None


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace to single spaces (used for model prompts)."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()
