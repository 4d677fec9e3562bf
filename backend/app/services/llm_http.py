"""HTTP caller for the hosted text-generation endpoint (Hugging Face Inference API).

``generate_text()`` sends a prompt to the primary model and retries once on
the fallback model when the primary is gated, missing, gone or still loading
(403/404/410/503). No other retry logic lives here; callers decide what a
failure means for them.
"""
from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx

from app.config import get_settings
from app.services.http_client_manager import get_http_client

logger = logging.getLogger(__name__)

PROVIDER = "huggingface"
FALLBACK_STATUSES = frozenset({403, 404, 410, 503})


class InferenceNotConfigured(RuntimeError):
    """No API token is configured; callers treat this like an outage."""


def _model_url(base_url: str, model: str) -> str:
    return f"{base_url.rstrip('/')}/{quote(model, safe='/')}"


def _extract_text(data: Any) -> str:
    """Pull generated text out of the response shapes the endpoint returns."""
    if isinstance(data, list) and data:
        first = data[0]
        if isinstance(first, dict) and isinstance(first.get("generated_text"), str):
            return first["generated_text"]
        if isinstance(first, str):
            return first
    if isinstance(data, dict):
        if isinstance(data.get("generated_text"), str):
            return data["generated_text"]
        choices = data.get("choices")
        if isinstance(choices, list) and choices:
            choice = choices[0]
            if isinstance(choice, dict):
                content = (choice.get("message") or {}).get("content")
                if isinstance(content, str):
                    return content
            elif isinstance(choice, str):
                return choice
    if isinstance(data, str):
        return data
    raise ValueError(f"Unrecognised inference response shape: {type(data).__name__}")


async def call_model(prompt: str, model: str, api_token: str, max_new_tokens: int = 512) -> str:
    """Single request to *model*. Raises ``httpx.HTTPStatusError`` on non-2xx."""
    settings = get_settings()
    client = get_http_client(PROVIDER)
    resp = await client.post(
        _model_url(settings.HF_API_URL, model),
        headers={"Authorization": f"Bearer {api_token}"},
        json={
            "inputs": prompt,
            "parameters": {"max_new_tokens": max_new_tokens, "return_full_text": False},
            "options": {"wait_for_model": True},
        },
    )
    resp.raise_for_status()
    return _extract_text(resp.json())


async def generate_text(prompt: str) -> str:
    """Generate with the primary model, falling back on gated/unavailable models.

    Raises
    ------
    InferenceNotConfigured : no ``HF_API_TOKEN``
    httpx.HTTPStatusError : provider error not covered by the fallback
    httpx.TimeoutException / httpx.TransportError : network failures
    ValueError : response body could not be interpreted
    """
    settings = get_settings()
    if not settings.HF_API_TOKEN:
        raise InferenceNotConfigured("Hugging Face API token is not configured (set HF_API_TOKEN)")

    try:
        return await call_model(prompt, settings.HF_MODEL, settings.HF_API_TOKEN, settings.HF_MAX_NEW_TOKENS)
    except httpx.HTTPStatusError as exc:
        status = exc.response.status_code
        if status not in FALLBACK_STATUSES or settings.HF_FALLBACK_MODEL == settings.HF_MODEL:
            raise
        logger.warning(
            "Model '%s' failed (%d). Falling back to '%s'.",
            settings.HF_MODEL, status, settings.HF_FALLBACK_MODEL,
        )
        return await call_model(
            prompt, settings.HF_FALLBACK_MODEL, settings.HF_API_TOKEN, settings.HF_MAX_NEW_TOKENS
        )
