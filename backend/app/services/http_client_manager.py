"""Shared HTTP client pool for outbound inference calls.

One ``httpx.AsyncClient`` per provider, recreated if it was closed or the
event loop changed, closed on application shutdown via ``close_all_clients()``.
"""
from __future__ import annotations

import asyncio
import logging

import httpx

from app.config import get_settings

logger = logging.getLogger(__name__)

_CONNECTION_LIMITS = httpx.Limits(
    max_connections=20,
    max_keepalive_connections=10,
    keepalive_expiry=60,
)

_clients: dict[str, httpx.AsyncClient] = {}
_client_loop_ids: dict[str, int] = {}


def _timeout() -> httpx.Timeout:
    total = get_settings().AI_TIMEOUT_SECONDS
    return httpx.Timeout(total, connect=min(10.0, total))


def get_http_client(provider: str) -> httpx.AsyncClient:
    """Get or create the pooled client for *provider* (call from a coroutine)."""
    loop_id = id(asyncio.get_running_loop())

    if (
        provider not in _clients
        or _clients[provider].is_closed
        or _client_loop_ids.get(provider) != loop_id
    ):
        _clients[provider] = httpx.AsyncClient(timeout=_timeout(), limits=_CONNECTION_LIMITS)
        _client_loop_ids[provider] = loop_id
        logger.debug("Created new HTTP client for provider '%s'", provider)

    return _clients[provider]


async def close_all_clients() -> None:
    """Close every pooled HTTP client (for graceful shutdown)."""
    for name, client in list(_clients.items()):
        if not client.is_closed:
            try:
                await client.aclose()
            except (httpx.HTTPError, RuntimeError) as exc:
                logger.debug("Error closing HTTP client '%s': %s", name, exc)
    _clients.clear()
    _client_loop_ids.clear()
    logger.info("All HTTP clients closed")
