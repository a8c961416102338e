# src/reader_assistant/api/deps.py
import logging
from typing import AsyncIterator

import httpx

from reader_assistant.config import Settings, get_settings

logger = logging.getLogger(__name__)

__all__ = ["get_http_client", "get_settings", "Settings"]


async def get_http_client() -> AsyncIterator[httpx.AsyncClient]:
    """
    Request-scoped HTTP client for upstream calls. Nothing is pooled across
    requests; the client is closed once the response has been produced.
    Per-call timeouts are passed by each adapter.
    """
    async with httpx.AsyncClient(follow_redirects=True) as client:
        yield client
