import json
import os
from typing import Callable, Dict, List

# Keep test runs from writing app.log before the app module is imported
os.environ.setdefault("LOG_FILE", "")

import httpx
import pytest
from fastapi.testclient import TestClient

from reader_assistant.api.deps import get_http_client
from reader_assistant.config import Settings, get_settings

JPEG_B64 = "/9j/4AAQSkZJRgABAQAAAQABAAD/2wBDAAgGBgcGBQgHBwcJCQgKDA"
PNG_B64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk"

ANTHROPIC_HOST = "api.anthropic.com"
OPENAI_HOST = "api.openai.com"
GEMINI_HOST = "generativelanguage.googleapis.com"
BRAVE_HOST = "api.search.brave.com"

EXTRACTION_MARKER = "Return ONLY a JSON array"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeUpstream:
    """Routes outgoing requests to per-host handlers and records them."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.routes: Dict[str, Handler] = {}

    def route(self, host: str, handler: Handler) -> "FakeUpstream":
        self.routes[host] = handler
        return self

    def requests_to(self, host: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.host == host]

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get(request.url.host)
        if handler is None:
            raise AssertionError(f"Unexpected upstream call to {request.url}")
        response = handler(request)
        if not isinstance(response, httpx.Response):
            response = await response
        return response

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


def claude_reply(text: str) -> httpx.Response:
    return httpx.Response(200, json={"content": [{"type": "text", "text": text}]})


def openai_reply(text: str) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": text}}]})


def gemini_reply(text: str) -> httpx.Response:
    return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})


def brave_reply(*items: tuple) -> httpx.Response:
    return httpx.Response(
        200,
        json={"web": {"results": [{"title": t, "description": d, "url": u} for t, d, u in items]}},
    )


def claude_prompt(request: httpx.Request) -> str:
    """Text part of a Claude messages request."""
    return json.loads(request.content)["messages"][0]["content"][1]["text"]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        claude_api_key="test-claude-key",
        openai_api_key="test-openai-key",
        gemini_api_key="test-gemini-key",
        brave_search_api_key="test-brave-key",
        log_file="",
    )


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def api_client(upstream: FakeUpstream, settings: Settings):
    """TestClient whose upstream HTTP calls go to `upstream`."""
    from reader_assistant.main import app

    async def _http_client():
        async with upstream.client() as client:
            yield client

    app.dependency_overrides[get_http_client] = _http_client
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
