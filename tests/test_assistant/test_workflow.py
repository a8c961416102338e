import asyncio

import httpx
import pytest

from conftest import (
    ANTHROPIC_HOST,
    BRAVE_HOST,
    EXTRACTION_MARKER,
    JPEG_B64,
    OPENAI_HOST,
    brave_reply,
    claude_prompt,
    claude_reply,
    openai_reply,
)
from reader_assistant.assistant.workflow import route_entry
from reader_assistant.exceptions import QueryCancelledError, UpstreamProviderError, ValidationError
from reader_assistant.orchestrator import run_query
from reader_assistant.schemas.query import QueryRequest


def _request(**overrides) -> QueryRequest:
    payload = {"image": JPEG_B64, "prompt": "What is this?", "provider": "claude"}
    payload.update(overrides)
    return QueryRequest.model_validate(payload)


def _claude_with_extraction(extraction_reply: httpx.Response, answer: str = "It is a teapot."):
    def handler(request):
        if EXTRACTION_MARKER in claude_prompt(request):
            return extraction_reply
        return claude_reply(answer)
    return handler


def test_route_entry():
    assert route_entry({"search_enabled": True}) == "search"
    assert route_entry({"search_enabled": False}) == "generate"


@pytest.mark.asyncio
async def test_search_disabled_skips_search(upstream, settings):
    upstream.route(ANTHROPIC_HOST, lambda request: claude_reply("A teapot."))

    async with upstream.client() as client:
        result = await run_query(_request(searchEnabled=False), client, settings)

    assert result.response == "A teapot."
    assert result.search_performed is False
    assert result.search_queries is None
    assert len(upstream.requests) == 1
    assert claude_prompt(upstream.requests[0]) == "What is this?"


@pytest.mark.asyncio
async def test_missing_search_key_skips_search(upstream, settings):
    settings.brave_search_api_key = None
    upstream.route(ANTHROPIC_HOST, lambda request: claude_reply("A teapot."))

    async with upstream.client() as client:
        result = await run_query(_request(), client, settings)

    assert result.search_performed is False
    assert result.search_queries is None
    assert len(upstream.requests) == 1


@pytest.mark.asyncio
async def test_search_results_are_folded_into_prompt(upstream, settings):
    upstream.route(ANTHROPIC_HOST, _claude_with_extraction(claude_reply('["teapot brand"]')))
    upstream.route(BRAVE_HOST, lambda request: brave_reply(("Brand", "Famous teapots", "https://tea.example")))

    async with upstream.client() as client:
        result = await run_query(_request(), client, settings)

    assert result.search_performed is True
    assert result.search_queries == ["teapot brand"]
    final_prompt = claude_prompt(upstream.requests_to(ANTHROPIC_HOST)[-1])
    assert final_prompt.startswith("What is this?\n\n---\n**Web Search Context:**")
    assert "- Brand: Famous teapots (https://tea.example)" in final_prompt


@pytest.mark.asyncio
async def test_zero_results_means_no_search_performed(upstream, settings):
    upstream.route(ANTHROPIC_HOST, _claude_with_extraction(claude_reply('["foo", "bar"]')))
    upstream.route(BRAVE_HOST, lambda request: brave_reply())

    async with upstream.client() as client:
        result = await run_query(_request(), client, settings)

    assert result.search_performed is False
    assert result.search_queries == ["foo", "bar"]
    assert claude_prompt(upstream.requests_to(ANTHROPIC_HOST)[-1]) == "What is this?"


@pytest.mark.asyncio
async def test_extraction_failure_still_answers(upstream, settings):
    upstream.route(
        ANTHROPIC_HOST,
        _claude_with_extraction(httpx.Response(500, json={"error": {"message": "extraction exploded"}})),
    )

    async with upstream.client() as client:
        result = await run_query(_request(), client, settings)

    assert result.response == "It is a teapot."
    assert result.search_performed is False
    assert result.search_queries is None
    assert upstream.requests_to(BRAVE_HOST) == []


@pytest.mark.asyncio
async def test_primary_call_failure_propagates(upstream, settings):
    upstream.route(OPENAI_HOST, lambda request: httpx.Response(401, json={"error": {"message": "Incorrect API key"}}))

    async with upstream.client() as client:
        with pytest.raises(UpstreamProviderError, match="Incorrect API key"):
            await run_query(_request(provider="openai", searchEnabled=False), client, settings)


@pytest.mark.asyncio
async def test_resolved_model_reported(upstream, settings):
    upstream.route(OPENAI_HOST, lambda request: openai_reply("ok"))

    async with upstream.client() as client:
        result = await run_query(
            _request(provider="openai", model="claude-opus-4-5-20251101", searchEnabled=False), client, settings
        )

    assert result.provider == "openai"
    assert result.model == "gpt-5.1"


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["image", "prompt", "provider"])
async def test_missing_required_field(upstream, settings, missing):
    async with upstream.client() as client:
        with pytest.raises(ValidationError, match="Missing required fields: image, prompt, provider"):
            await run_query(_request(**{missing: ""}), client, settings)
    assert upstream.requests == []


@pytest.mark.asyncio
async def test_unknown_provider_is_a_validation_error(upstream, settings):
    async with upstream.client() as client:
        with pytest.raises(ValidationError, match="Unknown provider"):
            await run_query(_request(provider="llama"), client, settings)


@pytest.mark.asyncio
async def test_cancellation_stops_waiting(upstream, settings):
    never = asyncio.Event()

    async def hang(request):
        await never.wait()
        return claude_reply("too late")

    upstream.route(ANTHROPIC_HOST, hang)
    cancel_event = asyncio.Event()

    async with upstream.client() as client:
        query = asyncio.create_task(run_query(_request(searchEnabled=False), client, settings, cancel_event=cancel_event))
        for _ in range(200):
            if upstream.requests:
                break
            await asyncio.sleep(0.01)
        assert upstream.requests
        cancel_event.set()
        with pytest.raises(QueryCancelledError):
            await asyncio.wait_for(query, timeout=2)
