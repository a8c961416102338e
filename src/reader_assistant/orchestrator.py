import asyncio
import logging
from typing import Optional

import httpx

from reader_assistant.assistant.graph.state import GraphState
from reader_assistant.assistant.workflow import graph_app
from reader_assistant.config import Settings
from reader_assistant.exceptions import QueryCancelledError, ReaderAssistantError, ValidationError
from reader_assistant.llms.catalog import parse_provider
from reader_assistant.schemas.query import QueryRequest, QueryResponse

logger = logging.getLogger(__name__)

REQUIRED_QUERY_FIELDS = ("image", "prompt", "provider")


def validate_query_request(request: QueryRequest) -> None:
    """Rejects requests missing image, prompt or provider, or naming an unknown provider."""
    if not all(getattr(request, field) for field in REQUIRED_QUERY_FIELDS):
        raise ValidationError(f"Missing required fields: {', '.join(REQUIRED_QUERY_FIELDS)}")
    if parse_provider(request.provider) is None:
        raise ValidationError(f"Unknown provider: {request.provider}")


async def run_query(
    request: QueryRequest,
    client: httpx.AsyncClient,
    settings: Settings,
    cancel_event: Optional[asyncio.Event] = None,
) -> QueryResponse:
    """
    Answers one image + prompt query, optionally enriched with web search context.

    validating -> (searching) -> generating -> done. Search failures degrade to
    "no search"; failures of the final vision call propagate to the caller.
    If `cancel_event` is set first, stops waiting and raises QueryCancelledError.
    """
    validate_query_request(request)
    provider = parse_provider(request.provider)

    search_enabled = bool(request.search_enabled and settings.brave_search_api_key)
    if request.search_enabled and not settings.brave_search_api_key:
        logger.debug("Search requested but no search API key configured, skipping search.")

    logger.info(f"Received query (provider: {provider.value}, model: {request.model}, search: {search_enabled}): '{request.prompt[:50]}...'")

    initial_state: GraphState = {
        "image": request.image,
        "prompt": request.prompt,
        "provider": provider.value,
        "model": request.model,
        "search_enabled": search_enabled,
        "search_results_per_query": request.search_results_per_query,
        "search_queries": [],
        "search_performed": False,
        "prompt_for_model": request.prompt,
        "result": None,
    }
    graph_config = {"configurable": {"http_client": client, "settings": settings}}

    graph_task = asyncio.create_task(graph_app.ainvoke(initial_state, config=graph_config))
    try:
        if cancel_event is None:
            final_state = await graph_task
        else:
            cancel_waiter = asyncio.create_task(cancel_event.wait())
            try:
                await asyncio.wait({graph_task, cancel_waiter}, return_when=asyncio.FIRST_COMPLETED)
            finally:
                cancel_waiter.cancel()
            if not graph_task.done():
                logger.info("Query cancelled by caller, abandoning pending upstream calls.")
                raise QueryCancelledError()
            final_state = graph_task.result()
    finally:
        if not graph_task.done():
            graph_task.cancel()

    result = final_state.get("result")
    if result is None:
        # generate always runs last; a missing result means the graph misbehaved
        raise ReaderAssistantError("No response was generated")

    search_queries = final_state.get("search_queries") or []
    logger.info(f"Query completed with {result.provider}/{result.model} (search performed: {final_state.get('search_performed', False)}).")

    return QueryResponse(
        response=result.response_text,
        provider=result.provider,
        model=result.model,
        search_queries=search_queries or None,
        search_performed=bool(final_state.get("search_performed")),
    )
