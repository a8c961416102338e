import asyncio
import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Request, status

from reader_assistant.api.deps import Settings, get_http_client, get_settings
from reader_assistant.exceptions import ReaderAssistantError
from reader_assistant.orchestrator import run_query
from reader_assistant.schemas.query import QueryRequest, QueryResponse

router = APIRouter(tags=["Vision Query"])
logger = logging.getLogger(__name__)

DISCONNECT_POLL_SECONDS = 0.5


async def watch_disconnect(request: Request, cancel_event: asyncio.Event) -> None:
    """Sets `cancel_event` once the client has gone away."""
    while not cancel_event.is_set():
        if await request.is_disconnected():
            logger.info("Client disconnected, cancelling query.")
            cancel_event.set()
            return
        await asyncio.sleep(DISCONNECT_POLL_SECONDS)


@router.post("", response_model=QueryResponse, response_model_exclude_none=True)
async def handle_query(
    body: QueryRequest,
    request: Request,
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
):
    """
    Answers a question about an image with the selected provider, optionally
    enriched with web search context.
    """
    cancel_event = asyncio.Event()
    watcher = asyncio.create_task(watch_disconnect(request, cancel_event))
    try:
        return await run_query(body, client, settings, cancel_event=cancel_event)
    except ReaderAssistantError:
        # Rendered as {"error": ...} by the application-level handler
        raise
    except Exception as e:
        logger.exception(f"Unexpected error handling query: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e) or "Unknown error")
    finally:
        watcher.cancel()
