import json
import logging
import re
from typing import Any, List, Optional

import httpx
from langchain_core.runnables import RunnableConfig

from reader_assistant.assistant.graph.state import GraphState
from reader_assistant.config import Settings
from reader_assistant.llms.provider import call_vision_model
from reader_assistant.prompts import SEARCH_QUERY_EXTRACTION, augment_prompt, build_search_context
from reader_assistant.schemas.agent_io import SearchOutcome
from reader_assistant.tools.web_search import search_web

logger = logging.getLogger(__name__)

MAX_SEARCH_QUERIES = 3

# First JSON-array-shaped span, non-greedy so trailing prose with brackets is ignored
_JSON_ARRAY_RE = re.compile(r"\[[\s\S]*?\]")


def parse_search_queries(text: str) -> List[str]:
    """
    Pulls search queries out of a free-text model reply.
    Keeps at most three non-blank strings; anything unparseable yields [].
    """
    match = _JSON_ARRAY_RE.search(text or "")
    if not match:
        return []
    try:
        parsed: Any = json.loads(match.group(0))
    except json.JSONDecodeError:
        logger.warning(f"Search query extraction returned invalid JSON: {match.group(0)[:100]}")
        return []
    if not isinstance(parsed, list):
        return []
    return [q for q in parsed[:MAX_SEARCH_QUERIES] if isinstance(q, str) and q.strip()]


async def extract_search_queries(
    client: httpx.AsyncClient,
    settings: Settings,
    image: str,
    prompt: str,
    provider: str,
    model: Optional[str] = None,
) -> List[str]:
    """Asks the same provider/model for 1-3 search queries about the image and question."""
    extraction_prompt = SEARCH_QUERY_EXTRACTION.format(question=prompt)
    result = await call_vision_model(client, settings, image, extraction_prompt, provider, model)
    logger.debug(f"Search query extraction raw response:\n{result.response_text}")
    return parse_search_queries(result.response_text)


async def run_search(
    client: httpx.AsyncClient,
    settings: Settings,
    image: str,
    prompt: str,
    provider: str,
    model: Optional[str],
    results_per_query: int,
) -> SearchOutcome:
    """
    Extracts queries, searches them in parallel and renders the context block.
    Never raises (apart from cancellation): any failure yields an empty outcome.
    """
    try:
        queries = await extract_search_queries(client, settings, image, prompt, provider, model)
        if not queries:
            logger.info("No search queries extracted, continuing without search.")
            return SearchOutcome()

        logger.info(f"Extracted search queries: {queries}")
        results = await search_web(client, settings, queries, results_per_query)
        return SearchOutcome(queries=queries, results=results, context=build_search_context(results))
    except Exception as e:
        logger.error(f"Search failed, continuing without search: {e}", exc_info=True)
        return SearchOutcome()


async def search_node(state: GraphState, config: RunnableConfig) -> dict:
    """
    Node that enriches the prompt with web search context when anything useful was found.
    """
    logger.info("--- Executing Search Node ---")
    configurable = config.get("configurable", {})
    outcome = await run_search(
        configurable["http_client"],
        configurable["settings"],
        state["image"],
        state["prompt"],
        state["provider"],
        state.get("model"),
        state["search_results_per_query"],
    )

    search_performed = bool(outcome.context)
    if outcome.queries and not search_performed:
        logger.info("Search returned no results, prompt left unchanged.")

    return {
        "search_queries": outcome.queries,
        "search_performed": search_performed,
        "prompt_for_model": augment_prompt(state["prompt"], outcome.context),
    }
