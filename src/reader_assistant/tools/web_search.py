import asyncio
import httpx
from reader_assistant.config import Settings
import logging
from reader_assistant.schemas.agent_io import SearchResult
from typing import List

logger = logging.getLogger(__name__)

async def perform_web_search(
    client: httpx.AsyncClient,
    settings: Settings,
    query: str,
    count: int,
) -> List[SearchResult]:
    """
    Performs a single Brave web search and returns formatted results.

    Args:
        client: The request-scoped HTTP client.
        settings: Application settings holding the Brave key, URL and timeout.
        query: The search query string.
        count: Number of results to request (already clamped by the caller).

    Returns:
        A list of SearchResult in upstream order.
        Returns an empty list if the search fails or no results are found.
    """
    params = {"q": query, "count": count}
    headers = {
        "X-Subscription-Token": settings.brave_search_api_key or "",
        "Accept": "application/json",
    }

    try:
        response = await client.get(
            settings.brave_search_url,
            params=params,
            headers=headers,
            timeout=settings.search_timeout_seconds,
        )
        response.raise_for_status() # Raise exception for bad status codes (4xx or 5xx)

        data = response.json()
        web = data.get("web") or {}
        results = web.get("results") or []

        formatted_results = [
            SearchResult(
                query=query,
                title=result.get("title") or "",
                url=result.get("url") or "",
                snippet=result.get("description") or "",
            )
            for result in results
            if isinstance(result, dict)
        ]

        if not formatted_results:
            logger.warning(f"No search results found for query: {query}")
        else:
            logger.info(f"Web search successful for query: '{query}', returned {len(formatted_results)} results.")
        return formatted_results

    except httpx.HTTPStatusError as e:
        logger.error(f"Brave search failed for '{query}': status {e.response.status_code}")
        return []
    except httpx.RequestError as e:
        logger.error(f"Error during web search request for '{query}': {e}")
        return []
    except Exception as e:
        logger.error(f"An unexpected error occurred during web search for '{query}': {e}")
        return []


async def search_web(
    client: httpx.AsyncClient,
    settings: Settings,
    queries: List[str],
    results_per_query: int,
) -> List[SearchResult]:
    """
    Runs one search per query concurrently and flattens the results in query order.
    A failed query contributes no results without affecting its siblings.
    """
    outcomes = await asyncio.gather(
        *(perform_web_search(client, settings, query, results_per_query) for query in queries),
        return_exceptions=True,
    )

    all_results: List[SearchResult] = []
    for query, outcome in zip(queries, outcomes):
        if isinstance(outcome, BaseException):
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            logger.error(f"Search for '{query}' raised unexpectedly: {outcome}")
            continue
        all_results.extend(outcome)
    return all_results
