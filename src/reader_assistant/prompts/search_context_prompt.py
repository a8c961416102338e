from typing import Dict, List
from reader_assistant.schemas.agent_io import SearchResult

CONTEXT_HEADER = "---\n**Web Search Context:**\n\n"
CONTEXT_FOOTER = "---\nPlease answer the question using both the image and the search context above."

def build_search_context(results: List[SearchResult]) -> str:
    """
    Renders search results as a context block grouped by query, in the order
    each query first appears. Returns an empty string when there are no results.
    """
    if not results:
        return ""

    by_query: Dict[str, List[SearchResult]] = {}
    for result in results:
        by_query.setdefault(result.query, []).append(result)

    context = CONTEXT_HEADER
    for query, query_results in by_query.items():
        context += f'Search: "{query}"\n'
        for result in query_results:
            context += f"- {result.title}: {result.snippet} ({result.url})\n"
        context += "\n"
    context += CONTEXT_FOOTER
    return context

def augment_prompt(prompt: str, context: str) -> str:
    """Appends the context block to the user's prompt, separated by a blank line."""
    if not context:
        return prompt
    return f"{prompt}\n\n{context}"
