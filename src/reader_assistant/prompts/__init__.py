# src/reader_assistant/prompts/__init__.py
from reader_assistant.prompts.search_extraction_prompt import prompt as SEARCH_QUERY_EXTRACTION
from reader_assistant.prompts.search_context_prompt import (
    build_search_context,
    augment_prompt
)

__all__ = [
    "SEARCH_QUERY_EXTRACTION",
    "build_search_context",
    "augment_prompt"
]
