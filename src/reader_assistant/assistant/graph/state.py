from typing import TypedDict, List, Optional
from reader_assistant.schemas.agent_io import VisionResult

class GraphState(TypedDict):
    """
    Represents the state of one query as it moves through the graph.
    """
    # Input/Config
    image: str # base64
    prompt: str
    provider: str
    model: Optional[str]
    search_enabled: bool # Already false when no search key is configured
    search_results_per_query: int

    # Search outputs
    search_queries: List[str]
    search_performed: bool
    prompt_for_model: str # User prompt, plus the search context block when one was built

    # Final answer
    result: Optional[VisionResult]
