from pydantic import BaseModel
from typing import List

class SearchResult(BaseModel):
    query: str
    title: str
    url: str
    snippet: str

class VisionResult(BaseModel):
    """Normalized output of a single vision-model call."""
    response_text: str
    provider: str
    model: str

class SearchOutcome(BaseModel):
    queries: List[str] = []
    results: List[SearchResult] = []
    context: str = ""
