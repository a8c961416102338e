from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional

DEFAULT_RESULTS_PER_QUERY = 5
MIN_RESULTS_PER_QUERY = 1
MAX_RESULTS_PER_QUERY = 10

class QueryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Required, but checked by the orchestrator so a missing field is a 400 naming it
    image: Optional[str] = None # base64
    prompt: Optional[str] = None
    provider: Optional[str] = None
    model: Optional[str] = None
    search_enabled: Optional[bool] = Field(default=True, alias="searchEnabled")
    search_results_per_query: Optional[int] = Field(default=DEFAULT_RESULTS_PER_QUERY, alias="searchResultsPerQuery")

    @field_validator("search_enabled")
    @classmethod
    def default_search_enabled(cls, value: Optional[bool]) -> bool:
        return value is not False

    @field_validator("search_results_per_query")
    @classmethod
    def clamp_results_per_query(cls, value: Optional[int]) -> int:
        if value is None:
            value = DEFAULT_RESULTS_PER_QUERY
        return min(MAX_RESULTS_PER_QUERY, max(MIN_RESULTS_PER_QUERY, value))

class QueryResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    response: str
    provider: str
    model: str
    search_queries: Optional[List[str]] = Field(default=None, alias="searchQueries") # Omitted when nothing was extracted
    search_performed: bool = Field(default=False, alias="searchPerformed")
