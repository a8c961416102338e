from pydantic import BaseModel, ConfigDict, Field
from typing import List

class ModelEntry(BaseModel):
    id: str
    name: str

class ProviderEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    default_model: str = Field(alias="defaultModel")
    models: List[ModelEntry]

class CatalogResponse(BaseModel):
    providers: List[ProviderEntry]
