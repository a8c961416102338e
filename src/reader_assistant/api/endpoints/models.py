from fastapi import APIRouter

from reader_assistant.llms.catalog import MODEL_CATALOG
from reader_assistant.schemas.catalog import CatalogResponse, ModelEntry, ProviderEntry

router = APIRouter(tags=["Model Catalog"])


@router.get("", response_model=CatalogResponse)
async def list_models():
    """Lists the selectable providers, their models and each provider's default."""
    return CatalogResponse(
        providers=[
            ProviderEntry(
                id=provider.value,
                name=entry.name,
                default_model=entry.default_model,
                models=[ModelEntry(id=m.id, name=m.name) for m in entry.models],
            )
            for provider, entry in MODEL_CATALOG.items()
        ]
    )
