"""Static provider/model catalog.

Each model identifier belongs to exactly one provider. The catalog is built
once at import time and never mutated.
"""

from __future__ import annotations

import logging
from enum import Enum
from types import MappingProxyType
from typing import Mapping, NamedTuple

logger = logging.getLogger(__name__)


class Provider(str, Enum):
    CLAUDE = "claude"
    OPENAI = "openai"
    GEMINI = "gemini"


class ModelInfo(NamedTuple):
    id: str
    name: str


class ProviderCatalogEntry(NamedTuple):
    name: str
    models: tuple[ModelInfo, ...]
    default_model: str

    @property
    def model_ids(self) -> tuple[str, ...]:
        return tuple(m.id for m in self.models)


MODEL_CATALOG: Mapping[Provider, ProviderCatalogEntry] = MappingProxyType({
    Provider.CLAUDE: ProviderCatalogEntry(
        name="Claude",
        models=(
            ModelInfo("claude-sonnet-4-5-20250929", "Claude Sonnet 4.5"),
            ModelInfo("claude-opus-4-5-20251101", "Claude Opus 4.5"),
        ),
        default_model="claude-sonnet-4-5-20250929",
    ),
    Provider.OPENAI: ProviderCatalogEntry(
        name="OpenAI",
        models=(
            ModelInfo("gpt-5.1", "GPT-5.1"),
            ModelInfo("gpt-5-mini", "GPT-5 Mini"),
        ),
        default_model="gpt-5.1",
    ),
    Provider.GEMINI: ProviderCatalogEntry(
        name="Gemini",
        models=(
            ModelInfo("gemini-3-pro-preview", "Gemini 3 Pro Preview"),
            ModelInfo("gemini-2.5-flash", "Gemini 2.5 Flash"),
        ),
        default_model="gemini-3-pro-preview",
    ),
})


def parse_provider(value: str) -> Provider | None:
    """Returns the matching Provider, or None for unknown identifiers."""
    try:
        return Provider(value.strip().lower())
    except ValueError:
        return None


def resolve_model(provider: Provider, model: str | None = None) -> str:
    """
    Returns `model` if it belongs to `provider`'s catalog, else the provider default.
    A model from another provider is never passed through.
    """
    entry = MODEL_CATALOG[provider]
    if model and model in entry.model_ids:
        return model
    if model:
        logger.warning(f"Model '{model}' is not available for provider '{provider.value}', using default '{entry.default_model}'.")
    return entry.default_model
