"""Provider Adapter: one call shape over three upstream vision-chat APIs.

Each provider is a pair of pure functions: a request builder mapping
(image, prompt, api key, model) to an HTTP request description, and a
response extractor pulling the generated text out of the provider's nested
reply. `call_vision_model` dispatches on the provider and owns the single
POST, the error-envelope handling and the transport error mapping.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, NamedTuple

import httpx

from reader_assistant.config import Settings
from reader_assistant.exceptions import (
    ConfigurationError,
    MalformedUpstreamResponse,
    TransportError,
    UpstreamProviderError,
    ValidationError,
)
from reader_assistant.llms.catalog import MODEL_CATALOG, Provider, parse_provider, resolve_model
from reader_assistant.schemas.agent_io import VisionResult

logger = logging.getLogger(__name__)

# Leading base64 characters of common image signatures
_MEDIA_SIGNATURES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("/9j/", "/9J/"), "image/jpeg"),
    (("iVBORw0KGgo",), "image/png"),
    (("R0lGOD",), "image/gif"),
    (("UklGR",), "image/webp"),
)
DEFAULT_MEDIA_TYPE = "image/jpeg"


def detect_media_type(image_b64: str) -> str:
    """Sniffs the image media type from the base64 payload, defaulting to JPEG."""
    for prefixes, media_type in _MEDIA_SIGNATURES:
        if image_b64.startswith(prefixes):
            return media_type
    return DEFAULT_MEDIA_TYPE


class ProviderRequest(NamedTuple):
    url: str
    headers: dict[str, str]
    body: dict[str, Any]
    params: dict[str, str] | None = None


# --- Request builders ---

def build_claude_request(settings: Settings, image: str, prompt: str, api_key: str, model: str) -> ProviderRequest:
    return ProviderRequest(
        url=settings.anthropic_api_url,
        headers={
            "Content-Type": "application/json",
            "x-api-key": api_key,
            "anthropic-version": settings.anthropic_version,
        },
        body={
            "model": model,
            "max_tokens": settings.max_output_tokens,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": detect_media_type(image),
                                "data": image,
                            },
                        },
                        {"type": "text", "text": prompt},
                    ],
                }
            ],
        },
    )


def build_openai_request(settings: Settings, image: str, prompt: str, api_key: str, model: str) -> ProviderRequest:
    return ProviderRequest(
        url=settings.openai_api_url,
        headers={
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        },
        body={
            "model": model,
            "max_completion_tokens": settings.max_output_tokens,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image_url",
                            "image_url": {"url": f"data:{detect_media_type(image)};base64,{image}"},
                        },
                        {"type": "text", "text": prompt},
                    ],
                }
            ],
        },
    )


def build_gemini_request(settings: Settings, image: str, prompt: str, api_key: str, model: str) -> ProviderRequest:
    # Gemini takes the key in the query string rather than a header
    return ProviderRequest(
        url=f"{settings.gemini_api_url}/{model}:generateContent",
        headers={"Content-Type": "application/json"},
        params={"key": api_key},
        body={
            "contents": [
                {
                    "parts": [
                        {"inline_data": {"mime_type": detect_media_type(image), "data": image}},
                        {"text": prompt},
                    ]
                }
            ]
        },
    )


# --- Response extractors ---

def extract_claude_text(data: Any) -> str:
    return data["content"][0]["text"]


def extract_openai_text(data: Any) -> str:
    return data["choices"][0]["message"]["content"]


def extract_gemini_text(data: Any) -> str:
    return data["candidates"][0]["content"]["parts"][0]["text"]


class ProviderBinding(NamedTuple):
    api_key_setting: str
    build_request: Callable[[Settings, str, str, str, str], ProviderRequest]
    extract_text: Callable[[Any], str]


PROVIDER_BINDINGS: dict[Provider, ProviderBinding] = {
    Provider.CLAUDE: ProviderBinding("claude_api_key", build_claude_request, extract_claude_text),
    Provider.OPENAI: ProviderBinding("openai_api_key", build_openai_request, extract_openai_text),
    Provider.GEMINI: ProviderBinding("gemini_api_key", build_gemini_request, extract_gemini_text),
}


def upstream_error_message(response: httpx.Response, service: str) -> str:
    """
    Reads `error.message` from an upstream error envelope, falling back to
    "<service> API error: <status>" when the body is absent or not the expected shape.
    """
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict):
            message = error.get("message")
            if isinstance(message, str) and message:
                return message
    return f"{service} API error: {response.status_code}"


async def call_vision_model(
    client: httpx.AsyncClient,
    settings: Settings,
    image: str,
    prompt: str,
    provider: Provider | str,
    model: str | None = None,
) -> VisionResult:
    """
    Sends one image + prompt to the selected provider and returns the generated text unchanged.

    Raises:
        ValidationError: unknown provider.
        ConfigurationError: provider API key missing.
        UpstreamProviderError: non-2xx reply.
        MalformedUpstreamResponse: 2xx reply without the expected text field.
        TransportError: network failure or timeout.
    """
    resolved_provider = provider if isinstance(provider, Provider) else parse_provider(provider)
    if resolved_provider is None:
        raise ValidationError(f"Unknown provider: {provider}")

    entry = MODEL_CATALOG[resolved_provider]
    binding = PROVIDER_BINDINGS[resolved_provider]
    resolved_model = resolve_model(resolved_provider, model)

    api_key = getattr(settings, binding.api_key_setting)
    if not api_key:
        raise ConfigurationError(f"{entry.name} API key not configured")

    request = binding.build_request(settings, image, prompt, api_key, resolved_model)
    logger.info(f"Calling {entry.name} vision model '{resolved_model}'.")

    try:
        response = await client.post(
            request.url,
            params=request.params,
            headers=request.headers,
            json=request.body,
            timeout=settings.vision_timeout_seconds,
        )
    except httpx.TimeoutException as e:
        logger.error(f"{entry.name} API request timed out: {e}")
        raise TransportError(entry.name, f"{entry.name} API request timed out") from e
    except httpx.RequestError as e:
        logger.error(f"{entry.name} API request failed: {e}")
        raise TransportError(entry.name, f"{entry.name} API request failed: {e}") from e

    if not response.is_success:
        message = upstream_error_message(response, entry.name)
        logger.error(f"{entry.name} returned error status {response.status_code}: {message}")
        raise UpstreamProviderError(entry.name, message, upstream_status=response.status_code)

    try:
        text = binding.extract_text(response.json())
    except (ValueError, KeyError, IndexError, TypeError) as e:
        logger.error(f"Unexpected {entry.name} response shape: {e}")
        raise MalformedUpstreamResponse(
            entry.name, f"{entry.name} API returned an unexpected response", upstream_status=response.status_code
        ) from e
    if not isinstance(text, str):
        raise MalformedUpstreamResponse(
            entry.name, f"{entry.name} API returned an unexpected response", upstream_status=response.status_code
        )

    return VisionResult(response_text=text, provider=resolved_provider.value, model=resolved_model)
