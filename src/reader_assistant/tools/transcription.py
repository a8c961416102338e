import base64
import binascii
import logging
import httpx
from reader_assistant.config import Settings
from reader_assistant.exceptions import (
    ConfigurationError,
    MalformedUpstreamResponse,
    TransportError,
    UpstreamProviderError,
    ValidationError,
)
from reader_assistant.llms.provider import upstream_error_message
from reader_assistant.schemas.transcribe import TranscribeResponse

logger = logging.getLogger(__name__)

SERVICE_NAME = "Whisper"
DEFAULT_AUDIO_FORMAT = "webm"
AUDIO_MIME_TYPES = {
    "webm": "audio/webm",
    "mp4": "audio/mp4",
    "m4a": "audio/m4a",
    "wav": "audio/wav",
}


def audio_mime_type(fmt: str | None) -> str:
    """Maps a declared audio format to its MIME type, defaulting to audio/webm."""
    return AUDIO_MIME_TYPES.get((fmt or "").lower(), AUDIO_MIME_TYPES[DEFAULT_AUDIO_FORMAT])


async def transcribe_audio(
    client: httpx.AsyncClient,
    settings: Settings,
    audio_b64: str | None,
    fmt: str | None = DEFAULT_AUDIO_FORMAT,
) -> TranscribeResponse:
    """
    Forwards base64 audio to the speech-to-text API in a single shot and returns its text.
    """
    if not audio_b64:
        raise ValidationError("Missing required field: audio")
    fmt = fmt or DEFAULT_AUDIO_FORMAT

    try:
        audio_bytes = base64.b64decode(audio_b64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("Audio must be base64 encoded") from e

    if not settings.openai_api_key:
        raise ConfigurationError("OpenAI API key not configured")

    mime_type = audio_mime_type(fmt)
    logger.info(f"Transcribing {len(audio_bytes)} bytes of {mime_type} audio.")

    try:
        response = await client.post(
            settings.openai_transcription_url,
            headers={"Authorization": f"Bearer {settings.openai_api_key}"},
            files={"file": (f"audio.{fmt}", audio_bytes, mime_type)},
            data={"model": settings.transcription_model},
            timeout=settings.transcription_timeout_seconds,
        )
    except httpx.TimeoutException as e:
        logger.error(f"Transcription request timed out: {e}")
        raise TransportError(SERVICE_NAME, f"{SERVICE_NAME} API request timed out") from e
    except httpx.RequestError as e:
        logger.error(f"Transcription request failed: {e}")
        raise TransportError(SERVICE_NAME, f"{SERVICE_NAME} API request failed: {e}") from e

    if not response.is_success:
        message = upstream_error_message(response, SERVICE_NAME)
        logger.error(f"Transcription API returned error status {response.status_code}: {message}")
        raise UpstreamProviderError(SERVICE_NAME, message, upstream_status=response.status_code)

    try:
        text = response.json()["text"]
    except (ValueError, KeyError, TypeError) as e:
        raise MalformedUpstreamResponse(
            SERVICE_NAME, f"{SERVICE_NAME} API returned an unexpected response", upstream_status=response.status_code
        ) from e
    if not isinstance(text, str):
        raise MalformedUpstreamResponse(
            SERVICE_NAME, f"{SERVICE_NAME} API returned an unexpected response", upstream_status=response.status_code
        )

    return TranscribeResponse(text=text)
