import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, status

from reader_assistant.api.deps import Settings, get_http_client, get_settings
from reader_assistant.exceptions import ReaderAssistantError
from reader_assistant.schemas.transcribe import TranscribeRequest, TranscribeResponse
from reader_assistant.tools.transcription import transcribe_audio

router = APIRouter(tags=["Transcription"])
logger = logging.getLogger(__name__)


@router.post("", response_model=TranscribeResponse)
async def handle_transcribe(
    request: TranscribeRequest,
    client: httpx.AsyncClient = Depends(get_http_client),
    settings: Settings = Depends(get_settings),
):
    """Transcribes base64-encoded recorded audio to text."""
    try:
        return await transcribe_audio(client, settings, request.audio, request.format)
    except ReaderAssistantError:
        raise
    except Exception as e:
        logger.exception(f"Unexpected error handling transcription: {e}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e) or "Unknown error")
