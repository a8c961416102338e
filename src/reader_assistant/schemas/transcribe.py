from pydantic import BaseModel
from typing import Optional

class TranscribeRequest(BaseModel):
    audio: Optional[str] = None # base64 encoded audio
    format: Optional[str] = "webm" # webm | mp4 | wav | m4a

class TranscribeResponse(BaseModel):
    text: str
