import logging

from fastapi import APIRouter, Depends, HTTPException

from studio import schemas
from studio.api.dependencies import get_fal_service
from studio.core.errors import UpstreamError
from studio.services.fal import FalService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["speech"])

MIN_AUDIO_BASE64_LENGTH = 200


@router.post("/speech-to-text")
def speech_to_text(
    body: schemas.SpeechToTextRequest,
    fal: FalService = Depends(get_fal_service),
):
    audio = body.audio_base64
    if not audio or len(audio) < MIN_AUDIO_BASE64_LENGTH:
        raise HTTPException(status_code=400, detail="Empty or invalid audio payload")

    try:
        text = fal.transcribe(audio)
    except Exception as e:
        logger.exception("[STT] Fal Whisper call failed")
        raise UpstreamError("Transcription failed", details=str(e))

    if not text.strip():
        raise UpstreamError("No text returned by model", status_code=502)

    logger.info("[STT] Transcribed %d chars", len(text))
    return {"transcription": text.strip()}
