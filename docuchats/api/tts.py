"""Text-to-speech endpoint returning MP3 audio for one sentence."""

import logging

from fastapi import APIRouter, HTTPException, Response, status

from docuchats.models.schemas import SpeechRequest
from docuchats.speech.synthesizer import AUDIO_MEDIA_TYPE, SynthesisError, get_speech_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tts", tags=["tts"])


@router.post("/speech")
async def text_to_speech(request: SpeechRequest) -> Response:
    """Synthesize speech for a piece of text.

    Raises:
        500: Speech service is not configured.
        502: The speech API call failed.
    """
    try:
        speech_service = get_speech_service()
    except ValueError as e:
        logger.error(f"Speech service unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server configuration error: speech API key missing",
        ) from e

    try:
        audio = await speech_service.synthesize(request.text, request.voice, request.speed)
    except SynthesisError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to generate speech",
        ) from e

    return Response(
        content=audio,
        media_type=AUDIO_MEDIA_TYPE,
        headers={"Content-Disposition": 'inline; filename="speech.mp3"'},
    )
