"""Text-to-speech synthesis through the OpenAI audio API.

One request per sentence; the caller decides ordering. Failures are never
retried here: a failed synthesis ends the playback session that asked for it.
"""

import logging

from openai import AsyncOpenAI, OpenAIError

from docuchats.speech.config import SpeechConfig, Voice, get_speech_config

logger = logging.getLogger(__name__)

AUDIO_FORMAT = "mp3"
AUDIO_MEDIA_TYPE = "audio/mpeg"


class SynthesisError(Exception):
    """Raised when speech audio could not be produced for a text."""

    pass


class SpeechService:
    """Service wrapping the speech synthesis API."""

    def __init__(self, config: SpeechConfig | None = None) -> None:
        """Initialize the speech service.

        Args:
            config: Optional speech configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_speech_config()
        self._client = AsyncOpenAI(
            api_key=self._config.api_key,
            base_url=self._config.base_url,
        )

    async def synthesize(
        self,
        text: str,
        voice: Voice | None = None,
        speed: float | None = None,
    ) -> bytes:
        """Synthesize speech audio for a piece of text.

        Args:
            text: Text to read aloud.
            voice: Voice to use; defaults to the configured voice.
            speed: Speaking speed; defaults to the configured speed.

        Returns:
            MP3 audio bytes.

        Raises:
            SynthesisError: If the text is empty or the API call fails.
        """
        if not text.strip():
            raise SynthesisError("Text is required for text-to-speech")

        voice = voice or self._config.default_voice
        speed = speed if speed is not None else self._config.default_speed

        try:
            response = await self._client.audio.speech.create(
                model=self._config.model_name,
                voice=voice.value,
                input=text,
                speed=speed,
                response_format=AUDIO_FORMAT,
            )
        except OpenAIError as e:
            logger.error(f"Speech synthesis failed: {e}")
            raise SynthesisError(f"Failed to generate speech: {e}") from e

        audio = response.content
        if not audio:
            raise SynthesisError("Speech API returned no audio")
        return audio


# Module-level singleton instance
_speech_service: SpeechService | None = None


def get_speech_service() -> SpeechService:
    """Get or create the global speech service."""
    global _speech_service
    if _speech_service is None:
        _speech_service = SpeechService()
    return _speech_service
