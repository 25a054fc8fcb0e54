"""Speech synthesis configuration.

Credentials come from TTS_API_KEY / TTS_BASE_URL, falling back to
OPENAI_API_KEY, so speech can use a different provider than chat.
"""

import os
from enum import Enum

from pydantic import Field

from docuchats.config import ProviderConfig

MIN_SPEED = 0.25
MAX_SPEED = 4.0


class Voice(str, Enum):
    """Voices offered by the speech API."""

    ALLOY = "alloy"
    ECHO = "echo"
    FABLE = "fable"
    ONYX = "onyx"
    NOVA = "nova"
    SHIMMER = "shimmer"


class SpeechConfig(ProviderConfig):
    """Configuration for text-to-speech synthesis.

    Attributes:
        model_name: Speech model identifier.
        default_voice: Voice used when a request does not name one.
        default_speed: Playback speed used when a request does not set one.
    """

    env_prefix = "TTS"

    model_name: str = Field(
        default_factory=lambda: os.getenv("TTS_MODEL", "tts-1"),
        description="Speech model to use",
    )
    default_voice: Voice = Voice.ALLOY
    default_speed: float = Field(default=1.0, ge=MIN_SPEED, le=MAX_SPEED)


def get_speech_config() -> SpeechConfig:
    """Create speech configuration from environment.

    Raises:
        ValueError: If no API key is set.
    """
    return SpeechConfig()
