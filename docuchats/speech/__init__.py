"""Text-to-speech for reading document sentences aloud.

Components:
    - config: Voice choices and API settings
    - synthesizer: Server-side synthesis through the OpenAI audio API
    - client: HTTP client the reader UI uses to fetch sentence audio
"""

from docuchats.speech.client import SpeechClient
from docuchats.speech.config import SpeechConfig, Voice, get_speech_config
from docuchats.speech.synthesizer import SpeechService, SynthesisError, get_speech_service

__all__ = [
    "SpeechClient",
    "SpeechConfig",
    "SpeechService",
    "SynthesisError",
    "Voice",
    "get_speech_config",
    "get_speech_service",
]
