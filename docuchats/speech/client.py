"""HTTP client for the speech endpoint, used by the reader UI."""

import os

import httpx

from docuchats.speech.config import Voice
from docuchats.speech.synthesizer import SynthesisError

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")


class SpeechClient:
    """Fetch synthesized sentence audio from the API server."""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._timeout = timeout
        self._transport = transport

    async def synthesize(self, text: str, voice: Voice, speed: float) -> bytes:
        """POST a sentence to /tts/speech and return the audio bytes.

        Raises:
            SynthesisError: On HTTP errors or connection failures.
        """
        async with httpx.AsyncClient(
            base_url=self._base_url, timeout=self._timeout, transport=self._transport
        ) as client:
            try:
                response = await client.post(
                    "/tts/speech",
                    json={"text": text, "voice": voice.value, "speed": speed},
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise SynthesisError(f"HTTP {e.response.status_code}") from e
            except httpx.RequestError as e:
                raise SynthesisError(f"Connection failed: {e}") from e
        return response.content
