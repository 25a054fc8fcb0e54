"""Browser audio output for sentence playback.

Bridges the PlaybackController's awaitable ``AudioPlayer.play`` to a NiceGUI
``<audio>`` element, which only reports progress through events.
"""

import asyncio
import base64
import logging

from nicegui import ui

from docuchats.playback.controller import PlaybackError
from docuchats.speech.synthesizer import AUDIO_MEDIA_TYPE

logger = logging.getLogger(__name__)


class NiceGuiAudioPlayer:
    """AudioPlayer backed by a browser ``<audio>`` element.

    ``play`` hands the clip to the browser as a data URL and resolves when the
    element reports ``ended``. ``stop`` pauses and releases the waiter, so a
    cancelled session never waits on audio nobody will hear.
    """

    def __init__(self, element: ui.audio) -> None:
        self._element = element
        self._finished: asyncio.Future[None] | None = None
        element.on("ended", self._handle_ended)
        element.on("error", self._handle_error)

    async def play(self, audio: bytes) -> None:
        self.stop()
        finished = asyncio.get_running_loop().create_future()
        self._finished = finished
        encoded = base64.b64encode(audio).decode("ascii")
        self._element.set_source(f"data:{AUDIO_MEDIA_TYPE};base64,{encoded}")
        self._element.play()
        await finished

    def stop(self) -> None:
        self._element.pause()
        self._settle(None)

    def _settle(self, error: Exception | None) -> None:
        finished, self._finished = self._finished, None
        if finished is None or finished.done():
            return
        if error is None:
            finished.set_result(None)
        else:
            finished.set_exception(error)

    def _handle_ended(self) -> None:
        self._settle(None)

    def _handle_error(self) -> None:
        # Clearing the source after stop also fires error; ignore it
        if self._finished is None:
            return
        logger.warning("Browser reported an audio playback error")
        self._settle(PlaybackError("Browser could not play the audio"))
