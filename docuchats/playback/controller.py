"""Sentence-by-sentence read-aloud playback.

The controller reads one paragraph aloud starting from a chosen sentence:
fetch audio for the sentence under the cursor, play it, advance, repeat.
Sentences are strictly sequential (one synthesis request in flight at most)
so the highlighted sentence is always the one being heard.

At most one session is live per controller. Starting a new session, stopping,
or loading new paragraphs cancels the current one at once. Every session gets
a new id; a continuation that resumes after an ``await`` compares its id with
the current one and drops its result when they differ, so a fetch that
completes after cancellation never touches state.

Failures are terminal: a synthesis or playback error resets the controller to
IDLE and records ``last_error``. The user restarts playback explicitly.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from docuchats.parsing.segmenter import Paragraph
from docuchats.speech.config import Voice
from docuchats.speech.synthesizer import SynthesisError

logger = logging.getLogger(__name__)

Synthesizer = Callable[[str, Voice, float], Awaitable[bytes]]


class PlaybackState(str, Enum):
    """Playback controller states."""

    IDLE = "idle"
    LOADING = "loading"
    SPEAKING = "speaking"


class SentenceStatus(str, Enum):
    """Highlight state of a sentence in the current view."""

    UNREAD = "unread"
    READ = "read"
    READING = "reading"


class PlaybackError(Exception):
    """Raised by an audio player when audio cannot be played."""

    pass


class AudioPlayer(Protocol):
    """Plays one audio clip at a time."""

    async def play(self, audio: bytes) -> None:
        """Play audio, returning when playback ends naturally.

        Raises:
            PlaybackError: If the audio cannot be decoded or played.
        """
        ...

    def stop(self) -> None:
        """Stop playback immediately and release the current clip."""
        ...


@dataclass
class PlaybackSession:
    """Live state of one read-aloud pass over a paragraph.

    Attributes:
        session_id: Id distinguishing this session from stale ones.
        paragraph_index: Paragraph being read.
        sentence_index: Sentence the run started from.
        sentences: All sentences of the paragraph.
        cursor: Sentence currently loading or speaking.
        highest_completed: Last sentence that finished playing.
    """

    session_id: int
    paragraph_index: int
    sentence_index: int
    sentences: list[str]
    cursor: int
    highest_completed: int


class PlaybackController:
    """State machine driving sentence playback for one document view."""

    def __init__(
        self,
        synthesize: Synthesizer,
        player: AudioPlayer,
        voice: Voice = Voice.ALLOY,
        speed: float = 1.0,
        on_change: Callable[["PlaybackController"], None] | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            synthesize: Async callable returning audio for (text, voice, speed).
            player: Audio output.
            voice: Voice requested for every sentence.
            speed: Speaking speed requested for every sentence.
            on_change: Called after every state or index change.
        """
        self.voice = voice
        self.speed = speed
        self.last_error: str | None = None
        self._synthesize = synthesize
        self._player = player
        self._on_change = on_change
        self._paragraphs: list[Paragraph] = []
        self._session: PlaybackSession | None = None
        self._session_id = 0
        self._state = PlaybackState.IDLE
        self._task: asyncio.Task[None] | None = None

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state is not PlaybackState.IDLE

    @property
    def is_loading(self) -> bool:
        return self._state is PlaybackState.LOADING

    @property
    def cursor(self) -> int | None:
        return self._session.cursor if self._session else None

    @property
    def highest_completed(self) -> int | None:
        return self._session.highest_completed if self._session else None

    @property
    def speaking_position(self) -> tuple[int, int] | None:
        """(paragraph, sentence) currently loading or speaking, if any."""
        if self._session is None:
            return None
        return self._session.paragraph_index, self._session.cursor

    @property
    def paragraphs(self) -> list[Paragraph]:
        return self._paragraphs

    def sentence_status(self, paragraph_index: int, sentence_index: int) -> SentenceStatus:
        """Highlight state for a sentence.

        Read sentences are cumulative: everything in the speaking paragraph up
        to the last completed sentence.
        """
        session = self._session
        if session is None or session.paragraph_index != paragraph_index:
            return SentenceStatus.UNREAD
        if sentence_index == session.cursor:
            return SentenceStatus.READING
        if sentence_index <= session.highest_completed:
            return SentenceStatus.READ
        return SentenceStatus.UNREAD

    def load(self, paragraphs: Sequence[Paragraph]) -> None:
        """Attach the paragraphs of the page being viewed, stopping playback."""
        self.stop()
        self._paragraphs = list(paragraphs)

    def start(self, paragraph_index: int, sentence_index: int = 0) -> bool:
        """Read a paragraph aloud from a sentence to its end.

        Any live session is cancelled first, even when the new run turns out
        to be empty. Must be called from a running event loop.

        Args:
            paragraph_index: Paragraph to read.
            sentence_index: First sentence to read.

        Returns:
            True if a session started, False if there was nothing to read.
        """
        cancelled = self._cancel()

        if not 0 <= paragraph_index < len(self._paragraphs):
            logger.debug(f"No paragraph {paragraph_index} to read")
            if cancelled:
                self._notify()
            return False

        sentences = self._paragraphs[paragraph_index].sentences
        if not 0 <= sentence_index < len(sentences):
            logger.debug(f"No sentences to read from {paragraph_index}:{sentence_index}")
            if cancelled:
                self._notify()
            return False

        self._session_id += 1
        session = PlaybackSession(
            session_id=self._session_id,
            paragraph_index=paragraph_index,
            sentence_index=sentence_index,
            sentences=list(sentences),
            cursor=sentence_index,
            highest_completed=sentence_index - 1,
        )
        self._session = session
        self._state = PlaybackState.LOADING
        self.last_error = None
        logger.debug(
            f"Playback session {session.session_id} started at "
            f"{paragraph_index}:{sentence_index}"
        )
        self._notify()

        self._task = asyncio.get_running_loop().create_task(self._run(session))
        return True

    def stop(self) -> None:
        """Cancel the live session, if any."""
        if self._cancel():
            self._notify()

    def toggle(self, paragraph_index: int) -> bool:
        """Stop if playing, otherwise read the paragraph from its start.

        Returns:
            True if a session is running afterwards.
        """
        if self.is_active:
            self.stop()
            return False
        return self.start(paragraph_index)

    def click_sentence(self, paragraph_index: int, sentence_index: int) -> bool:
        """Handle a click on a sentence.

        Clicking the sentence that is loading or speaking stops playback;
        clicking any other sentence restarts reading from there.

        Returns:
            True if a session is running afterwards.
        """
        if self.speaking_position == (paragraph_index, sentence_index):
            self.stop()
            return False
        return self.start(paragraph_index, sentence_index)

    async def wait(self) -> None:
        """Wait until the current session finishes, fails, or is cancelled."""
        if self._task is not None:
            await asyncio.wait({self._task})

    def _is_current(self, session: PlaybackSession) -> bool:
        return session.session_id == self._session_id and self._session is session

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change(self)

    def _reset(self) -> None:
        self._session = None
        self._state = PlaybackState.IDLE

    def _cancel(self) -> bool:
        if self._session is None:
            return False

        logger.debug(f"Playback session {self._session.session_id} cancelled")
        # Invalidate continuations still waiting on the old session
        self._session_id += 1
        self._reset()
        self._player.stop()
        task, self._task = self._task, None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
        return True

    def _fail(self, session: PlaybackSession, error: Exception) -> None:
        logger.warning(
            f"Playback session {session.session_id} failed at sentence "
            f"{session.cursor}: {error}"
        )
        self._session_id += 1
        self._reset()
        self._player.stop()
        self._task = None
        self.last_error = str(error)
        self._notify()

    async def _run(self, session: PlaybackSession) -> None:
        try:
            while True:
                text = session.sentences[session.cursor]
                audio = await self._synthesize(text, self.voice, self.speed)
                if not self._is_current(session):
                    return

                self._state = PlaybackState.SPEAKING
                self._notify()
                if not self._is_current(session):
                    return
                await self._player.play(audio)
                if not self._is_current(session):
                    return

                session.highest_completed = session.cursor
                session.cursor += 1
                if session.cursor >= len(session.sentences):
                    logger.debug(f"Playback session {session.session_id} finished")
                    self._reset()
                    self._task = None
                    self._notify()
                    return

                self._state = PlaybackState.LOADING
                self._notify()
        except (SynthesisError, PlaybackError) as e:
            if self._is_current(session):
                self._fail(session, e)
        except Exception as e:
            if self._is_current(session):
                logger.exception("Unexpected playback failure")
                self._fail(session, e)
