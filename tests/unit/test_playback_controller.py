"""Unit tests for the sentence playback state machine.

The synthesizer and audio player are in-memory fakes; gates let a test hold
a synthesis request open to observe intermediate states and races.
"""

import asyncio

import pytest
import pytest_check as check

from docuchats.parsing.segmenter import Paragraph
from docuchats.playback.controller import (
    PlaybackController,
    PlaybackError,
    PlaybackState,
    SentenceStatus,
)
from docuchats.speech.config import Voice
from docuchats.speech.synthesizer import SynthesisError

Snapshot = tuple[PlaybackState, int | None, int | None]


class FakeSynthesizer:
    """Returns each sentence's text as its audio."""

    def __init__(self) -> None:
        self.requests: list[tuple[str, Voice, float]] = []
        self.failures: set[str] = set()
        self.gates: dict[str, asyncio.Event] = {}

    async def __call__(self, text: str, voice: Voice, speed: float) -> bytes:
        self.requests.append((text, voice, speed))
        if text in self.gates:
            await self.gates[text].wait()
        if text in self.failures:
            raise SynthesisError(f"HTTP 502 for {text}")
        return text.encode()


class FakePlayer:
    """Records played clips; playback completes on the next loop turn."""

    def __init__(self) -> None:
        self.played: list[bytes] = []
        self.stops = 0
        self.broken: set[bytes] = set()

    async def play(self, audio: bytes) -> None:
        if audio in self.broken:
            raise PlaybackError("Could not decode audio")
        await asyncio.sleep(0)
        self.played.append(audio)

    def stop(self) -> None:
        self.stops += 1


async def settle() -> None:
    """Let pending tasks run until they block."""
    for _ in range(20):
        await asyncio.sleep(0)


@pytest.fixture
def synthesizer() -> FakeSynthesizer:
    return FakeSynthesizer()


@pytest.fixture
def player() -> FakePlayer:
    return FakePlayer()


@pytest.fixture
def snapshots() -> list[Snapshot]:
    return []


@pytest.fixture
def controller(
    synthesizer: FakeSynthesizer, player: FakePlayer, snapshots: list[Snapshot]
) -> PlaybackController:
    """Controller loaded with one three-sentence paragraph and an empty one."""
    controller = PlaybackController(
        synthesizer,
        player,
        on_change=lambda c: snapshots.append((c.state, c.cursor, c.highest_completed)),
    )
    controller.load([
        Paragraph(text="One. Two. Three.", sentences=["One.", "Two.", "Three."]),
        Paragraph(text="...", sentences=[]),
    ])
    return controller


class TestPlaybackRun:
    """Tests for an uninterrupted read-aloud run."""

    async def test_reads_paragraph_to_the_end(
        self,
        controller: PlaybackController,
        player: FakePlayer,
        snapshots: list[Snapshot],
    ) -> None:
        """Sentences are fetched and played in order, then the controller idles."""
        check.is_true(controller.start(0))
        await controller.wait()

        check.equal(player.played, [b"One.", b"Two.", b"Three."])
        check.equal(controller.state, PlaybackState.IDLE)
        check.equal(
            snapshots,
            [
                (PlaybackState.LOADING, 0, -1),
                (PlaybackState.SPEAKING, 0, -1),
                (PlaybackState.LOADING, 1, 0),
                (PlaybackState.SPEAKING, 1, 0),
                (PlaybackState.LOADING, 2, 1),
                (PlaybackState.SPEAKING, 2, 1),
                (PlaybackState.IDLE, None, None),
            ],
        )

    async def test_starts_from_chosen_sentence(
        self, controller: PlaybackController, player: FakePlayer
    ) -> None:
        """Reading starts at the requested sentence and runs to the end."""
        controller.start(0, 1)
        await controller.wait()

        check.equal(player.played, [b"Two.", b"Three."])

    async def test_requests_configured_voice_and_speed(
        self, controller: PlaybackController, synthesizer: FakeSynthesizer
    ) -> None:
        """Every synthesis request carries the controller's voice and speed."""
        controller.voice = Voice.NOVA
        controller.speed = 1.5
        controller.start(0, 2)
        await controller.wait()

        check.equal(synthesizer.requests, [("Three.", Voice.NOVA, 1.5)])

    async def test_one_request_in_flight_at_a_time(
        self, controller: PlaybackController, synthesizer: FakeSynthesizer
    ) -> None:
        """The next sentence is not requested until the current one is heard."""
        synthesizer.gates["One."] = asyncio.Event()
        controller.start(0)
        await settle()

        check.equal([text for text, _, _ in synthesizer.requests], ["One."])
        controller.stop()

    async def test_sentence_status_while_reading(
        self, controller: PlaybackController, synthesizer: FakeSynthesizer
    ) -> None:
        """Completed sentences are READ, the current one READING, later ones UNREAD."""
        synthesizer.gates["Two."] = asyncio.Event()
        controller.start(0)
        await settle()

        check.equal(controller.speaking_position, (0, 1))
        check.is_true(controller.is_loading)
        check.equal(controller.sentence_status(0, 0), SentenceStatus.READ)
        check.equal(controller.sentence_status(0, 1), SentenceStatus.READING)
        check.equal(controller.sentence_status(0, 2), SentenceStatus.UNREAD)
        check.equal(controller.sentence_status(1, 0), SentenceStatus.UNREAD)
        controller.stop()


class TestPlaybackFailures:
    """Tests for synthesis and playback failures."""

    async def test_synthesis_failure_stops_playback(
        self,
        controller: PlaybackController,
        synthesizer: FakeSynthesizer,
        player: FakePlayer,
        snapshots: list[Snapshot],
    ) -> None:
        """A failed fetch ends the session with an error and no further requests."""
        synthesizer.failures.add("Two.")
        controller.start(0)
        await controller.wait()

        check.equal(player.played, [b"One."])
        check.equal(controller.state, PlaybackState.IDLE)
        check.is_in("HTTP 502", controller.last_error)
        check.equal(snapshots[-1], (PlaybackState.IDLE, None, None))
        check.is_not_in("Three.", [text for text, _, _ in synthesizer.requests])

    async def test_playback_failure_stops_playback(
        self, controller: PlaybackController, player: FakePlayer
    ) -> None:
        """Audio that cannot be played ends the session."""
        player.broken.add(b"One.")
        controller.start(0)
        await controller.wait()

        check.equal(controller.state, PlaybackState.IDLE)
        check.equal(controller.last_error, "Could not decode audio")
        check.equal(player.played, [])

    async def test_unexpected_error_stops_playback(
        self, controller: PlaybackController
    ) -> None:
        """Any other error from the synthesizer also resets to IDLE."""

        async def broken(text: str, voice: Voice, speed: float) -> bytes:
            raise RuntimeError("boom")

        controller._synthesize = broken
        controller.start(0)
        await controller.wait()

        check.equal(controller.state, PlaybackState.IDLE)
        check.equal(controller.last_error, "boom")

    async def test_new_session_clears_last_error(
        self, controller: PlaybackController, synthesizer: FakeSynthesizer
    ) -> None:
        """Starting again after a failure forgets the previous error."""
        synthesizer.failures.add("One.")
        controller.start(0)
        await controller.wait()
        synthesizer.failures.clear()

        controller.start(0)

        check.is_none(controller.last_error)
        await controller.wait()


class TestPlaybackCancellation:
    """Tests for stop, restart and stale results."""

    async def test_stop_during_fetch_discards_audio(
        self,
        controller: PlaybackController,
        synthesizer: FakeSynthesizer,
        player: FakePlayer,
    ) -> None:
        """Audio arriving after a stop is never played."""
        gate = synthesizer.gates["One."] = asyncio.Event()
        controller.start(0)
        await settle()

        controller.stop()
        gate.set()
        await settle()

        check.equal(player.played, [])
        check.equal(controller.state, PlaybackState.IDLE)
        check.is_none(controller.speaking_position)
        check.greater_equal(player.stops, 1)

    async def test_restart_replaces_running_session(
        self,
        controller: PlaybackController,
        synthesizer: FakeSynthesizer,
        player: FakePlayer,
    ) -> None:
        """Starting again cancels the old session; only the new one plays."""
        gate = synthesizer.gates["One."] = asyncio.Event()
        controller.start(0, 0)
        await settle()

        controller.start(0, 2)
        gate.set()
        await controller.wait()
        await settle()

        check.equal(player.played, [b"Three."])

    async def test_restart_from_earlier_sentence_resets_progress(
        self, controller: PlaybackController, synthesizer: FakeSynthesizer
    ) -> None:
        """Read progress starts over when a run restarts earlier in the paragraph."""
        controller.start(0, 1)
        await controller.wait()

        synthesizer.gates["One."] = asyncio.Event()
        controller.start(0, 0)
        await settle()

        check.equal(controller.highest_completed, -1)
        check.equal(controller.sentence_status(0, 0), SentenceStatus.READING)
        check.equal(controller.sentence_status(0, 2), SentenceStatus.UNREAD)
        controller.stop()

    async def test_load_stops_playback(
        self, controller: PlaybackController, synthesizer: FakeSynthesizer
    ) -> None:
        """Switching pages stops playback and replaces the paragraphs."""
        synthesizer.gates["One."] = asyncio.Event()
        controller.start(0)
        await settle()

        controller.load([Paragraph(text="New.", sentences=["New."])])

        check.equal(controller.state, PlaybackState.IDLE)
        check.equal(len(controller.paragraphs), 1)


class TestPlaybackControls:
    """Tests for toggle, sentence clicks and empty runs."""

    async def test_empty_paragraph_is_a_no_op(
        self, controller: PlaybackController, snapshots: list[Snapshot]
    ) -> None:
        """A paragraph without sentences never leaves IDLE."""
        check.is_false(controller.start(1))
        check.equal(controller.state, PlaybackState.IDLE)
        check.equal(snapshots, [])

    async def test_out_of_range_indices_are_a_no_op(
        self, controller: PlaybackController
    ) -> None:
        """Missing paragraphs or sentences do not start a session."""
        check.is_false(controller.start(5))
        check.is_false(controller.start(0, 3))
        check.is_false(controller.start(-1))
        check.equal(controller.state, PlaybackState.IDLE)

    async def test_empty_run_still_cancels_current_session(
        self,
        controller: PlaybackController,
        synthesizer: FakeSynthesizer,
        snapshots: list[Snapshot],
    ) -> None:
        """Starting an empty run stops whatever was playing."""
        synthesizer.gates["One."] = asyncio.Event()
        controller.start(0)
        await settle()

        check.is_false(controller.start(1))
        check.equal(controller.state, PlaybackState.IDLE)
        check.equal(snapshots[-1], (PlaybackState.IDLE, None, None))

    async def test_toggle_starts_and_stops(
        self, controller: PlaybackController, synthesizer: FakeSynthesizer
    ) -> None:
        """Toggle plays from the first sentence, and stops when active."""
        synthesizer.gates["One."] = asyncio.Event()

        check.is_true(controller.toggle(0))
        check.equal(controller.speaking_position, (0, 0))
        check.is_false(controller.toggle(0))
        check.is_false(controller.is_active)

    async def test_click_on_speaking_sentence_stops(
        self, controller: PlaybackController, synthesizer: FakeSynthesizer
    ) -> None:
        """Clicking the sentence being read stops playback."""
        synthesizer.gates["One."] = asyncio.Event()
        controller.start(0)
        await settle()

        check.is_false(controller.click_sentence(0, 0))
        check.equal(controller.state, PlaybackState.IDLE)

    async def test_click_on_other_sentence_restarts_there(
        self, controller: PlaybackController, synthesizer: FakeSynthesizer
    ) -> None:
        """Clicking another sentence reads from it instead."""
        synthesizer.gates["One."] = asyncio.Event()
        synthesizer.gates["Two."] = asyncio.Event()
        controller.start(0)
        await settle()

        check.is_true(controller.click_sentence(0, 1))
        check.equal(controller.speaking_position, (0, 1))
        controller.stop()

    async def test_stop_when_idle_does_not_notify(
        self, controller: PlaybackController, snapshots: list[Snapshot]
    ) -> None:
        """Stopping with nothing playing changes nothing."""
        controller.stop()

        check.equal(snapshots, [])
