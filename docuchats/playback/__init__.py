"""Read-aloud playback synchronized with sentence highlighting.

The controller owns at most one playback session per document view and
exposes pure queries (speaking position, last completed sentence, sentence
status) for the UI to render highlights from.
"""

from docuchats.playback.controller import (
    AudioPlayer,
    PlaybackController,
    PlaybackError,
    PlaybackSession,
    PlaybackState,
    SentenceStatus,
)

__all__ = [
    "AudioPlayer",
    "PlaybackController",
    "PlaybackError",
    "PlaybackSession",
    "PlaybackState",
    "SentenceStatus",
]
