"""Unit tests for individual components in isolation.

Coverage:
    - parsing/: Normalization, segmentation and PDF extraction
    - playback/: Read-aloud state machine with fake synthesizer and player
    - agent/: Configuration, chat context, notes and agent wiring
    - speech/ and storage/: Synthesis service, HTTP client, document store

Uses mocks for external services. Leverages pytest-check for multiple
assertions per test.
"""
