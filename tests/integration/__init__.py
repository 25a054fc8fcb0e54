"""Integration tests for components working together as a system.

Coverage:
    - API endpoints over ASGITransport with real parsing and storage
    - Chat streaming and notes with a mocked agent service
    - Speech endpoint and the reader's speech client
    - Agent responses with live LLM calls (when configured)

Live tests require OPENAI_API_KEY and are skipped without it.
"""
