"""Agno agent logic for document chat and notes.

Responsibilities:
    - Agent initialization with OpenAI models
    - Paragraph context assembly for each message
    - Per-conversation history via SQLite session storage
    - Study notes generation from document text

Conversation state is keyed by an explicit ChatContext supplied by callers.
Maintains clean separation from the HTTP layer.
"""

from docuchats.agent.chat_agent import AgentService, ChatCompletionError, get_agent_service
from docuchats.agent.config import AgentConfig, get_agent_config
from docuchats.agent.context import CONTEXT_CHAR_BUDGET, ChatContext

__all__ = [
    "CONTEXT_CHAR_BUDGET",
    "AgentConfig",
    "AgentService",
    "ChatCompletionError",
    "ChatContext",
    "get_agent_config",
    "get_agent_service",
]
