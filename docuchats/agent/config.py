"""Chat and notes model settings.

Credentials come from LLM_API_KEY / LLM_BASE_URL (falling back to
OPENAI_API_KEY) via the shared ProviderConfig; this module adds the knobs
for the two agents: one model for both, a sampling temperature and separate
reply budgets for chat answers and document notes.
"""

import os

from pydantic import Field

from docuchats.config import ProviderConfig


class AgentConfig(ProviderConfig):
    """Configuration for the chat and notes agents.

    Attributes:
        model_name: Model identifier used by both agents.
        temperature: Sampling temperature for chat replies.
        max_tokens: Maximum tokens in a chat reply.
        notes_max_tokens: Maximum tokens in generated document notes.
    """

    env_prefix = "LLM"

    model_name: str = Field(
        default_factory=lambda: os.getenv("LLM_MODEL", "gpt-4o-mini"),
        description="Model to use",
    )
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1024, ge=1, le=128000)
    notes_max_tokens: int = Field(default=500, ge=1, le=128000)


def get_agent_config() -> AgentConfig:
    """Create agent configuration from environment.

    Raises:
        ValueError: If no API key is set.
    """
    return AgentConfig()
