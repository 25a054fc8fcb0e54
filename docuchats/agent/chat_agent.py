"""Agno agent service for document chat and notes.

Architecture Decisions:

1. **SQLite Storage** - Agno's Agent has no default persistence. Without explicit
   storage, session_id is ignored and every request is stateless. SQLite keeps
   each conversation's history across restarts with zero infrastructure.

2. **Explicit ChatContext** - Conversation identity and paragraph context are
   passed in by the caller on every request. Histories are keyed by document
   and session, so two readers never see each other's messages.

3. **Service Wrapper** - Decouples our API from Agno's interface. If Agno's API
   changes (as it did with add_history_to_messages -> add_history_to_context),
   we only fix one place.

4. **Separate Notes Agent** - Notes are one-shot summaries with their own
   instructions and token limit; they never enter a chat history.
"""

import logging
from collections.abc import AsyncGenerator

from agno.agent import Agent
from agno.db.sqlite import SqliteDb
from agno.models.openai import OpenAIChat

from docuchats.agent.config import AgentConfig, get_agent_config
from docuchats.agent.context import ChatContext
from docuchats.agent.notes import NOTES_INSTRUCTIONS, format_notes, truncate_for_notes
from docuchats.storage.local import StorageConfig

logger = logging.getLogger(__name__)

SESSIONS_DB_NAME = "sessions.db"

FALLBACK_REPLY = "Sorry, I could not generate a response."


class ChatCompletionError(Exception):
    """Raised when the language model call fails."""

    pass


class AgentService:
    """Service for managing the Agno chat and notes agents.

    Wraps Agno's Agent with:
    - Persistent SQLite storage for per-conversation history
    - Paragraph context assembly from an explicit ChatContext
    - Clean streaming interface for SSE endpoints
    - Centralized error handling
    """

    def __init__(self, config: AgentConfig | None = None) -> None:
        """Initialize the agent service.

        Args:
            config: Optional agent configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_agent_config()
        self._storage = self._create_storage()
        self._agent = self._create_agent()
        self._notes_agent = self._create_notes_agent()

    def _create_storage(self) -> SqliteDb:
        """Create SQLite storage in the data directory shared with documents."""
        data_dir = StorageConfig().root
        data_dir.mkdir(parents=True, exist_ok=True)
        return SqliteDb(
            db_file=str(data_dir / SESSIONS_DB_NAME),
            session_table="chat_sessions",
        )

    def _create_model(self, max_tokens: int, temperature: float) -> OpenAIChat:
        return OpenAIChat(
            id=self._config.model_name,
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            temperature=temperature,
            max_tokens=max_tokens,
        )

    def _create_agent(self) -> Agent:
        """Create the chat agent.

        Returns:
            Configured Agent with OpenAI model and SQLite storage.
        """
        return Agent(
            model=self._create_model(self._config.max_tokens, self._config.temperature),
            db=self._storage,
            description="A helpful assistant answering questions about an uploaded PDF.",
            instructions=[
                "Keep your responses concise and friendly.",
                "Messages may start with a paragraph from the document, followed by "
                "'User:' and the question. Ground your answer in that paragraph.",
            ],
            # History config: include last 20 messages (~10 conversation turns)
            # in context. Balances continuity vs token cost.
            add_history_to_context=True,
            num_history_messages=20,
            markdown=True,
        )

    def _create_notes_agent(self) -> Agent:
        """Create the stateless notes agent."""
        return Agent(
            model=self._create_model(self._config.notes_max_tokens, 0.5),
            instructions=NOTES_INSTRUCTIONS,
        )

    async def stream_response(
        self,
        context: ChatContext,
        message: str,
    ) -> AsyncGenerator[str]:
        """Stream response chunks for a message.

        Args:
            context: Conversation identity and paragraph context.
            message: The user's message.

        Yields:
            Response text chunks as they arrive.

        Raises:
            ChatCompletionError: If the model call fails mid-stream.
        """
        try:
            response_stream = self._agent.arun(
                context.build_prompt(message),
                session_id=context.conversation_id,
                stream=True,
            )

            async for chunk in response_stream:
                if hasattr(chunk, "content") and chunk.content:
                    yield chunk.content

        except Exception as e:
            logger.error(f"Chat stream failed for {context.conversation_id}: {e}")
            raise ChatCompletionError(str(e)) from e

    async def complete(
        self,
        context: ChatContext,
        message: str,
    ) -> str:
        """Get the complete reply for a message.

        Args:
            context: Conversation identity and paragraph context.
            message: The user's message.

        Returns:
            Complete response text.

        Raises:
            ChatCompletionError: If the model call fails.
        """
        try:
            response = await self._agent.arun(
                context.build_prompt(message),
                session_id=context.conversation_id,
            )
        except Exception as e:
            logger.error(f"Chat completion failed for {context.conversation_id}: {e}")
            raise ChatCompletionError(str(e)) from e

        return response.content or FALLBACK_REPLY

    async def generate_notes(self, text: str) -> str:
        """Summarize document text into study notes.

        Args:
            text: Extracted document text; truncated before submission.

        Returns:
            Formatted notes.

        Raises:
            ChatCompletionError: If the model call fails.
        """
        try:
            response = await self._notes_agent.arun(truncate_for_notes(text))
        except Exception as e:
            logger.error(f"Notes generation failed: {e}")
            raise ChatCompletionError(str(e)) from e

        return format_notes(response.content or "Could not generate notes.")


# Module-level singleton instance
_agent_service: AgentService | None = None


def get_agent_service() -> AgentService:
    """Get or create the global agent service.

    Uses singleton pattern for resource efficiency.

    Returns:
        The AgentService instance.
    """
    global _agent_service
    if _agent_service is None:
        _agent_service = AgentService()
    return _agent_service
