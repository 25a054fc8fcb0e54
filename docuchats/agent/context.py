"""Per-conversation chat context.

Each document view chats in its own conversation. The context carries the
session identity and the paragraph the user is looking at; nothing about a
conversation lives in module state.
"""

import uuid

from pydantic import BaseModel, Field

# Paragraph context sent with each message is cut to this many characters
CONTEXT_CHAR_BUDGET = 4000


class ChatContext(BaseModel):
    """Context for one conversation about one document.

    Attributes:
        session_id: Conversation identifier chosen by the client.
        document: Name of the document being discussed.
        paragraph_text: Text of the paragraph currently on screen.
    """

    session_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    document: str | None = None
    paragraph_text: str = ""

    @property
    def conversation_id(self) -> str:
        """Agent session key; scoped by document so histories never mix."""
        if self.document:
            return f"{self.document}:{self.session_id}"
        return self.session_id

    def build_prompt(self, message: str) -> str:
        """Prefix the user's message with the truncated paragraph context."""
        context = self.paragraph_text[:CONTEXT_CHAR_BUDGET].strip()
        if not context:
            return message
        return f"{context}\n\nUser: {message}"
