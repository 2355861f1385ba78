"""Client for the chat relay: conversation state, SSE consumer and Markdown rendering."""

from .conversation import Conversation, ConversationEntry
from .render import render_markdown
from .session import SERVICE_UNAVAILABLE, ChatSession

__all__ = [
    "ChatSession",
    "Conversation",
    "ConversationEntry",
    "SERVICE_UNAVAILABLE",
    "render_markdown",
]
