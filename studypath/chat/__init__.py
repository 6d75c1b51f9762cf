"""EduBot chat: session state, reply sources and the session manager."""

from .agent import ChatSessionManager, new_session
from .client import GenerativeChatResponder, RelayChatClient
from .schemas import ChatMessage, ChatSession, Sender

__all__ = [
    "ChatMessage",
    "ChatSession",
    "ChatSessionManager",
    "GenerativeChatResponder",
    "RelayChatClient",
    "Sender",
    "new_session",
]
