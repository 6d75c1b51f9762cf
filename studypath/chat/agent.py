"""Chat session manager for the EduBot assistant.

The manager owns no session itself: the surface that renders a
:class:`ChatSession` passes it into every call, so two chat widgets never
share state. Per session there is at most one outstanding turn:

- ``send`` appends the user's message immediately and sets ``reply_pending``;
- when the responder answers, the reply is appended and the flag cleared;
- when it fails in any way, a single fallback message is appended
  instead and the flag cleared;
- a ``send`` while a reply is pending is rejected, not queued.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from ..errors import StudyPathError
from .client import ChatResponder, RelayChatClient
from .prompts import FALLBACK_TEXT, WELCOME_TEXT
from .schemas import ChatMessage, ChatSession, Sender

logger = logging.getLogger(__name__)


def new_session(welcome: bool = True) -> ChatSession:
    """Return a fresh session, optionally opened with the welcome message."""
    session = ChatSession()
    if welcome:
        session.messages.append(ChatMessage(content=WELCOME_TEXT, sender=Sender.ASSISTANT))
    return session


class ChatSessionManager:
    def __init__(
        self,
        responder: Optional[ChatResponder] = None,
        fallback_text: str = FALLBACK_TEXT,
        timeout: Optional[float] = None,
    ) -> None:
        self.responder = responder or RelayChatClient()
        self.fallback_text = fallback_text
        self.timeout = timeout

    async def send(self, session: ChatSession, text: str) -> bool:
        """Run one turn. Returns False if the message was rejected."""

        if session.reply_pending:
            logger.info("Rejected chat message: a reply is still pending")
            return False
        if not text or not text.strip():
            return False

        history = session.transcript
        session.messages.append(ChatMessage(content=text, sender=Sender.USER))
        session.reply_pending = True
        try:
            reply = await self.responder.reply(text, history, timeout=self.timeout)
        except StudyPathError as e:
            logger.warning("Chat reply failed (%s): %s", e.code, e.message)
            reply = self.fallback_text
        except Exception:
            logger.exception("Chat responder raised an unexpected error")
            reply = self.fallback_text
        finally:
            session.reply_pending = False

        session.messages.append(ChatMessage(content=reply, sender=Sender.ASSISTANT))
        return True

    def submit(self, session: ChatSession, text: str) -> Optional[asyncio.Task]:
        """Fire-and-forget ``send``; progress shows up on ``session``.

        Returns None when the message would be rejected, so nothing is
        scheduled. Must be called from a running event loop.
        """

        if session.reply_pending or not text or not text.strip():
            return None
        return asyncio.create_task(self.send(session, text))
