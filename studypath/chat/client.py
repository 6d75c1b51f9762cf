"""Reply sources for the chat session manager.

``RelayChatClient`` posts ``{"message": ...}`` to the server-side chat
handler and reads ``{"message": ...}`` back. ``GenerativeChatResponder``
skips the relay and asks a generative client directly, sending recent
history along with the new message.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Protocol, Sequence

import httpx
from dotenv import load_dotenv

from ..advisory.client import DEFAULT_TIMEOUT_S, GenerativeClient, raise_for_status
from ..advisory.parser import extract_text, strip_code_fences
from ..errors import MalformedContentError, MalformedEnvelopeError, SchemaViolationError, TransportError
from .prompts import DEFAULT_HISTORY_LIMIT, build_chat_prompt
from .schemas import ChatMessage

logger = logging.getLogger(__name__)

load_dotenv()

DEFAULT_RELAY_URL = os.getenv("STUDYPATH_CHAT_RELAY_URL", "http://localhost:5000/api/chat")


class ChatResponder(Protocol):
    async def reply(
        self,
        message: str,
        history: Sequence[ChatMessage] = (),
        *,
        timeout: Optional[float] = None,
    ) -> str:  # pragma: no cover - interface only
        ...


class RelayChatClient:
    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url or DEFAULT_RELAY_URL
        self.timeout = DEFAULT_TIMEOUT_S if timeout is None else timeout
        self._transport = transport

    async def reply(
        self,
        message: str,
        history: Sequence[ChatMessage] = (),
        *,
        timeout: Optional[float] = None,
    ) -> str:
        # The relay keeps its own context; history is not forwarded.
        timeout_s = self.timeout if timeout is None else timeout
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(timeout_s), transport=self._transport
            ) as http:
                resp = await http.post(self.url, json={"message": message})
        except httpx.TimeoutException as e:
            raise TransportError(f"Chat relay timed out after {timeout_s}s", code="timeout") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Chat relay request failed: {e.__class__.__name__}", code="network") from e

        raise_for_status(resp, "Chat relay")
        try:
            body = resp.json()
        except ValueError as e:
            raise MalformedEnvelopeError("Chat relay reply is not JSON") from e
        text = body.get("message") if isinstance(body, dict) else None
        if not isinstance(text, str):
            raise SchemaViolationError("message", "expected a string")
        return text


class GenerativeChatResponder:
    def __init__(self, client: GenerativeClient, history_limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self.client = client
        self.history_limit = history_limit

    async def reply(
        self,
        message: str,
        history: Sequence[ChatMessage] = (),
        *,
        timeout: Optional[float] = None,
    ) -> str:
        prompt = build_chat_prompt(message, history, self.history_limit)
        raw = await self.client.invoke(prompt, timeout=timeout)
        text = strip_code_fences(extract_text(raw))
        if not text:
            raise MalformedContentError("Empty chat reply")
        return text
