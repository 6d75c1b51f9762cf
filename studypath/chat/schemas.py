from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Sender(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    content: str
    sender: Sender
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class ChatSession:
    """One conversation: append-only messages plus the reply-pending flag.

    Owned by whatever surface renders it; only ChatSessionManager appends
    to ``messages`` or flips ``reply_pending``.
    """

    messages: List[ChatMessage] = field(default_factory=list)
    reply_pending: bool = False

    @property
    def transcript(self) -> Tuple[ChatMessage, ...]:
        return tuple(self.messages)
