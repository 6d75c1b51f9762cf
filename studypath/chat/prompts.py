"""Texts for the EduBot chat assistant.

Kept in a separate module so the relay handler, the direct responder and
the CLI demo share the same wording.
"""

from __future__ import annotations

from typing import Sequence

from .schemas import ChatMessage, Sender

WELCOME_TEXT = (
    "Hi there! I'm EduBot, your guide for studying abroad. I can help you with "
    "university matching, visa applications, scholarships, cultural tips, document "
    "preparation, and much more. How can I assist you today?"
)

FALLBACK_TEXT = (
    "I'm having trouble connecting right now. Please try again in a moment, or feel "
    "free to explore the platform features in the meantime!"
)

CHAT_SYSTEM_INSTRUCTIONS = """
You are "EduBot", a study-abroad counselor for international students.

RULES:
1. Answer the student's latest message directly; no opening filler.
2. Keep answers under 5 sentences unless a list is required.
3. Cover university matching, applications, visas, scholarships, cultural adaptation and careers.
4. If you are unsure about a time-sensitive fact (deadlines, fees, visa rules), say so and point to the official source.
5. Reply in plain text, not JSON.
""".strip()

# Earlier turns included in each prompt.
DEFAULT_HISTORY_LIMIT = 10

_SPEAKERS = {Sender.USER: "Student", Sender.ASSISTANT: "EduBot"}


def build_chat_prompt(
    message: str,
    history: Sequence[ChatMessage] = (),
    history_limit: int = DEFAULT_HISTORY_LIMIT,
) -> str:
    recent = list(history)[-history_limit:] if history_limit > 0 else []
    lines = [f"{_SPEAKERS[m.sender]}: {m.content}" for m in recent]
    conversation = "\n".join(lines) if lines else "(no earlier messages)"
    return (
        f"{CHAT_SYSTEM_INSTRUCTIONS}\n\n"
        f"=== CONVERSATION SO FAR ===\n{conversation}\n\n"
        f"Student: {message}\n"
        "EduBot:"
    )
