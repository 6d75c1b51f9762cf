"""Core package for the StudyPath AI advisory layer.

Exposes the advisory agent (six study-abroad domains behind one prompt,
invoke and parse pipeline) and the EduBot chat session manager.
"""

from .advisory.agent import AdvisoryAgent  # re-export for convenience
from .chat.agent import ChatSessionManager

__all__ = ["AdvisoryAgent", "ChatSessionManager"]
