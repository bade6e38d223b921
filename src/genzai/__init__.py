"""
GenzAI: a conversational front end over the Gemini API.

This package follows Parnas's information hiding principles,
where each module hides a specific design decision.
"""

__version__ = "0.1.0"

from .config import GeminiModel, Settings
from .orchestrator import ResponseOrchestrator, SessionState
from .transcript import HistoryEntry, Message, Role, TranscriptStore

__all__ = [
    "GeminiModel",
    "HistoryEntry",
    "Message",
    "ResponseOrchestrator",
    "Role",
    "SessionState",
    "Settings",
    "TranscriptStore",
]
