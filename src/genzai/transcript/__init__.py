"""Transcript module for GenzAI.

Owns the ordered list of exchanged messages.
"""

from .models import HistoryEntry, Message, Role
from .store import TranscriptStore

__all__ = [
    "HistoryEntry",
    "Message",
    "Role",
    "TranscriptStore",
]
