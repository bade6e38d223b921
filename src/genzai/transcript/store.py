"""Transcript store.

Hidden design decisions:
- Only the last entry is ever mutated in place
- Writers identify the entry they target; stale writes are dropped
- Entries are never removed except by clearing the whole transcript
"""

import logging
from collections.abc import Callable

from .models import HistoryEntry, Message, Role

logger = logging.getLogger(__name__)

Listener = Callable[["TranscriptStore"], None]


class TranscriptStore:
    """Ordered, append-only transcript with a single mutable tail.

    A pipeline keeps a reference to the placeholder it was given and passes
    it back on every write. If the transcript has been cleared or a newer
    message has been appended since, the write is a no-op.
    """

    def __init__(self) -> None:
        self._messages: list[Message] = []
        self._listeners: list[Listener] = []

    @property
    def messages(self) -> tuple[Message, ...]:
        """Snapshot of the current entries, oldest first."""
        return tuple(self._messages)

    @property
    def last(self) -> Message | None:
        """The last entry, or None for an empty transcript."""
        return self._messages[-1] if self._messages else None

    def __len__(self) -> int:
        return len(self._messages)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback run after every change.

        Returns:
            A function that removes the listener again
        """
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def append_user(self, text: str) -> Message:
        """Append a fully formed user message."""
        message = Message(role=Role.USER, text=text)
        self._messages.append(message)
        self._notify()
        return message

    def append_placeholder(self, is_image_mode: bool) -> Message:
        """Append an empty model message that a pipeline will fill in."""
        message = Message(
            role=Role.MODEL,
            is_streaming=True,
            is_generating_image=is_image_mode,
        )
        self._messages.append(message)
        self._notify()
        return message

    def mutate_last(self, target: Message, update: Callable[[Message], None]) -> bool:
        """Apply ``update`` to the last entry if it is still ``target``.

        Args:
            target: The entry the caller was given when its work started
            update: Function mutating the entry in place

        Returns:
            True if the update was applied
        """
        if not self._messages or self._messages[-1] is not target:
            logger.debug("Dropping write to a message that is no longer last")
            return False
        update(target)
        self._notify()
        return True

    def finalize_last(self, target: Message | None = None) -> bool:
        """Mark the last entry as no longer streaming.

        With ``target`` given, the call is identity-checked like
        :meth:`mutate_last`; without it the current last entry is finalized.
        """
        last = self.last
        if last is None or (target is not None and last is not target):
            logger.debug("Nothing to finalize")
            return False
        last.is_streaming = False
        self._notify()
        return True

    def history(self) -> list[HistoryEntry]:
        """Project finished messages into role/text pairs.

        The result is a copy taken at call time; later mutations of the
        transcript do not affect it.
        """
        return [
            HistoryEntry(role=message.role, text=message.text)
            for message in self._messages
            if not message.is_streaming
        ]

    def clear(self) -> None:
        """Drop every entry (new conversation)."""
        self._messages = []
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
