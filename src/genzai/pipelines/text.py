"""Streaming text consumer.

Drives a chunked text response into the transcript placeholder.
"""

import logging

from ..backends.base import TextGenerationBackend
from ..backends.models import ResponseChunk
from ..transcript.models import HistoryEntry, Message
from ..transcript.store import TranscriptStore

logger = logging.getLogger(__name__)


class StreamingTextConsumer:
    """Folds streamed chunks into the last transcript entry.

    Each chunk with text or grounding data rewrites the placeholder with the
    full text accumulated so far; grounding data is replaced whenever a
    chunk carries a new value. Backend errors are not handled here.
    """

    def __init__(self, backend: TextGenerationBackend, store: TranscriptStore):
        self._backend = backend
        self._store = store

    async def consume(
        self,
        model: str,
        text: str,
        history: list[HistoryEntry],
        target: Message,
    ) -> str:
        """Stream a response to ``text`` into ``target``.

        Args:
            model: Model identifier passed to the backend
            text: The new user message
            history: Conversation before this request
            target: Placeholder message to fill

        Returns:
            The accumulated response text
        """
        stream = await self._backend.stream_response(model, text, history)
        accumulated = ""
        if stream is None:
            return accumulated

        async for chunk in stream:
            if chunk.is_empty:
                continue
            accumulated += chunk.text
            if not self._store.mutate_last(target, _apply(accumulated, chunk)):
                # The conversation was reset; nobody is listening any more.
                logger.debug("Placeholder replaced, closing stream early")
                await stream.aclose()
                break

        return accumulated


def _apply(accumulated: str, chunk: ResponseChunk):
    def update(message: Message) -> None:
        message.text = accumulated
        if chunk.grounding_metadata is not None:
            message.grounding_metadata = chunk.grounding_metadata
    return update
