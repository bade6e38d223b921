from collections.abc import AsyncIterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ResponseChunk(BaseModel):
    """One element of a streamed text response."""

    model_config = ConfigDict(frozen=True)

    text: str = Field(default="", description="Incremental text fragment, possibly empty")
    grounding_metadata: dict[str, Any] | None = Field(
        default=None,
        description="Grounding (search/citation) data carried by this chunk"
    )

    @property
    def is_empty(self) -> bool:
        """True when the chunk carries neither text nor metadata."""
        return not self.text and self.grounding_metadata is None


class ChunkStream:
    """Lazy, finite, non-restartable stream of response chunks.

    Acts as an async iterator over an underlying generator. Each chunk is
    delivered at most once; after exhaustion or :meth:`aclose` the stream
    stays finished.

    Usage:
        stream = await backend.stream_response(model, text, history)
        async for chunk in stream:
            print(chunk.text, end="")
    """

    def __init__(self, async_iter: AsyncIterator[ResponseChunk]):
        """Initialize with an async iterator of chunks.

        Args:
            async_iter: Async iterator yielding ResponseChunk objects
        """
        self._iter = async_iter
        self._finished = False

    @classmethod
    def empty(cls) -> "ChunkStream":
        """A stream that yields nothing."""
        stream = cls(_no_chunks())
        stream._finished = True
        return stream

    @property
    def finished(self) -> bool:
        return self._finished

    def __aiter__(self) -> "ChunkStream":
        return self

    async def __anext__(self) -> ResponseChunk:
        if self._finished:
            raise StopAsyncIteration
        try:
            return await self._iter.__anext__()
        except BaseException:
            # Exhausted or failed; either way the stream cannot resume.
            self._finished = True
            raise

    async def aclose(self) -> None:
        """Cancel the stream, releasing the underlying generator."""
        self._finished = True
        aclose = getattr(self._iter, "aclose", None)
        if aclose is not None:
            await aclose()


async def _no_chunks() -> AsyncIterator[ResponseChunk]:
    for chunk in ():
        yield chunk
