from abc import ABC, abstractmethod
from typing import Any

from ..transcript.models import HistoryEntry
from .models import ChunkStream


class _Backend(ABC):
    """Shared resource handling for backends.

    Supports async context manager protocol for proper resource cleanup:
        async with backend:
            ...
        # Automatically cleaned up
    """

    @abstractmethod
    async def close(self) -> None:
        """Close any open connections or resources."""
        pass

    async def __aenter__(self) -> Any:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit with automatic cleanup.

        Note: Suppresses "Event loop is closed" errors during cleanup.
        This is a known harmless race condition in httpx/anyio cleanup:
        https://github.com/encode/httpx/issues/914
        """
        try:
            await self.close()
        except RuntimeError as e:
            if "Event loop is closed" not in str(e):
                raise


class TextGenerationBackend(_Backend):
    """Abstract text generation backend.

    This module hides the design decision of which API produces the text.
    Implementations must handle:
    - Conversion of transcript history into the provider's format
    - Extraction of text fragments and grounding data from each chunk
    - Translation of provider errors into BackendError
    """

    @abstractmethod
    async def stream_response(
        self,
        model: str,
        text: str,
        history: list[HistoryEntry],
    ) -> ChunkStream:
        """Start a streamed response to ``text``.

        Args:
            model: Model identifier
            text: The new user message
            history: Prior conversation, oldest first

        Returns:
            ChunkStream yielding ResponseChunk objects in arrival order

        Raises:
            BackendError: If the request could not be started; errors raised
                while iterating the stream are BackendError as well
        """
        pass


class PromptEnhancer(_Backend):
    """Abstract prompt enhancement backend."""

    @abstractmethod
    async def enhance(self, text: str) -> str:
        """Rewrite a short image request into a detailed prompt.

        Raises:
            BackendError: On any failure
        """
        pass


class ImageSynthesizer(_Backend):
    """Abstract image synthesis backend."""

    @abstractmethod
    async def synthesize(self, prompt: str) -> str | None:
        """Generate one image for ``prompt``.

        Returns:
            The image as a ``data:<mime>;base64,...`` URI, or None when the
            backend produced no image

        Raises:
            BackendError: On any failure
        """
        pass
