"""Google Gemini backend implementations.

Uses the official Google GenAI SDK for async streaming, prompt rewriting
and image generation.
Reference: https://github.com/googleapis/python-genai
"""

import base64
from collections.abc import AsyncIterator
from typing import Any

from google import genai
from google.genai import errors, types

from ...prompts import get_enhance_image_prompt, get_system_prompt
from ...transcript.models import HistoryEntry, Role
from ..base import ImageSynthesizer, PromptEnhancer, TextGenerationBackend
from ..errors import BackendError
from ..models import ChunkStream, ResponseChunk

# Default safety settings - relaxed so that ordinary creative prompts are not blocked
DEFAULT_SAFETY_SETTINGS = [
    types.SafetySetting(category="HARM_CATEGORY_HARASSMENT", threshold="BLOCK_ONLY_HIGH"),
    types.SafetySetting(category="HARM_CATEGORY_HATE_SPEECH", threshold="BLOCK_ONLY_HIGH"),
    types.SafetySetting(category="HARM_CATEGORY_SEXUALLY_EXPLICIT", threshold="BLOCK_ONLY_HIGH"),
    types.SafetySetting(category="HARM_CATEGORY_DANGEROUS_CONTENT", threshold="BLOCK_ONLY_HIGH"),
]

DEFAULT_IMAGE_MIME_TYPE = "image/png"


def _translate_error(error: errors.APIError) -> BackendError:
    """Convert an SDK error into a BackendError keeping its status code."""
    return BackendError(error.message or str(error), status=error.code)


def _make_client(api_key: str | None, client: Any, client_kwargs: dict[str, Any]) -> Any:
    if client is not None:
        return client
    if not api_key:
        raise TypeError("Gemini backends require 'api_key' or 'client'")
    return genai.Client(api_key=api_key, **client_kwargs)


def _first_candidate(response: Any) -> Any | None:
    candidates = getattr(response, "candidates", None)
    if candidates:
        return candidates[0]
    return None


def extract_text(response: Any) -> str:
    """Extract text from a Gemini response or chunk.

    Args:
        response: GenerateContentResponse (or one streamed chunk)

    Returns:
        Joined text parts, or empty string
    """
    candidate = _first_candidate(response)
    if candidate is not None and candidate.content and candidate.content.parts:
        texts = [part.text for part in candidate.content.parts if getattr(part, "text", None)]
        return "".join(texts)
    return ""


def extract_grounding_metadata(response: Any) -> dict[str, Any] | None:
    """Extract grounding metadata of the first candidate as a plain dict."""
    candidate = _first_candidate(response)
    if candidate is None:
        return None
    metadata = getattr(candidate, "grounding_metadata", None)
    if metadata is None:
        return None
    if isinstance(metadata, dict):
        return metadata
    return metadata.model_dump(mode="json", exclude_none=True)


def extract_image(response: Any) -> str | None:
    """Return the first inline image of a response as a data URI."""
    candidate = _first_candidate(response)
    if candidate is None or not candidate.content or not candidate.content.parts:
        return None
    for part in candidate.content.parts:
        inline = getattr(part, "inline_data", None)
        if inline is not None and inline.data:
            data = inline.data
            if isinstance(data, bytes):
                data = base64.b64encode(data).decode("ascii")
            mime_type = inline.mime_type or DEFAULT_IMAGE_MIME_TYPE
            return f"data:{mime_type};base64,{data}"
    return None


class GeminiTextBackend(TextGenerationBackend):
    """Streaming text generation through Gemini.

    Hidden design decisions:
    - Google GenAI client initialization
    - History conversion to Gemini contents
    - Optional Google Search grounding tool
    - Relaxed safety settings
    """

    def __init__(
        self,
        api_key: str | None = None,
        enable_search: bool = True,
        client: Any = None,
        **client_kwargs: Any
    ):
        """Initialize the Gemini text backend.

        Args:
            api_key: Google AI API key
            enable_search: Attach the Google Search tool so answers carry grounding data
            client: Pre-built genai.Client (mainly for tests)
            **client_kwargs: Additional kwargs for Client
        """
        self._client = _make_client(api_key, client, client_kwargs)
        self._enable_search = enable_search

    def _convert_history(self, history: list[HistoryEntry], text: str) -> list[types.Content]:
        contents = []
        for entry in history:
            if not entry.text:
                continue
            role = "user" if entry.role == Role.USER else "model"
            contents.append(types.Content(role=role, parts=[types.Part(text=entry.text)]))
        contents.append(types.Content(role="user", parts=[types.Part(text=text)]))
        return contents

    def _build_config(self) -> types.GenerateContentConfig:
        tools = [types.Tool(google_search=types.GoogleSearch())] if self._enable_search else None
        return types.GenerateContentConfig(
            system_instruction=get_system_prompt(),
            safety_settings=DEFAULT_SAFETY_SETTINGS,
            tools=tools,
        )

    async def stream_response(
        self,
        model: str,
        text: str,
        history: list[HistoryEntry],
    ) -> ChunkStream:
        """Start a streaming response using Gemini."""
        contents = self._convert_history(history, text)
        config = self._build_config()

        try:
            stream = await self._client.aio.models.generate_content_stream(
                model=model, contents=contents, config=config
            )
        except errors.APIError as e:
            raise _translate_error(e) from e

        return ChunkStream(self._iterate(stream))

    async def _iterate(self, stream: AsyncIterator[Any]) -> AsyncIterator[ResponseChunk]:
        """Convert SDK chunks into ResponseChunk objects."""
        try:
            async for chunk in stream:
                yield ResponseChunk(
                    text=extract_text(chunk),
                    grounding_metadata=extract_grounding_metadata(chunk),
                )
        except errors.APIError as e:
            raise _translate_error(e) from e

    async def close(self) -> None:
        """Close the Gemini client.

        Note: The Google GenAI client doesn't require explicit closing,
        but we implement this for interface consistency.
        """
        pass


class GeminiPromptEnhancer(PromptEnhancer):
    """Rewrites image requests into detailed prompts with a text model."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gemini-2.5-flash",
        client: Any = None,
        **client_kwargs: Any
    ):
        self._client = _make_client(api_key, client, client_kwargs)
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    async def enhance(self, text: str) -> str:
        config = types.GenerateContentConfig(
            system_instruction=get_enhance_image_prompt(),
            safety_settings=DEFAULT_SAFETY_SETTINGS,
        )
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model, contents=text, config=config
            )
        except errors.APIError as e:
            raise _translate_error(e) from e

        enhanced = extract_text(response).strip()
        if not enhanced:
            raise BackendError("Prompt enhancement returned no text")
        return enhanced

    async def close(self) -> None:
        pass


class GeminiImageSynthesizer(ImageSynthesizer):
    """Generates images directly through the Gemini SDK.

    The model identifier is configuration; the Gemini image models all
    return the picture as an inline data part.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "gemini-2.5-flash-image",
        client: Any = None,
        **client_kwargs: Any
    ):
        self._client = _make_client(api_key, client, client_kwargs)
        self._model = model

    @property
    def model(self) -> str:
        return self._model

    async def synthesize(self, prompt: str) -> str | None:
        config = types.GenerateContentConfig(
            response_modalities=["TEXT", "IMAGE"],
            safety_settings=DEFAULT_SAFETY_SETTINGS,
        )
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model, contents=prompt, config=config
            )
        except errors.APIError as e:
            raise _translate_error(e) from e

        return extract_image(response)

    async def close(self) -> None:
        pass
