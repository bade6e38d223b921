from typing import Any

from .base import ImageSynthesizer, PromptEnhancer, TextGenerationBackend
from .providers import (
    GeminiImageSynthesizer,
    GeminiPromptEnhancer,
    GeminiTextBackend,
    HttpImageSynthesizer,
)


def create_text_backend(provider: str = "gemini", **config: Any) -> TextGenerationBackend:
    """Create a text generation backend.

    Args:
        provider: Provider type ('gemini')
        **config: Provider-specific configuration
            For Gemini:
                - api_key: str (required unless client is given)
                - enable_search: bool (default: True)

    Raises:
        ValueError: If provider type is not supported
        TypeError: If required configuration is missing
    """
    if provider.lower() == "gemini":
        if "api_key" not in config and "client" not in config:
            raise TypeError("Gemini text backend requires 'api_key' in config")
        return GeminiTextBackend(**config)

    raise ValueError(
        f"Unsupported text provider: {provider}. "
        f"Supported providers: 'gemini'"
    )


def create_prompt_enhancer(provider: str = "gemini", **config: Any) -> PromptEnhancer:
    """Create a prompt enhancement backend.

    Args:
        provider: Provider type ('gemini')
        **config: Provider-specific configuration
            For Gemini:
                - api_key: str (required unless client is given)
                - model: str (default: 'gemini-2.5-flash')
    """
    if provider.lower() == "gemini":
        if "api_key" not in config and "client" not in config:
            raise TypeError("Gemini prompt enhancer requires 'api_key' in config")
        return GeminiPromptEnhancer(**config)

    raise ValueError(
        f"Unsupported enhancer provider: {provider}. "
        f"Supported providers: 'gemini'"
    )


def create_image_synthesizer(provider: str = "gemini", **config: Any) -> ImageSynthesizer:
    """Create an image synthesis backend.

    Args:
        provider: Provider type ('gemini', 'http')
        **config: Provider-specific configuration
            For Gemini:
                - api_key: str (required unless client is given)
                - model: str (default: 'gemini-2.5-flash-image')
            For HTTP:
                - endpoint: str (required)
                - timeout: float (default: 120.0)

    Examples:
        >>> synthesizer = create_image_synthesizer(
        ...     "http",
        ...     endpoint="http://localhost:8000/api/image"
        ... )
    """
    provider_lower = provider.lower()

    if provider_lower == "gemini":
        if "api_key" not in config and "client" not in config:
            raise TypeError("Gemini image synthesizer requires 'api_key' in config")
        return GeminiImageSynthesizer(**config)

    if provider_lower == "http":
        if "endpoint" not in config:
            raise TypeError("HTTP image synthesizer requires 'endpoint' in config")
        return HttpImageSynthesizer(**config)

    raise ValueError(
        f"Unsupported image provider: {provider}. "
        f"Supported providers: 'gemini', 'http'"
    )
