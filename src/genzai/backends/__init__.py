from .base import ImageSynthesizer, PromptEnhancer, TextGenerationBackend
from .errors import BackendError, EmptyImageResultError, ImageSynthesisError
from .factory import create_image_synthesizer, create_prompt_enhancer, create_text_backend
from .models import ChunkStream, ResponseChunk
from .providers import (
    GeminiImageSynthesizer,
    GeminiPromptEnhancer,
    GeminiTextBackend,
    HttpImageSynthesizer,
)

__all__ = [
    "BackendError",
    "ChunkStream",
    "EmptyImageResultError",
    "GeminiImageSynthesizer",
    "GeminiPromptEnhancer",
    "GeminiTextBackend",
    "HttpImageSynthesizer",
    "ImageSynthesisError",
    "ImageSynthesizer",
    "PromptEnhancer",
    "ResponseChunk",
    "TextGenerationBackend",
    "create_image_synthesizer",
    "create_prompt_enhancer",
    "create_text_backend",
]
