from .gemini import GeminiImageSynthesizer, GeminiPromptEnhancer, GeminiTextBackend
from .http import HttpImageSynthesizer

__all__ = [
    "GeminiImageSynthesizer",
    "GeminiPromptEnhancer",
    "GeminiTextBackend",
    "HttpImageSynthesizer",
]
