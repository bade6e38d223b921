"""Configuration for GenzAI.

Centralizes model identifiers and environment-driven settings.
"""

import os
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_TEXT_MODEL = "gemini-2.5-flash"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"

_TRUE_VALUES = {"1", "true", "yes", "on"}


class GeminiModel(str, Enum):
    """Model selection offered to the user.

    The value chosen at request start decides which pipeline handles it.
    """

    FLASH_2_5 = "gemini-2.5-flash"
    PRO_2_5 = "gemini-2.5-pro"
    FLASH_IMAGE_2_5 = "gemini-2.5-flash-image"

    @property
    def is_image_model(self) -> bool:
        """True when requests for this model go through the image pipeline."""
        return self is GeminiModel.FLASH_IMAGE_2_5

    @property
    def label(self) -> str:
        """Human readable name."""
        return _LABELS[self]


_LABELS = {
    GeminiModel.FLASH_2_5: "Gemini 2.5 Flash",
    GeminiModel.PRO_2_5: "Gemini 2.5 Pro",
    GeminiModel.FLASH_IMAGE_2_5: "Gemini 2.5 Flash Image",
}


class Settings(BaseModel):
    """Runtime settings, usually read from the environment."""

    model_config = ConfigDict(frozen=True)

    api_key: str | None = Field(default=None, description="Gemini API key")
    default_model: GeminiModel = Field(default=GeminiModel.FLASH_2_5)
    image_model: str = Field(
        default=DEFAULT_IMAGE_MODEL,
        description="Concrete model identifier used for image synthesis"
    )
    enhancer_model: str = Field(
        default=DEFAULT_TEXT_MODEL,
        description="Model used to rewrite image prompts"
    )
    image_endpoint: str | None = Field(
        default=None,
        description="URL of an /api/image endpoint; synthesis goes over HTTP when set"
    )
    enable_search: bool = Field(
        default=True,
        description="Attach Google Search grounding to text requests"
    )

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables.

        Environment variables:
            GEMINI_API_KEY: Gemini API key
            GENZAI_DEFAULT_MODEL: Initial model selection (default: gemini-2.5-flash)
            GENZAI_IMAGE_MODEL: Image model identifier (default: gemini-2.5-flash-image)
            GENZAI_ENHANCER_MODEL: Prompt enhancement model (default: gemini-2.5-flash)
            GENZAI_IMAGE_ENDPOINT: Optional image endpoint URL
            GENZAI_ENABLE_SEARCH: Enable search grounding (default: true)
        """
        return cls(
            api_key=os.getenv("GEMINI_API_KEY") or None,
            default_model=GeminiModel(os.getenv("GENZAI_DEFAULT_MODEL", DEFAULT_TEXT_MODEL)),
            image_model=os.getenv("GENZAI_IMAGE_MODEL", DEFAULT_IMAGE_MODEL),
            enhancer_model=os.getenv("GENZAI_ENHANCER_MODEL", DEFAULT_TEXT_MODEL),
            image_endpoint=os.getenv("GENZAI_IMAGE_ENDPOINT") or None,
            enable_search=os.getenv("GENZAI_ENABLE_SEARCH", "true").lower() in _TRUE_VALUES,
        )
