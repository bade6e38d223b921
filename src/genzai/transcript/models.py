"""Data models for the conversation transcript.

These models define a single transcript entry and the read-only
history view handed to the text backend.
"""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Author of a transcript entry."""

    USER = "user"
    MODEL = "model"


class Message(BaseModel):
    """One transcript entry.

    ``role`` and ``timestamp`` are fixed at creation. Model messages are
    filled in place while ``is_streaming`` is set.
    """

    role: Role = Field(frozen=True, description="Author of the message")
    text: str = Field(default="", description="Message text, built incrementally for model messages")
    timestamp: datetime = Field(default_factory=datetime.now, frozen=True)
    is_streaming: bool = Field(default=False, description="True while the entry is still being produced")
    is_generating_image: bool = Field(
        default=False,
        description="True while an image for this entry has not yet arrived"
    )
    image: str | None = Field(default=None, description="Image as a data URI")
    grounding_metadata: dict[str, Any] | None = Field(
        default=None,
        description="Citation and search-result data attached by the text pipeline"
    )

    def attach_image(self, image: str) -> None:
        """Attach the generated image and clear the image loading flag.

        Raises:
            ValueError: If an image was already attached
        """
        if self.image is not None:
            raise ValueError("Message already has an image attached")
        self.image = image
        self.is_generating_image = False


class HistoryEntry(BaseModel):
    """A past message as seen by the text backend."""

    model_config = ConfigDict(frozen=True)

    role: Role
    text: str
