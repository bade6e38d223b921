"""Error classification.

Turns any failure raised while answering a request into the text shown
in place of the answer. Image failures show their cleaned reason; text
failures show a fixed message and only log the reason.
"""

import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict

from ..backends.errors import (
    IMAGE_FAILURE_FALLBACK,
    EmptyImageResultError,
    ImageSynthesisError,
    strip_error_prefix,
)

logger = logging.getLogger(__name__)

IMAGE_FAILURE_TEMPLATE = (
    "⚠️ Sorry, GenzAI could not create the image right now.\n\n"
    "**Reason:** {reason}\n\n"
    "Please try a different prompt or wait a moment."
)
TEXT_FAILURE_MESSAGE = (
    "Sorry, something went wrong while contacting GenzAI. "
    "Make sure your internet connection is stable or try another model."
)
FALLBACK_MESSAGE = "Sorry, something went wrong. Please try again."


class ErrorCategory(str, Enum):
    """Failure taxonomy."""

    ENHANCEMENT_FAILURE = "enhancement_failure"
    SYNTHESIS_FAILURE = "synthesis_failure"
    EMPTY_IMAGE_RESULT = "empty_image_result"
    STREAM_FAILURE = "stream_failure"
    CLASSIFIER_FALLBACK = "classifier_fallback"


class ClassifiedError(BaseModel):
    """Outcome of classifying one failure."""

    model_config = ConfigDict(frozen=True)

    category: ErrorCategory
    text: str
    reason: str | None = None


class ErrorClassifier:
    """Maps raised failures to user-facing strings. Never raises."""

    def classify(self, error: object, image_mode: bool) -> ClassifiedError:
        """Classify a failure.

        Args:
            error: The raised failure (normally an Exception)
            image_mode: Whether the request went through the image pipeline

        Returns:
            ClassifiedError with category, display text and cleaned reason
        """
        try:
            if image_mode:
                return self._classify_image(error)
            return self._classify_text(error)
        except Exception:
            logger.warning("Could not classify failure of type %s", type(error).__name__, exc_info=True)
            return ClassifiedError(category=ErrorCategory.CLASSIFIER_FALLBACK, text=FALLBACK_MESSAGE)

    def describe(self, error: object, image_mode: bool) -> str:
        """Return only the display text for a failure."""
        return self.classify(error, image_mode).text

    def _classify_image(self, error: object) -> ClassifiedError:
        if not isinstance(error, BaseException):
            raise TypeError("not an exception")
        if not isinstance(error, ImageSynthesisError):
            error = ImageSynthesisError.from_error(error)

        reason = clean_reason(error) or IMAGE_FAILURE_FALLBACK
        logger.warning("Image generation failed: %s", reason)
        category = (
            ErrorCategory.EMPTY_IMAGE_RESULT
            if isinstance(error, EmptyImageResultError)
            else ErrorCategory.SYNTHESIS_FAILURE
        )
        return ClassifiedError(
            category=category,
            text=IMAGE_FAILURE_TEMPLATE.format(reason=reason),
            reason=reason,
        )

    def _classify_text(self, error: object) -> ClassifiedError:
        if not isinstance(error, BaseException):
            raise TypeError("not an exception")
        reason = clean_reason(error)
        logger.error("Text generation failed: %s", reason or type(error).__name__)
        return ClassifiedError(
            category=ErrorCategory.STREAM_FAILURE,
            text=TEXT_FAILURE_MESSAGE,
            reason=reason,
        )


def clean_reason(error: BaseException) -> str:
    """Message carried by ``error`` without the ``API Error:`` marker."""
    message = getattr(error, "message", None)
    if not isinstance(message, str) or not message:
        message = str(error)
    return strip_error_prefix(message)
