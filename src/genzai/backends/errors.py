"""Backend failure types.

Every backend raises :class:`BackendError` (or a subclass) carrying an
optional HTTP-like status code, so callers can classify failures without
knowing which SDK or transport produced them.
"""

STATUS_RATE_LIMITED = 429
STATUS_NOT_FOUND = 404
STATUS_METHOD_NOT_ALLOWED = 405
STATUS_SERVER_ERROR = 500

API_ERROR_PREFIX = "API Error:"

BUSY_MESSAGE = "The image service is busy or its usage limit has been reached."
MODEL_UNAVAILABLE_MESSAGE = "The image model is not available right now."
IMAGE_FAILURE_FALLBACK = "Failed to generate the image."
NO_IMAGE_MESSAGE = "Image generation failed (no image was produced)."
NO_IMAGE_DATA_MESSAGE = "No image data returned from model"


class BackendError(Exception):
    """Failure reported by a generation backend.

    Attributes:
        status: HTTP-like status code, if the backend reported one
        message: Free-text reason
    """

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        if self.status is not None:
            return f"{API_ERROR_PREFIX} [{self.status}] {self.message}"
        return f"{API_ERROR_PREFIX} {self.message}"


class ImageSynthesisError(BackendError):
    """Image synthesis failed; ``message`` is already user-presentable."""

    @classmethod
    def from_error(cls, error: BaseException) -> "ImageSynthesisError":
        """Wrap any failure raised by an image backend.

        The clarified message prefers the reason carried by the error and
        falls back to a fixed string. Status 429 and 404 get a leading
        explanation.
        """
        status = getattr(error, "status", None)
        reason = getattr(error, "message", None) or str(error)
        reason = strip_error_prefix(reason) or IMAGE_FAILURE_FALLBACK
        if status == STATUS_RATE_LIMITED and not reason.startswith(BUSY_MESSAGE):
            message = f"{BUSY_MESSAGE} {reason}"
        elif status == STATUS_NOT_FOUND and not reason.startswith(MODEL_UNAVAILABLE_MESSAGE):
            message = f"{MODEL_UNAVAILABLE_MESSAGE} {reason}"
        else:
            message = reason
        return cls(message, status=status)


class EmptyImageResultError(ImageSynthesisError):
    """The image backend succeeded but returned no image."""

    def __init__(self, message: str = NO_IMAGE_MESSAGE, status: int | None = None):
        super().__init__(message, status=status)


def strip_error_prefix(message: str) -> str:
    """Remove a leading ``API Error:`` marker and surrounding whitespace."""
    cleaned = message.strip()
    while cleaned.startswith(API_ERROR_PREFIX):
        cleaned = cleaned[len(API_ERROR_PREFIX):].strip()
    return cleaned


def status_message(status: int) -> str:
    """User-facing message for a status code returned by the image endpoint."""
    if status == STATUS_RATE_LIMITED:
        return BUSY_MESSAGE
    if status == STATUS_NOT_FOUND:
        return MODEL_UNAVAILABLE_MESSAGE
    if status == STATUS_METHOD_NOT_ALLOWED:
        return "Method not allowed"
    return IMAGE_FAILURE_FALLBACK
