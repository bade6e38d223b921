"""GenzAI image endpoint.

Exposes image synthesis behind a small JSON boundary so that clients never
hold the Gemini API key.

Endpoints
---------
========  ==============  ========================================
Method    Path            Purpose
========  ==============  ========================================
POST      ``/api/image``  Generate one image for ``{"prompt": ...}``
========  ==============  ========================================

Responses are ``{"image": "data:<mime>;base64,..."}`` with status 200, or
``{"error": "..."}`` with 400, 404, 405, 429 or 500.

Usage
-----
::

    genzai serve
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from .. import __version__
from ..backends.base import ImageSynthesizer
from ..backends.errors import (
    NO_IMAGE_DATA_MESSAGE,
    STATUS_METHOD_NOT_ALLOWED,
    STATUS_NOT_FOUND,
    STATUS_RATE_LIMITED,
    STATUS_SERVER_ERROR,
    BackendError,
    status_message,
    strip_error_prefix,
)
from ..backends.factory import create_image_synthesizer
from ..config import Settings

logger = logging.getLogger(__name__)


class ImageRequest(BaseModel):
    """Request body for ``POST /api/image``."""

    prompt: str = Field(min_length=1, description="Prompt to render")


def _error(status: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status, content={"error": message})


def _synthesizer_from_env() -> ImageSynthesizer | None:
    settings = Settings.from_env()
    if not settings.api_key:
        logger.warning("GEMINI_API_KEY not set, image endpoint disabled")
        return None
    return create_image_synthesizer("gemini", api_key=settings.api_key, model=settings.image_model)


def create_app(synthesizer: ImageSynthesizer | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        synthesizer: Backend used for generation. When omitted, a Gemini
            synthesizer is created from the environment at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owned = app.state.synthesizer is None
        if owned:
            app.state.synthesizer = _synthesizer_from_env()

        yield

        if owned and app.state.synthesizer is not None:
            await app.state.synthesizer.close()
            app.state.synthesizer = None

    app = FastAPI(title="GenzAI", version=__version__, lifespan=lifespan)
    app.state.synthesizer = synthesizer

    @app.post("/api/image")
    async def generate_image(request: Request) -> JSONResponse:
        """Generate an image for the prompt in the request body."""
        try:
            payload = ImageRequest.model_validate(await request.json())
        except (ValueError, ValidationError):
            return _error(400, "Request body must be JSON with a non-empty 'prompt'")

        backend: ImageSynthesizer | None = request.app.state.synthesizer
        if backend is None:
            return _error(STATUS_SERVER_ERROR, "Image backend is not configured")

        try:
            image = await backend.synthesize(payload.prompt)
        except BackendError as e:
            logger.error("Image Gen Error: %s", e)
            reason = strip_error_prefix(e.message)
            if e.status in (STATUS_RATE_LIMITED, STATUS_NOT_FOUND):
                return _error(e.status, f"{status_message(e.status)} {reason}".strip())
            return _error(STATUS_SERVER_ERROR, reason or status_message(STATUS_SERVER_ERROR))
        except Exception as e:
            logger.exception("Image Gen Error")
            return _error(STATUS_SERVER_ERROR, str(e) or status_message(STATUS_SERVER_ERROR))

        if not image:
            return _error(STATUS_SERVER_ERROR, NO_IMAGE_DATA_MESSAGE)
        return JSONResponse(status_code=200, content={"image": image})

    @app.api_route("/api/image", methods=["GET", "HEAD", "PUT", "PATCH", "DELETE", "OPTIONS"])
    async def image_wrong_method() -> JSONResponse:
        return _error(STATUS_METHOD_NOT_ALLOWED, status_message(STATUS_METHOD_NOT_ALLOWED))

    return app


app = create_app()
