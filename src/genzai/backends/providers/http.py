"""Image synthesis over the ``/api/image`` HTTP boundary.

Request body is ``{"prompt": str}``; the response is ``{"image": str}`` on
200 and ``{"error": str}`` otherwise. Status codes are kept on the raised
BackendError so callers can tell quota (429) and missing-model (404)
failures apart.
"""

import logging
from typing import Any

import httpx

from ..base import ImageSynthesizer
from ..errors import BackendError, status_message

logger = logging.getLogger(__name__)


class HttpImageSynthesizer(ImageSynthesizer):
    """Client for a remote image endpoint.

    Hidden design decisions:
    - httpx client lifecycle
    - Mapping of HTTP status and error bodies to BackendError
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 120.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the HTTP synthesizer.

        Args:
            endpoint: Full URL of the image endpoint
            timeout: Request timeout in seconds
            client: Pre-built AsyncClient (mainly for tests)
        """
        self._endpoint = endpoint
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def synthesize(self, prompt: str) -> str | None:
        try:
            response = await self._client.post(self._endpoint, json={"prompt": prompt})
        except httpx.RequestError as exc:
            raise BackendError(str(exc) or type(exc).__name__) from exc

        body = _json_body(response)
        if response.status_code == 200:
            image = body.get("image")
            return image or None

        message = body.get("error") or status_message(response.status_code)
        logger.debug("Image endpoint returned %s: %s", response.status_code, message)
        raise BackendError(str(message), status=response.status_code)

    async def close(self) -> None:
        await self._client.aclose()


def _json_body(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}
