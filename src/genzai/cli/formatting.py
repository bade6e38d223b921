"""Output helpers for the CLI.

Hides how images and grounding data attached to messages are turned into
files and printable text.
"""

import base64
import binascii
import re
from datetime import datetime
from pathlib import Path
from typing import Any

_DATA_URI = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.DOTALL)

_EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


def decode_data_uri(data_uri: str) -> tuple[str, bytes]:
    """Split a base64 data URI into MIME type and raw bytes.

    Raises:
        ValueError: If the string is not a base64 data URI
    """
    match = _DATA_URI.match(data_uri)
    if match is None:
        raise ValueError("Not a base64 data URI")
    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e
    return match.group("mime"), data


def save_image(data_uri: str, output_dir: Path, stem: str | None = None) -> Path:
    """Write an image data URI to ``output_dir`` and return the file path."""
    mime_type, data = decode_data_uri(data_uri)
    output_dir.mkdir(parents=True, exist_ok=True)
    stem = stem or datetime.now().strftime("genzai-%Y%m%d-%H%M%S")
    path = output_dir / f"{stem}{_EXTENSIONS.get(mime_type, '.bin')}"
    path.write_bytes(data)
    return path


def grounding_sources(metadata: dict[str, Any] | None) -> list[tuple[str, str]]:
    """Extract (title, uri) pairs of web sources from grounding metadata.

    Duplicate URIs are listed once, in first-seen order.
    """
    if not metadata:
        return []

    sources = []
    seen = set()
    for chunk in metadata.get("grounding_chunks") or []:
        web = chunk.get("web") or {}
        uri = web.get("uri")
        if not uri or uri in seen:
            continue
        seen.add(uri)
        sources.append((web.get("title") or uri, uri))
    return sources
