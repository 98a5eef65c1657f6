"""
Image Loader - Resolve a frame reference into a fully decoded bitmap.

Sources may be raw bytes, a filesystem path, an http(s) URL or a data: URI
(extracted video frames usually arrive as data URIs). Fetching and decoding
are blocking, so they run in the loop's default executor; the caller's only
suspension point is awaiting that work.
"""

import asyncio
import base64
import logging
import threading
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import unquote_to_bytes

import requests
from PIL import Image

from .config import get_settings
from .errors import ImageLoadError
from .models import ImageSource

logger = logging.getLogger(__name__)

_DESCRIBE_LIMIT = 80


@dataclass
class LoadedImage:
    """A decoded RGBA bitmap with known intrinsic size."""

    image: Image.Image

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self) -> Tuple[int, int]:
        return self.image.size


def describe_source(source) -> str:
    """Short human-readable form of a source for errors and logs."""
    if isinstance(source, (bytes, bytearray)):
        return f"<{len(source)} bytes>"
    text = str(source)
    if len(text) > _DESCRIBE_LIMIT:
        return text[:_DESCRIBE_LIMIT - 3] + "..."
    return text


def _decode_data_uri(uri: str) -> bytes:
    header, sep, payload = uri.partition(",")
    if not sep:
        raise ValueError("data URI has no payload")
    if header.endswith(";base64"):
        return base64.b64decode(payload, validate=False)
    return unquote_to_bytes(payload)


def _fetch_bytes(source: ImageSource, timeout: Optional[float]) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if isinstance(source, Path):
        return source.read_bytes()
    if not isinstance(source, str):
        raise TypeError(f"Unsupported image source type: {type(source).__name__}")

    lowered = source[:8].lower()
    if lowered.startswith("data:"):
        return _decode_data_uri(source)
    if lowered.startswith(("http://", "https://")):
        response = requests.get(source, timeout=timeout)
        response.raise_for_status()
        return response.content
    if lowered.startswith("file://"):
        return Path(unquote_to_bytes(source[7:]).decode("utf-8")).read_bytes()
    return Path(source).read_bytes()


def decode_image(data: bytes) -> Image.Image:
    """Decode completely and normalize to RGBA so pixel access never fails."""
    img = Image.open(BytesIO(data))
    img.load()
    return img.convert("RGBA")


def load_image_sync(
    source: ImageSource,
    timeout: Optional[float] = None,
    cancelled: Optional[threading.Event] = None,
) -> Optional[LoadedImage]:
    """
    Blocking load. Raises ImageLoadError on any fetch or decode failure.

    If ``cancelled`` is set once the bytes are in, the decode is skipped and
    None is returned; a fetch already in flight still runs to completion.
    """
    label = describe_source(source)
    try:
        data = _fetch_bytes(source, timeout)
        if cancelled is not None and cancelled.is_set():
            logger.debug("Load of %s cancelled, skipping decode", label)
            return None
        img = decode_image(data)
    except (OSError, requests.RequestException, ValueError, TypeError,
            Image.DecompressionBombError) as e:
        raise ImageLoadError(f"Could not load image from {label}: {e}", source=label) from e
    logger.debug("Loaded %s (%dx%d)", label, img.width, img.height)
    return LoadedImage(img)


async def load_image(source: ImageSource, timeout: Optional[float] = None) -> LoadedImage:
    """
    Resolve ``source`` to a decoded bitmap.

    ``timeout`` bounds only the HTTP fetch; when omitted the configured
    CARD_ENGINE_HTTP_TIMEOUT applies (unbounded by default). Cancelling the
    awaiting task tells the worker thread to drop the bytes undecoded.
    """
    if timeout is None:
        timeout = get_settings().http_timeout
    cancelled = threading.Event()
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(None, load_image_sync, source, timeout, cancelled)
    except asyncio.CancelledError:
        cancelled.set()
        raise
