"""
Content-based upload validation.

The client-declared content type and file name are never consulted here:
the true media type comes from libmagic's signature database, and only
image/* content is let through to the inference backend.
"""
import logging

import magic

from ..errors import TypeDetectionFailed, UnsupportedMediaType
from .types import ValidatedImage

logger = logging.getLogger(__name__)


def sniff_mime_type(data: bytes) -> str:
    """Return the normalized MIME type libmagic derives from ``data``."""
    try:
        detected = magic.from_buffer(data, mime=True)
    except magic.MagicException as e:
        logger.error(f"libmagic could not classify upload: {e}")
        raise TypeDetectionFailed(str(e)) from e

    if not detected:
        raise TypeDetectionFailed("libmagic returned no MIME type")

    # e.g. "text/plain; charset=us-ascii" -> "text/plain"
    return detected.split(";", 1)[0].strip().lower()


def validate_image(data: bytes) -> ValidatedImage:
    data = bytes(data)
    if not data:
        raise UnsupportedMediaType("empty upload")

    mime_type = sniff_mime_type(data)
    logger.debug(f"Sniffed upload type: {mime_type} ({len(data)} bytes)")

    if not mime_type.startswith("image/"):
        logger.warning(f"Rejected upload with sniffed type {mime_type}")
        raise UnsupportedMediaType(mime_type)

    return ValidatedImage(data=data, mime_type=mime_type)
