from .types import ValidatedImage
from .validator import sniff_mime_type, validate_image

__all__ = ["ValidatedImage", "sniff_mime_type", "validate_image"]
