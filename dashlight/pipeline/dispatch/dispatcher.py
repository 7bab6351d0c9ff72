import logging
from typing import Optional

from dashlight.models.providers.base import (
    ModelProvider, GenerateRequest, ModelError, TextPart, InlineDataPart
)
from ..errors import ErrorKind, NoInputProvided
from ..upload.types import ValidatedImage
from .types import DispatcherConfig, PromptEnvelope, InferenceOutcome, Success, Failure

logger = logging.getLogger(__name__)


class PromptDispatcher:
    """
    Builds the multimodal request for one analysis and makes the single backend call.

    Content parts are always ordered image first (when present), then exactly one
    text part carrying the instruction plus any user text. The provider is shared
    across requests and must be safe for concurrent use; the dispatcher itself
    holds no per-request state.
    """

    def __init__(self, provider: ModelProvider, config: DispatcherConfig):
        self.provider = provider
        self.config = config

    @staticmethod
    def normalize_user_text(text: Optional[str]) -> Optional[str]:
        if text is None:
            return None
        text = text.strip()
        return text or None

    def build_envelope(self, user_text: Optional[str], image: Optional[ValidatedImage]) -> PromptEnvelope:
        user_text = self.normalize_user_text(user_text)
        if user_text is None and image is None:
            raise NoInputProvided()
        return PromptEnvelope(
            instruction_text=self.config.instruction_text,
            user_text=user_text,
            image=image,
        )

    def build_request(self, envelope: PromptEnvelope) -> GenerateRequest:
        parts = []
        if envelope.image is not None:
            parts.append(InlineDataPart(mime_type=envelope.image.mime_type, data=envelope.image.data))
        parts.append(TextPart(text=envelope.composed_text))
        return GenerateRequest(
            model=self.config.model,
            parts=tuple(parts),
            params=dict(self.config.params) or None,
        )

    def dispatch(self, envelope: PromptEnvelope) -> InferenceOutcome:
        request = self.build_request(envelope)
        logger.info(
            f"Dispatching to {request.model}: {len(request.parts)} part(s), "
            f"image={envelope.image.mime_type if envelope.image else None}, "
            f"user_text={'yes' if envelope.user_text else 'no'}"
        )

        try:
            response = self.provider.generate(request)
        except ModelError as e:
            logger.error(f"Error from Gemini API: {e}")
            return Failure(kind=ErrorKind.BACKEND_ERROR, message=str(e))

        if not response.content:
            logger.error("Gemini API returned no text content")
            return Failure(kind=ErrorKind.EMPTY_MODEL_RESPONSE)

        logger.info(f"Gemini response received ({len(response.content)} chars)")
        return Success(text=response.content, meta=response.meta)

    def run(self, user_text: Optional[str], image: Optional[ValidatedImage]) -> InferenceOutcome:
        """Presence check, then one backend call. Raises NoInputProvided before any call."""
        return self.dispatch(self.build_envelope(user_text, image))
