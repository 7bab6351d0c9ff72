"""
Client-facing error taxonomy for the analysis pipeline.

Every failure the service reports maps to one ErrorKind, which owns the HTTP
status and the message shown to the client. Backend-layer errors
(ModelError) are translated into these kinds at the dispatcher boundary.
"""

from enum import Enum
from typing import Tuple


class ErrorKind(Enum):
    NO_INPUT_PROVIDED = "no_input_provided"
    TYPE_DETECTION_FAILED = "type_detection_failed"
    UNSUPPORTED_MEDIA_TYPE = "unsupported_media_type"
    EMPTY_MODEL_RESPONSE = "empty_model_response"
    BACKEND_ERROR = "backend_error"
    INTERNAL_ERROR = "internal_error"
    # upload acceptance, checked before any byte sniffing
    DECLARED_TYPE_REJECTED = "declared_type_rejected"
    FILE_TOO_LARGE = "file_too_large"

    @property
    def status_code(self) -> int:
        return _CONTRACT[self][0]

    def client_message(self, detail: str = "") -> str:
        return _CONTRACT[self][1].format(detail=detail)


_CONTRACT: dict[ErrorKind, Tuple[int, str]] = {
    ErrorKind.NO_INPUT_PROVIDED: (400, "No text or image provided."),
    ErrorKind.TYPE_DETECTION_FAILED: (500, "Could not determine file type."),
    ErrorKind.UNSUPPORTED_MEDIA_TYPE: (400, "Invalid file type. Only images are allowed."),
    ErrorKind.EMPTY_MODEL_RESPONSE: (500, "Gemini API did not return a text response."),
    ErrorKind.BACKEND_ERROR: (500, "Gemini API error: {detail}"),
    ErrorKind.INTERNAL_ERROR: (500, "An unexpected error occurred: {detail}"),
    ErrorKind.DECLARED_TYPE_REJECTED: (400, "Invalid file type."),
    ErrorKind.FILE_TOO_LARGE: (413, "File too large."),
}


class PipelineError(Exception):
    """Base for failures that short-circuit a request with a classified response."""

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR

    def __init__(self, detail: str = ""):
        self.detail = detail
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return self.kind.status_code

    @property
    def message(self) -> str:
        return self.kind.client_message(self.detail)


class NoInputProvided(PipelineError):
    kind = ErrorKind.NO_INPUT_PROVIDED

class TypeDetectionFailed(PipelineError):
    kind = ErrorKind.TYPE_DETECTION_FAILED

class UnsupportedMediaType(PipelineError):
    kind = ErrorKind.UNSUPPORTED_MEDIA_TYPE

class EmptyModelResponse(PipelineError):
    kind = ErrorKind.EMPTY_MODEL_RESPONSE

class BackendError(PipelineError):
    kind = ErrorKind.BACKEND_ERROR

class InternalError(PipelineError):
    kind = ErrorKind.INTERNAL_ERROR

class DeclaredTypeRejected(PipelineError):
    kind = ErrorKind.DECLARED_TYPE_REJECTED

class FileTooLarge(PipelineError):
    kind = ErrorKind.FILE_TOO_LARGE


def error_for(kind: ErrorKind, detail: str = "") -> PipelineError:
    """Build the PipelineError subclass registered for ``kind``."""
    for cls in PipelineError.__subclasses__():
        if cls.kind is kind:
            return cls(detail)
    return PipelineError(detail)
