"""
Upload acceptance at the transport boundary.

Applies the coarse checks that must pass before any bytes reach the
content validator: the declared type has to look like an image and the
body has to fit the configured size limit. The declared type is only a
pre-filter; the real classification is done by byte sniffing later.

Requests arrive either as multipart/url-encoded forms (optional ``image``
file, optional ``text`` field) or as JSON (``{"text": ...}``, text only).
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from starlette.datastructures import UploadFile

from .pipeline import get_upload_max_bytes
from dashlight.pipeline.errors import DeclaredTypeRejected, FileTooLarge

logger = logging.getLogger(__name__)

# Multipart boundaries, part headers and the text field on top of the file itself
MULTIPART_OVERHEAD_BYTES = 64 * 1024


@dataclass(frozen=True)
class AcceptedUpload:
    data: bytes
    declared_type: Optional[str] #untrusted, informational only
    size: int
    filename: Optional[str] = None


@dataclass(frozen=True)
class AnalysisInput:
    upload: Optional[AcceptedUpload]
    text: Optional[str]


async def accept_upload(file: Optional[UploadFile], max_bytes: int) -> Optional[AcceptedUpload]:
    """Read an optional uploaded file, or return None when nothing was attached."""
    if file is None:
        return None

    try:
        # Read one byte past the limit so oversized files are detected without loading them whole
        data = await file.read(max_bytes + 1)
    finally:
        await file.close()

    if not file.filename and not data:
        return None

    declared_type = file.content_type or ""
    if not declared_type.startswith("image/"):
        logger.warning(f"Rejected upload '{file.filename}' with declared type '{declared_type}'")
        raise DeclaredTypeRejected(declared_type)

    if len(data) > max_bytes:
        logger.warning(f"Rejected upload '{file.filename}': larger than {max_bytes} bytes")
        raise FileTooLarge(str(max_bytes))

    return AcceptedUpload(
        data=data,
        declared_type=declared_type,
        size=len(data),
        filename=file.filename,
    )


def _is_json(request: Request) -> bool:
    content_type = request.headers.get("content-type", "")
    return content_type.split(";")[0].strip().lower() == "application/json"


def _text_or_none(value) -> Optional[str]:
    return value if isinstance(value, str) else None


async def read_analysis_input(
    request: Request,
    max_bytes: int = Depends(get_upload_max_bytes),
) -> AnalysisInput:
    """
    Pull the optional image and text out of the request body.

    A declared Content-Length that cannot fit an allowed upload is rejected
    before the body is read. Non-file values sent under ``image`` are ignored,
    and so is a JSON body that does not parse (the request then simply
    carries no input).
    """
    content_length = request.headers.get("content-length", "")
    if content_length.isdigit() and int(content_length) > max_bytes + MULTIPART_OVERHEAD_BYTES:
        logger.warning(f"Rejected request body of {content_length} bytes before reading it")
        raise FileTooLarge(str(max_bytes))

    if _is_json(request):
        try:
            body = await request.json()
        except ValueError as e:
            logger.warning(f"Ignoring malformed JSON body: {e}")
            body = None
        text = body.get("text") if isinstance(body, dict) else None
        return AnalysisInput(upload=None, text=_text_or_none(text))

    async with request.form() as form:
        image = form.get("image")
        text = form.get("text")
        upload = await accept_upload(image, max_bytes) if isinstance(image, UploadFile) else None

    return AnalysisInput(upload=upload, text=_text_or_none(text))
