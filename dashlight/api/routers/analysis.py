"""
Dashboard analysis endpoint.
"""
import logging

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from ..models.analysis import AnalysisResponse
from ..models.common import ErrorResponse
from ..dependencies.pipeline import get_dispatcher
from ..dependencies.uploads import AnalysisInput, read_analysis_input
from dashlight.pipeline.dispatch import PromptDispatcher, Failure
from dashlight.pipeline.errors import PipelineError, InternalError, error_for
from dashlight.pipeline.upload import validate_image

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "No input, or the upload is not an image"},
    413: {"model": ErrorResponse, "description": "Upload exceeds the size limit"},
    500: {"model": ErrorResponse, "description": "Type detection, backend or internal failure"},
}

# The body is parsed by read_analysis_input, so it is documented by hand
_REQUEST_BODY = {
    "requestBody": {
        "content": {
            "multipart/form-data": {
                "schema": {
                    "type": "object",
                    "properties": {
                        "image": {"type": "string", "format": "binary", "description": "Photo of the dashboard (optional)"},
                        "text": {"type": "string", "description": "Question about the dashboard (optional)"},
                    },
                }
            },
            "application/json": {
                "schema": {
                    "type": "object",
                    "properties": {"text": {"type": "string"}},
                }
            },
        }
    }
}


@router.post(
    "/analyzeDashboardPic",
    response_model=AnalysisResponse,
    responses=_ERROR_RESPONSES,
    openapi_extra=_REQUEST_BODY,
)
async def analyze_dashboard_pic(
    request_input: AnalysisInput = Depends(read_analysis_input),
    dispatcher: PromptDispatcher = Depends(get_dispatcher),
):
    """
    Validate the upload by content, then ask the model about it.

    The image (if any) is sniffed before anything else runs; a request with
    neither an image nor non-blank text is rejected without calling the backend.
    """
    upload = request_input.upload
    try:
        validated = await run_in_threadpool(validate_image, upload.data) if upload else None
        envelope = dispatcher.build_envelope(request_input.text, validated)
        outcome = await run_in_threadpool(dispatcher.dispatch, envelope)
    except PipelineError:
        raise
    except Exception as e:
        logger.exception("Unexpected failure while analyzing dashboard request")
        raise InternalError(str(e)) from e

    if isinstance(outcome, Failure):
        raise error_for(outcome.kind, outcome.message)

    return AnalysisResponse(response=outcome.text)
