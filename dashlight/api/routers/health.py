"""
Health check endpoints for monitoring and diagnostics.
"""

import time
from typing import Optional
from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from .. import __version__
from ..models.common import HealthStatus
from ..dependencies.pipeline import get_model_manager
from dashlight.models.manager import ModelManager

router = APIRouter()

# Track server start time for uptime calculation
_server_start_time = time.time()

@router.get("/", response_model=HealthStatus)
async def health_check(model_manager: Optional[ModelManager] = Depends(get_model_manager)):
    """
    Basic health check endpoint.

    Reports uptime and whether the configuration and dispatcher were loaded.
    Does not call the inference backend.
    """
    from ..main import app_state

    dependencies = {
        "config": "loaded" if model_manager else "not loaded",
        "dispatcher": "ready" if app_state.get("dispatcher") else "not initialized",
    }

    return HealthStatus(
        status="healthy",
        version=__version__,
        uptime=time.time() - _server_start_time,
        dependencies=dependencies
    )

@router.get("/ready")
async def readiness_check():
    """
    Readiness probe for container deployments.

    Returns 200 only when the service can handle analysis requests.
    """
    from ..main import app_state

    if app_state.get("dispatcher") is None:
        return JSONResponse(status_code=503, content={"ready": False, "reason": "Prompt dispatcher not initialized"})

    return {"ready": True, "message": "Service ready to handle requests"}

@router.get("/backend")
async def backend_check():
    """
    Probe the inference backend with a lightweight model listing call.

    Returns 503 when the backend cannot be reached with the configured credentials.
    """
    from ..main import app_state

    dispatcher = app_state.get("dispatcher")
    if dispatcher is None:
        return JSONResponse(status_code=503, content={"reachable": False, "reason": "Prompt dispatcher not initialized"})

    reachable = await run_in_threadpool(dispatcher.provider.health_check)
    if not reachable:
        return JSONResponse(status_code=503, content={"reachable": False, "reason": "Backend health check failed"})
    return {"reachable": True, "model": dispatcher.config.model}
