"""
FastAPI application entry point.

This is the main FastAPI application that coordinates the API routes, the
error contract and middleware. It is the bridge between HTTP requests and
the validation/dispatch pipeline.
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional, Union

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .routers import analysis, health
from dashlight.models.manager import ModelManager, DEFAULT_CONFIG_PATH
from dashlight.pipeline.errors import PipelineError, InternalError

load_dotenv()

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

ANALYSIS_TASK = "dashboard_analysis"

# Global application state
app_state = {}

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Builds the prompt dispatcher (and with it the Gemini client) once at startup,
    so a missing API key or a broken prompt fails the boot instead of a request.
    """
    logger.info("Starting dashlight API server...")
    model_manager: ModelManager = app_state["model_manager"]
    app_state["dispatcher"] = model_manager.dispatcher(ANALYSIS_TASK)
    logger.info(f"Prompt dispatcher ready (model: {app_state['dispatcher'].config.model})")

    yield  # Server runs here

    logger.info("Shutting down dashlight API server...")
    model_manager.cleanup()
    app_state.clear()


async def pipeline_error_handler(request: Request, exc: PipelineError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # Framework errors (malformed multipart bodies, unknown routes) keep the same body shape
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.url.path}", exc_info=exc)
    error = InternalError(str(exc))
    return JSONResponse(status_code=error.status_code, content={"error": error.message})


def create_app(config_path: Optional[Union[Path, str]] = None) -> FastAPI:
    """
    Factory function to create and configure the FastAPI application.

    The configuration is loaded here (CORS origins and upload limits are needed
    before the first request); backend clients are only created in the lifespan.
    """
    config_path = config_path or os.environ.get("DASHLIGHT_CONFIG") or DEFAULT_CONFIG_PATH
    model_manager = ModelManager(config_path=config_path)
    app_state["model_manager"] = model_manager

    app = FastAPI(
        title="dashlight",
        description="Car dashboard warning-light analysis backed by Gemini",
        version=__version__,
        lifespan=lifespan
    )

    origins = model_manager.cors_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(PipelineError, pipeline_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(analysis.router, tags=["analysis"])

    @app.get("/")
    async def root():
        """Root endpoint with basic API information."""
        return {
            "name": "dashlight",
            "version": __version__,
            "status": "operational",
            "endpoints": {
                "analyze": "/analyzeDashboardPic",
                "health": "/health",
                "docs": "/docs",
            }
        }

    return app

# Create the FastAPI app instance
app = create_app()
