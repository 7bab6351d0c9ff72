"""
Access to the startup-built pipeline objects.

The ModelManager and PromptDispatcher are created once in the application
lifespan and shared read-only by every request.
"""

from typing import Optional

from dashlight.models.manager import ModelManager, DEFAULT_MAX_UPLOAD_BYTES
from dashlight.pipeline.dispatch import PromptDispatcher


def get_model_manager() -> Optional[ModelManager]:
    """FastAPI dependency to get the model manager from app state."""
    from ..main import app_state
    return app_state.get("model_manager")


def get_dispatcher() -> PromptDispatcher:
    """FastAPI dependency to get the shared prompt dispatcher from app state."""
    from ..main import app_state
    dispatcher = app_state.get("dispatcher")
    if dispatcher is None:
        raise RuntimeError("Prompt dispatcher is not initialized")
    return dispatcher


def get_upload_max_bytes() -> int:
    manager = get_model_manager()
    return manager.upload_max_bytes if manager else DEFAULT_MAX_UPLOAD_BYTES
