"""
Common API models used across different endpoints.

These models represent shared concepts like errors and health status.
"""

from pydantic import BaseModel, Field
from typing import Dict

class ErrorResponse(BaseModel):
    """Standard error response format."""
    error: str = Field(..., description="Client-facing error message")

class HealthStatus(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Service status")
    version: str = Field(..., description="API version")
    uptime: float = Field(..., description="Uptime in seconds")
    dependencies: Dict[str, str] = Field(..., description="Status of external dependencies")
