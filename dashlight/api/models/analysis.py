"""
API models for the dashboard analysis endpoint.

The request arrives as multipart form data (an optional ``image`` file and an
optional ``text`` field), so only the response needs a schema here.
"""

from pydantic import BaseModel, Field

class AnalysisResponse(BaseModel):
    """Successful analysis: the model's answer, verbatim."""
    response: str = Field(..., description="Text answer returned by the model")
