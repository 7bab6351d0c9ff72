"""
FastAPI application layer for the dashlight analysis pipeline.

This module provides the HTTP endpoint that accepts a dashboard photo and/or a
question, validates the upload by content and forwards the assembled prompt
to the Gemini backend.
"""

__version__ = "1.0.0"
