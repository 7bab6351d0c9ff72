#!/usr/bin/env python3
"""
Development server launcher for the dashlight API.

This script starts the FastAPI server with reload enabled for development.
For production, run the ASGI app (dashlight.api.main:app) under a proper server deployment.
"""

import os
import uvicorn
from dotenv import load_dotenv

load_dotenv()

if __name__ == "__main__":
    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "3000"))

    print("Starting dashlight API Development Server")
    print(f"Server will be available at: http://localhost:{port}")
    print(f"API documentation at: http://localhost:{port}/docs")
    print("\n" + "="*50 + "\n")

    uvicorn.run(
        "dashlight.api.main:app",
        host=host,
        port=port,
        reload=True,     # Auto-reload on code changes (development only)
        log_level=os.environ.get("LOG_LEVEL", "info").lower()
    )
