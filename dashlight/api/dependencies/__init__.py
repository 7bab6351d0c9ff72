"""
FastAPI dependencies for request processing.

Dependencies provide reusable logic that can be injected into API endpoints,
such as the shared dispatcher and the upload acceptance limits.
"""
