"""API interface for taskforest.

This module exports the FastAPI router and app factory.
"""

from taskforest.interfaces.api.routes import create_app, router

__all__ = ["router", "create_app"]
