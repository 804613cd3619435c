"""API v1."""

from mobile_backend.api.v1.routes import router

__all__ = ["router"]
