"""Expose API endpoint routers."""

from app.api.endpoints import restaurants

__all__ = ["restaurants"]
