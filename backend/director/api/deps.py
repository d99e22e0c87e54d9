"""
Shared FastAPI dependencies — single source of truth for DI.

All routers should import get_registry from HERE, not reach into
``app.state`` themselves.
"""

from fastapi import Request

from director.core.registry import SessionRegistry

__all__ = ["get_registry"]


def get_registry(request: Request) -> SessionRegistry:
    """Return the process-wide session registry created at startup."""
    return request.app.state.registry
