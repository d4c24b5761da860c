"""HTTP API module."""

from .router import init_router, router

__all__ = ["init_router", "router"]
